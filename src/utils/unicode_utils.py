"""Byte-level helpers shared by the RFC 2047 encoder and decoder."""

import string
import unicodedata

LINEAR_WHITE_SPACE = b" \t\r\n"
HEADER_SPACE = b" \t"

BASE64_ALPHABET = (string.ascii_uppercase + string.ascii_lowercase + string.digits + "+/").encode("ascii")
_BASE64_VALUES = {c: i for i, c in enumerate(BASE64_ALPHABET)}
_HEX_VALUES = {c: int(chr(c), 16) for c in b"0123456789abcdefABCDEF"}


def is_continuation_byte(c: int) -> bool:
    """Return True for a UTF-8 continuation byte (10xxxxxx)."""
    return (c & 0xC0) == 0x80


def is_header_space(data: bytes, index: int) -> bool:
    """
    Return True if data[index] is a space or tab.

    Positions past the end of data count as space, so a run of text
    ending the value is treated as whitespace-terminated.
    """
    if index >= len(data):
        return True
    return data[index] in HEADER_SPACE


def hexval(c: int) -> int:
    """Return the value of an ASCII hex digit, or -1."""
    return _HEX_VALUES.get(c, -1)


def base64val(c: int) -> int:
    """Return the value of a base64 alphabet byte, or -1."""
    return _BASE64_VALUES.get(c, -1)


def lwslen(data: bytes) -> int:
    """
    Length of the linear white space leading data.

    Returns 0 if the run ends with CR or LF, since linear white space
    never ends with a line break.

    Examples:
        >>> lwslen(b"  text")
        2
        >>> lwslen(b" \\r\\n")
        0
    """
    n = len(data)
    if n == 0:
        return 0
    length = n
    for i, c in enumerate(data):
        if c not in LINEAR_WHITE_SPACE:
            length = i
            break
    if length == 0:
        return 0
    if data[length - 1] in b"\r\n":
        return 0
    return length


def lwsrlen(data: bytes) -> int:
    """
    Length of the linear white space trailing data.

    Examples:
        >>> lwsrlen(b"text  ")
        2
        >>> lwsrlen(b"text\\r\\n")
        0
    """
    n = len(data)
    if n == 0:
        return 0
    if data[-1] in b"\r\n":
        return 0
    length = n
    for i in range(n - 1, -1, -1):
        if data[i] not in LINEAR_WHITE_SPACE:
            length = n - 1 - i
            break
    return length


def filter_unprintable(data: bytes, charset: str) -> bytes:
    """
    Strip control characters from text in the given charset.

    Text that does not decode in the charset is filtered byte-wise,
    dropping ASCII control bytes only.
    """
    try:
        text = data.decode(charset)
    except (UnicodeDecodeError, LookupError):
        return bytes(c for c in data if 0x20 <= c != 0x7F)
    return "".join(ch for ch in text if unicodedata.category(ch) != "Cc").encode(charset)


def encode_text(text: str, charset: str) -> bytes:
    """
    Encode header text into the internal charset without failing.

    Surrogate-escaped bytes are restored; characters the charset cannot
    represent, and lone surrogates, become replacement characters.

    Examples:
        >>> encode_text("Caf\\udce9", "utf-8")
        b'Caf\\xe9'
        >>> encode_text("€ 5", "iso-8859-1")
        b'? 5'
    """
    try:
        return text.encode(charset, errors="surrogateescape")
    except UnicodeEncodeError:
        return text.encode(charset, errors="replace")
