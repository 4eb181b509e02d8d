"""Locate encoded words in header text."""

from typing import Optional

# Bytes that end a charset name
_CHARSET_STOP = b'()<>@,;:"/[]?.='
_SCHEMES = b"BbQq"


def find_encoded_word(text: bytes, start: int = 0) -> Optional[tuple[int, int]]:
    """
    Find the first encoded word in text at or after start.

    Uses the grammar of RFC 2047 section 2, with two relaxations: the
    word need not be separated from its neighbours by white space, and
    the encoded text may contain unescaped spaces and question marks
    as long as a "?=" terminates it.

    Args:
        text: Header text
        start: Offset to start searching at

    Returns:
        (start, end) of the whole token, or None if there is none

    Examples:
        >>> find_encoded_word(b"Re: =?utf-8?q?caf=C3=A9?= ok")
        (4, 25)
        >>> find_encoded_word(b"=?utf-8?x?abc?=") is None
        True
    """
    n = len(text)
    q = start
    while True:
        p = text.find(b"=?", q)
        if p < 0:
            return None

        q = p + 2
        while q < n and 0x20 < text[q] < 0x7F and text[q] not in _CHARSET_STOP:
            q += 1
        if q + 2 >= n or text[q] != 0x3F or text[q + 1] not in _SCHEMES or text[q + 2] != 0x3F:
            continue

        q += 3
        while q < n and 0x20 <= text[q] < 0x7F and not (text[q] == 0x3F and text[q + 1 : q + 2] == b"="):
            q += 1
        if q + 1 >= n or text[q] != 0x3F or text[q + 1] != 0x3D:
            # Resume just before the failure point so a "=?" there is still seen
            q -= 1
            continue

        return p, q + 2
