"""Decode a single encoded word."""

import logging
from typing import Optional

from src.models.encoded_word import Scheme
from src.services.transcoding.base import TranscodeError
from src.services.transcoding.transcoder import TextTranscoder
from src.utils.unicode_utils import base64val, filter_unprintable, hexval

from .base import MalformedWordError

logger = logging.getLogger(__name__)


def q_decode(payload: bytes) -> bytes:
    """Decode Q encoded text; "=" not followed by two hex digits is kept as is."""
    out = bytearray()
    i = 0
    n = len(payload)
    while i < n:
        c = payload[i]
        if c == 0x5F:
            out.append(0x20)
        elif c == 0x3D and i + 2 < n and hexval(payload[i + 1]) != -1 and hexval(payload[i + 2]) != -1:
            out.append((hexval(payload[i + 1]) << 4) | hexval(payload[i + 2]))
            i += 2
        else:
            out.append(c)
        i += 1
    return bytes(out)


def b_decode(payload: bytes) -> bytes:
    """
    Decode base64 text, skipping bytes outside the alphabet.

    Decoding stops at the first "=" padding byte.
    """
    out = bytearray()
    pending_bits = 0
    bit_count = 0
    for c in payload:
        if c == 0x3D:
            break
        value = base64val(c)
        if value == -1:
            continue
        pending_bits = (pending_bits << 6) | value
        bit_count += 6
        if bit_count >= 8:
            bit_count -= 8
            out.append((pending_bits >> bit_count) & 0xFF)
            pending_bits &= (1 << bit_count) - 1
    return bytes(out)


def parse_encoded_word(token: bytes) -> tuple[Optional[str], Scheme, bytes]:
    """
    Split an encoded word into charset, scheme and payload.

    An RFC 2231 language suffix ("charset*lang") is dropped.

    Raises:
        MalformedWordError: If token is not an encoded word
    """
    if not token.startswith(b"=?") or not token.endswith(b"?=") or len(token) < 7:
        raise MalformedWordError(f"Not an encoded word: {token!r}")

    charset, sep, rest = token[2:-2].partition(b"?")
    if not sep or len(rest) < 2 or rest[1] != 0x3F:
        raise MalformedWordError(f"Missing encoding in {token!r}")

    letter = chr(rest[0]).upper()
    if letter == "Q":
        scheme = Scheme.Q
    elif letter == "B":
        scheme = Scheme.B
    else:
        raise MalformedWordError(f"Unknown encoding {chr(rest[0])!r} in {token!r}")

    charset = charset.split(b"*", 1)[0]
    name = charset.decode("ascii", errors="replace") if charset else None
    return name, scheme, rest[2:]


class WordDecoder:
    """Turn one encoded word into text in the internal charset."""

    def __init__(self, charset: str = "utf-8", transcoder: Optional[TextTranscoder] = None):
        """
        Initialize decoder.

        Args:
            charset: Internal working charset
            transcoder: Charset converter (default: TextTranscoder)
        """
        self.charset = charset
        self.transcoder = transcoder or TextTranscoder()

    def decode(self, token: bytes) -> bytes:
        """
        Decode an encoded word.

        Args:
            token: The whole "=?charset?X?payload?=" token

        Returns:
            Decoded text in the internal charset, control characters removed

        Raises:
            MalformedWordError: If token cannot be parsed
        """
        charset, scheme, payload = parse_encoded_word(token)

        if scheme is Scheme.Q:
            data = q_decode(payload)
        else:
            data = b_decode(payload)

        if charset:
            try:
                data = self.transcoder.convert(data, charset, self.charset)
            except TranscodeError as e:
                logger.debug("Keeping undecoded bytes of %r: %s", token, e)

        return filter_unprintable(data, self.charset)
