"""RFC 2047 header decoding: rebuild a header value from encoded words."""

import logging
from typing import Optional

from src.config.rfc2047_config import Rfc2047Config
from src.services.transcoding.base import TranscodeError
from src.services.transcoding.transcoder import TextTranscoder
from src.utils.unicode_utils import LINEAR_WHITE_SPACE, encode_text, lwslen, lwsrlen

from .base import MalformedWordError
from .scanner import find_encoded_word
from .word_decoder import WordDecoder

logger = logging.getLogger(__name__)

# Decoded output never grows past this multiple of the input
_EXPANSION_LIMIT = 4


def convert_nonmime_string(
    data: bytes, config: Optional[Rfc2047Config] = None, transcoder: Optional[TextTranscoder] = None
) -> tuple[bytes, bool]:
    """
    Convert header text without encoded words from an assumed charset.

    Each assumed charset is tried in order; the first that converts
    the whole text wins.

    Returns:
        (text in the internal charset, True) on success, or
        (data unchanged, False) if no assumed charset fits
    """
    config = config or Rfc2047Config()
    transcoder = transcoder or TextTranscoder()

    if not data:
        return data, True

    for charset in config.assumed_charsets:
        try:
            return transcoder.convert(data, charset, config.charset), True
        except TranscodeError as e:
            logger.debug("Header is not %s: %s", charset, e)
            continue

    return data, False


def _is_white_space(data: bytes) -> bool:
    return all(c in LINEAR_WHITE_SPACE for c in data)


class DecodingAssembler:
    """
    Decode every encoded word in a header value and stitch the literal
    text between them back together.
    """

    def __init__(self, config: Optional[Rfc2047Config] = None, transcoder: Optional[TextTranscoder] = None):
        """
        Initialize assembler.

        Args:
            config: Decoding settings (default: Rfc2047Config())
            transcoder: Charset converter (default: TextTranscoder)
        """
        self.config = config or Rfc2047Config()
        self.transcoder = transcoder or TextTranscoder()
        self.word_decoder = WordDecoder(self.config.charset, self.transcoder)

    def decode(self, data: bytes) -> bytes:
        """
        Decode a header value.

        Args:
            data: Raw header value in the internal charset

        Returns:
            Decoded header value in the internal charset

        Notes:
            - Words that fail to decode are kept as they appear in data
            - Text with no encoded words at all is converted from the
              assumed charsets, if any are configured
        """
        if not data:
            return data

        compat = self.config.ignore_linear_white_space
        out = bytearray()
        found_encoded = False
        s = 0

        while s < len(data):
            span = find_encoded_word(data, s)
            if span is None:
                tail = data[s:]
                if compat and found_encoded:
                    m = lwslen(tail)
                    if m:
                        if m != len(tail):
                            out += b" "
                        tail = tail[m:]
                if not found_encoded and self.config.assumed_charsets:
                    tail, _ = convert_nonmime_string(tail, self.config, self.transcoder)
                out += tail
                break

            p, q = span
            if p != s:
                self._append_literal(out, data[s:p], found_encoded)

            token = data[p:q]
            try:
                out += self.word_decoder.decode(token)
            except MalformedWordError as e:
                logger.debug("Keeping malformed encoded word: %s", e)
                out += token
            found_encoded = True
            s = q

        return bytes(out[: _EXPANSION_LIMIT * len(data)])

    def _append_literal(self, out: bytearray, literal: bytes, found_encoded: bool) -> None:
        """Copy the text preceding an encoded word, folding white space as configured."""
        if not self.config.ignore_linear_white_space:
            # White space between two encoded words is dropped
            if not found_encoded or not _is_white_space(literal):
                out += literal
            return

        if found_encoded:
            m = lwslen(literal)
            if m:
                if m != len(literal):
                    out += b" "
                literal = literal[m:]

        m = len(literal) - lwsrlen(literal)
        if m:
            out += literal[:m]
            if m != len(literal):
                out += b" "


def decode_bytes(data: bytes, config: Optional[Rfc2047Config] = None) -> bytes:
    """Decode a header value given as bytes in the internal charset."""
    return DecodingAssembler(config).decode(data)


def decode_header(text: str, config: Optional[Rfc2047Config] = None) -> str:
    """
    Decode any RFC 2047 encoded words in a header value.

    Args:
        text: Header value
        config: Decoding settings (default: Rfc2047Config())

    Returns:
        Decoded header value

    Examples:
        >>> decode_header("=?UTF-8?Q?Caf=C3=A9_is_ready?=")
        'Café is ready'
    """
    if not text:
        return ""
    config = config or Rfc2047Config()
    data = encode_text(text, config.charset)
    return DecodingAssembler(config).decode(data).decode(config.charset, errors="replace")


def decode_display_name(name: Optional[str], config: Optional[Rfc2047Config] = None) -> str:
    """
    Decode the display name of an address.

    Names are only touched if they contain an encoded word or an
    assumed charset is configured.
    """
    if not name:
        return ""
    config = config or Rfc2047Config()
    if "=?" in name or config.assumed_charsets:
        return decode_header(name, config)
    return name
