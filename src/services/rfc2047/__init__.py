"""RFC 2047 encoded word services."""

from .base import MalformedWordError, OversizedBlockError, Rfc2047Error, TranscodeError
from .charset_selector import CharsetSelector
from .decoder import (
    DecodingAssembler,
    convert_nonmime_string,
    decode_bytes,
    decode_display_name,
    decode_header,
)
from .encoder import EncodingPlanner, encode_display_name, encode_string, find_region, rfc2047_encode
from .scanner import find_encoded_word
from .word_decoder import WordDecoder
from .word_encoder import WordEncoder
from .word_sizer import WordSizer

__all__ = [
    "MalformedWordError",
    "OversizedBlockError",
    "Rfc2047Error",
    "TranscodeError",
    "CharsetSelector",
    "DecodingAssembler",
    "convert_nonmime_string",
    "decode_bytes",
    "decode_display_name",
    "decode_header",
    "EncodingPlanner",
    "encode_display_name",
    "encode_string",
    "find_region",
    "rfc2047_encode",
    "find_encoded_word",
    "WordDecoder",
    "WordEncoder",
    "WordSizer",
]
