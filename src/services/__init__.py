"""Business logic services"""

from .rfc2047 import DecodingAssembler, EncodingPlanner, decode_header, encode_string
from .transcoding import TextTranscoder

__all__ = [
    "DecodingAssembler",
    "EncodingPlanner",
    "decode_header",
    "encode_string",
    "TextTranscoder",
]
