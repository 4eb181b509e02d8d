"""Utility functions"""

from .unicode_utils import (
    base64val,
    filter_unprintable,
    encode_text,
    hexval,
    is_continuation_byte,
    is_header_space,
    lwslen,
    lwsrlen,
)

__all__ = [
    "base64val",
    "filter_unprintable",
    "encode_text",
    "hexval",
    "is_continuation_byte",
    "is_header_space",
    "lwslen",
    "lwsrlen",
]
