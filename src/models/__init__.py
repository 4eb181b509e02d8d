"""Data models for RFC 2047 encoding and decoding"""

from .encoded_word import (
    ENCWORD_LEN_MAX,
    ENCWORD_LEN_MIN,
    EncodedWord,
    EncodeStatus,
    Fits,
    Scheme,
    TooBig,
)
from .encoding_plan import FOLD_MARKER, EncodeResult, EncodingPlan, Fold, Region

__all__ = [
    "ENCWORD_LEN_MAX",
    "ENCWORD_LEN_MIN",
    "EncodedWord",
    "EncodeStatus",
    "Fits",
    "Scheme",
    "TooBig",
    "FOLD_MARKER",
    "EncodeResult",
    "EncodingPlan",
    "Fold",
    "Region",
]
