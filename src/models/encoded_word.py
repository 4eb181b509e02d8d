"""Encoded word data model."""

from dataclasses import dataclass
from enum import Enum, IntEnum

ENCWORD_LEN_MAX = 75
ENCWORD_LEN_MIN = 9  # len("=?.?.?.?=")


class Scheme(Enum):
    """Payload encoding of an encoded word."""

    Q = "Q"
    B = "B"


class EncodeStatus(IntEnum):
    """Informational status returned by the encoder."""

    CLEAN = 0
    SOURCE_NOT_CONVERTIBLE = 1
    NO_TARGET_CHARSET = 2


@dataclass(frozen=True)
class EncodedWord:
    """
    One RFC 2047 encoded word.

    Attributes:
        charset: Charset label written into the token
        scheme: Q or B payload encoding
        payload: Already-encoded payload bytes (ASCII)
    """

    charset: str
    scheme: Scheme
    payload: bytes

    def __post_init__(self):
        """Validate fields after initialization."""
        if not self.charset:
            raise ValueError("charset is required")
        if len(self) > ENCWORD_LEN_MAX:
            raise ValueError(f"Encoded word exceeds {ENCWORD_LEN_MAX} bytes: {len(self)}")

    def __len__(self) -> int:
        return ENCWORD_LEN_MIN - 2 + len(self.charset) + len(self.payload)

    def to_bytes(self) -> bytes:
        return b"=?%s?%s?%s?=" % (
            self.charset.encode("ascii"),
            self.scheme.value.encode("ascii"),
            self.payload,
        )


@dataclass(frozen=True)
class Fits:
    """A block fits in one encoded word of the given length."""

    scheme: Scheme
    length: int


@dataclass(frozen=True)
class TooBig:
    """A block does not fit; max_length bounds how much could."""

    max_length: int
