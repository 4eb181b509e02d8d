"""Encoding plan data model."""

from dataclasses import dataclass, field
from typing import Optional, Union

from .encoded_word import EncodedWord, EncodeStatus

FOLD_MARKER = b"\n\t"


@dataclass(frozen=True)
class Region:
    """Half-open byte range [start, end) that must be encoded."""

    start: int
    end: int

    def __post_init__(self):
        """Validate fields after initialization."""
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid region: [{self.start}, {self.end})")

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class Fold:
    """Line break inserted between two encoded words."""

    def to_bytes(self) -> bytes:
        return FOLD_MARKER


Segment = Union[bytes, EncodedWord, Fold]


@dataclass
class EncodingPlan:
    """
    Ordered literal text, encoded words and fold markers for one header value.

    Attributes:
        segments: Plan segments in output order
        region: Span of the source that was encoded (None if nothing was)
    """

    segments: list = field(default_factory=list)
    region: Optional[Region] = None

    def add_literal(self, data: bytes) -> None:
        if data:
            self.segments.append(bytes(data))

    def add_word(self, word: EncodedWord) -> None:
        self.segments.append(word)

    def add_fold(self) -> None:
        self.segments.append(Fold())

    @property
    def words(self) -> list:
        return [s for s in self.segments if isinstance(s, EncodedWord)]

    def to_bytes(self) -> bytes:
        return b"".join(s if isinstance(s, bytes) else s.to_bytes() for s in self.segments)


@dataclass
class EncodeResult:
    """
    Result of encoding one header value.

    Attributes:
        plan: Assembled encoding plan
        status: CLEAN, SOURCE_NOT_CONVERTIBLE or NO_TARGET_CHARSET
    """

    plan: EncodingPlan
    status: EncodeStatus = EncodeStatus.CLEAN

    @property
    def value(self) -> bytes:
        return self.plan.to_bytes()
