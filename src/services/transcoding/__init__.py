"""Charset conversion services."""

from .base import TranscodeError
from .transcoder import TextTranscoder, canonical_charset, is_us_ascii

__all__ = ["TranscodeError", "TextTranscoder", "canonical_charset", "is_us_ascii"]
