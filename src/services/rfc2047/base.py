"""Exceptions for RFC 2047 encoding and decoding."""

from src.services.transcoding.base import Rfc2047Error, TranscodeError


class MalformedWordError(Rfc2047Error):
    """Raised when an encoded word cannot be parsed or decoded."""

    pass


class OversizedBlockError(Rfc2047Error):
    """Raised when no non-empty block fits in a single encoded word."""

    pass


__all__ = ["Rfc2047Error", "TranscodeError", "MalformedWordError", "OversizedBlockError"]
