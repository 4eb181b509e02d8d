"""Exceptions raised by charset conversion."""


class Rfc2047Error(Exception):
    """Base exception for RFC 2047 encoding and decoding errors."""

    pass


class TranscodeError(Rfc2047Error):
    """Raised when a charset pair is unsupported or bytes cannot be converted."""

    pass
