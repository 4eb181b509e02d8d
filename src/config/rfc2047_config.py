"""Configuration models for RFC 2047 header encoding."""

import codecs
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Bytes that must be Q-escaped inside an encoded word
MIME_SPECIALS = '@.,;:<>[]\\"()?/= \t'

# RFC 822 specials, forced into the encoded region for display names
RFC822_SPECIALS = '@.,:;<>[]\\"()'


def _split_charsets(value: Union[str, list, tuple, None]) -> tuple:
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.split(":")
    return tuple(name.strip() for name in value if name and name.strip())


class Rfc2047Config(BaseModel):
    """
    Read-only settings shared by every encode and decode call.

    Attributes:
        charset: Internal working charset
        send_charsets: Ordered candidate charsets for outbound encoding
        assumed_charsets: Fallback charsets for headers with no encoded words
        mime_specials: Bytes escaped inside Q-encoded words
        address_specials: Extra bytes forced into the encoded region
        ignore_linear_white_space: Legacy whitespace folding compatibility
    """

    model_config = ConfigDict(frozen=True)

    charset: str = "utf-8"
    send_charsets: tuple[str, ...] = ("us-ascii", "iso-8859-1", "utf-8")
    assumed_charsets: tuple[str, ...] = ()
    mime_specials: str = MIME_SPECIALS
    address_specials: str = RFC822_SPECIALS
    ignore_linear_white_space: bool = False

    @field_validator("send_charsets", "assumed_charsets", mode="before")
    def split_charset_list(cls, v):
        return _split_charsets(v)

    @field_validator("charset")
    def validate_charset(cls, v: str) -> str:
        if not v:
            raise ValueError("charset is required")
        try:
            codecs.lookup(v)
        except LookupError:
            raise ValueError(f"Unknown charset: {v}")
        return v

    @field_validator("mime_specials")
    def validate_mime_specials(cls, v: str) -> str:
        if not v.isascii():
            raise ValueError("mime_specials must be ASCII")
        # Q payloads are delimited by "?=" and escaped with "="
        for required in "?=":
            if required not in v:
                raise ValueError(f"mime_specials must contain {required!r}")
        return v

    @field_validator("address_specials")
    def validate_address_specials(cls, v: str) -> str:
        if not v.isascii():
            raise ValueError("address_specials must be ASCII")
        return v

    @property
    def mime_specials_bytes(self) -> bytes:
        return self.mime_specials.encode("ascii")

    @property
    def address_specials_bytes(self) -> bytes:
        return self.address_specials.encode("ascii")


class AppConfig(BaseModel):
    """Main application configuration."""

    schema_version: str = "1.0"
    rfc2047: Rfc2047Config = Field(default_factory=Rfc2047Config)

    @field_validator("schema_version")
    def validate_schema_version(cls, v: str) -> str:
        if not v:
            raise ValueError("schema_version is required")
        return v
