"""Stateless charset conversion built on Python codecs."""

import codecs
from typing import Optional

from .base import TranscodeError

# Preferred MIME names keyed by Python codec name
_MIME_NAMES = {
    "ascii": "US-ASCII",
    "utf-8": "UTF-8",
    "utf-16": "UTF-16",
    "utf-16-be": "UTF-16BE",
    "utf-16-le": "UTF-16LE",
    "utf-7": "UTF-7",
    "iso8859-1": "ISO-8859-1",
    "iso8859-2": "ISO-8859-2",
    "iso8859-3": "ISO-8859-3",
    "iso8859-4": "ISO-8859-4",
    "iso8859-5": "ISO-8859-5",
    "iso8859-6": "ISO-8859-6",
    "iso8859-7": "ISO-8859-7",
    "iso8859-8": "ISO-8859-8",
    "iso8859-9": "ISO-8859-9",
    "iso8859-10": "ISO-8859-10",
    "iso8859-13": "ISO-8859-13",
    "iso8859-14": "ISO-8859-14",
    "iso8859-15": "ISO-8859-15",
    "iso8859-16": "ISO-8859-16",
    "koi8-r": "KOI8-R",
    "koi8-u": "KOI8-U",
    "cp1250": "windows-1250",
    "cp1251": "windows-1251",
    "cp1252": "windows-1252",
    "cp1253": "windows-1253",
    "cp1254": "windows-1254",
    "cp1255": "windows-1255",
    "cp1256": "windows-1256",
    "cp1257": "windows-1257",
    "cp1258": "windows-1258",
    "iso2022_jp": "ISO-2022-JP",
    "iso2022_kr": "ISO-2022-KR",
    "euc_jp": "EUC-JP",
    "euc_kr": "EUC-KR",
    "shift_jis": "Shift_JIS",
    "gb2312": "GB2312",
    "gbk": "GBK",
    "gb18030": "GB18030",
    "big5": "Big5",
    "big5hkscs": "Big5-HKSCS",
    "tis-620": "TIS-620",
}


class TextTranscoder:
    """
    Converts byte strings between two named charsets.

    Every call opens a fresh codec, converts one buffer and discards
    it, so repeating a conversion on the same bytes always yields the
    same result.
    """

    def convert(self, data: bytes, from_charset: str, to_charset: str) -> bytes:
        """
        Convert data from one charset to another.

        Args:
            data: Bytes in from_charset
            from_charset: Source charset name
            to_charset: Target charset name

        Returns:
            Converted bytes

        Raises:
            TranscodeError: If a charset is unknown or data cannot be converted
        """
        try:
            return data.decode(from_charset).encode(to_charset)
        except LookupError as e:
            raise TranscodeError(f"Unsupported charset pair {from_charset} -> {to_charset}: {e}")
        except UnicodeError as e:
            raise TranscodeError(f"Cannot convert {from_charset} -> {to_charset}: {e}")

    def convert_prefix(
        self, data: bytes, from_charset: str, to_charset: str, limit: int
    ) -> tuple[Optional[bytes], int]:
        """
        Convert data unless the result would exceed limit bytes.

        Args:
            data: Bytes in from_charset, which must be stateless
            from_charset: Source charset name
            to_charset: Target charset name
            limit: Maximum size of the converted output

        Returns:
            (converted, len(data)) when the whole buffer fits, otherwise
            (None, consumed) where consumed is the number of source bytes
            that converted within limit

        Raises:
            TranscodeError: If a charset is unknown or data cannot be converted
        """
        converted = self.convert(data, from_charset, to_charset)
        if len(converted) <= limit:
            return converted, len(data)

        text = data.decode(from_charset)
        encoder = codecs.getincrementalencoder(to_charset)()
        consumed = 0
        produced = 0
        for ch in text:
            produced += len(encoder.encode(ch))
            if produced > limit:
                break
            consumed += len(ch.encode(from_charset))
        return None, consumed


def canonical_charset(name: str) -> str:
    """
    Return the standard MIME name for a charset.

    Examples:
        >>> canonical_charset("utf8")
        'UTF-8'
        >>> canonical_charset("latin1")
        'ISO-8859-1'
    """
    if not name:
        return name
    try:
        codec_name = codecs.lookup(name).name
    except LookupError:
        return name
    return _MIME_NAMES.get(codec_name, name)


def is_us_ascii(name: Optional[str]) -> bool:
    """Return True if the charset name denotes plain US-ASCII."""
    if not name:
        return False
    try:
        return codecs.lookup(name).name == "ascii"
    except LookupError:
        return False
