"""Tests for charset conversion."""

import pytest

from src.services.transcoding import TextTranscoder, TranscodeError, canonical_charset, is_us_ascii


class TestTextTranscoder:
    """Test stateless charset conversion."""

    @pytest.fixture
    def transcoder(self):
        """Create a TextTranscoder instance."""
        return TextTranscoder()

    def test_convert(self, transcoder):
        """Test converting UTF-8 to ISO-8859-1."""
        assert transcoder.convert("Café".encode("utf-8"), "utf-8", "iso-8859-1") == b"Caf\xe9"

    def test_convert_untranslatable(self, transcoder):
        """Test characters missing from the target charset raise."""
        with pytest.raises(TranscodeError):
            transcoder.convert("Café".encode("utf-8"), "utf-8", "us-ascii")

    def test_convert_invalid_source(self, transcoder):
        """Test invalid source bytes raise."""
        with pytest.raises(TranscodeError):
            transcoder.convert(b"Caf\xe9", "utf-8", "utf-8")

    def test_convert_unknown_charset(self, transcoder):
        """Test unknown charsets raise."""
        with pytest.raises(TranscodeError):
            transcoder.convert(b"abc", "utf-8", "x-no-such-charset")

    def test_convert_is_repeatable(self, transcoder):
        """Test converting the same bytes twice gives the same result."""
        data = "日本語".encode("utf-8")
        first = transcoder.convert(data, "utf-8", "iso-2022-jp")
        assert transcoder.convert(data, "utf-8", "iso-2022-jp") == first

    def test_convert_prefix_fits(self, transcoder):
        """Test a buffer within the limit converts completely."""
        data = "éé".encode("utf-8")
        assert transcoder.convert_prefix(data, "utf-8", "iso-8859-1", 2) == (b"\xe9\xe9", 4)

    def test_convert_prefix_overflow(self, transcoder):
        """Test overflow reports how many source bytes fit."""
        data = "ééé".encode("utf-8")
        assert transcoder.convert_prefix(data, "utf-8", "iso-8859-1", 2) == (None, 4)


class TestCharsetNames:
    """Test charset name helpers."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("utf-8", "UTF-8"),
            ("utf8", "UTF-8"),
            ("latin1", "ISO-8859-1"),
            ("iso-8859-15", "ISO-8859-15"),
            ("us-ascii", "US-ASCII"),
            ("iso-2022-jp", "ISO-2022-JP"),
            ("cp1252", "windows-1252"),
            ("unknown-8bit", "unknown-8bit"),
        ],
    )
    def test_canonical_charset(self, name, expected):
        """Test charset names map to their MIME names."""
        assert canonical_charset(name) == expected

    def test_is_us_ascii(self):
        """Test US-ASCII detection through aliases."""
        assert is_us_ascii("us-ascii")
        assert is_us_ascii("ASCII")
        assert not is_us_ascii("utf-8")
        assert not is_us_ascii("unknown-8bit")
        assert not is_us_ascii(None)
