"""Tests for EncodingPlanner and the string-level encoders."""

import pytest

from src.config.rfc2047_config import Rfc2047Config
from src.models.encoded_word import ENCWORD_LEN_MAX, EncodedWord, EncodeStatus, Scheme
from src.models.encoding_plan import Fold, Region
from src.services.rfc2047.decoder import decode_header
from src.services.rfc2047.encoder import (
    EncodingPlanner,
    encode_display_name,
    encode_string,
    find_region,
    next_word_end,
    previous_word_start,
    rfc2047_encode,
)
from src.services.rfc2047.scanner import find_encoded_word
from src.services.rfc2047.word_decoder import b_decode, parse_encoded_word, q_decode


def _tokens(value: bytes) -> list:
    """Return every encoded word found in value."""
    tokens = []
    pos = 0
    while True:
        span = find_encoded_word(value, pos)
        if span is None:
            return tokens
        tokens.append(value[span[0] : span[1]])
        pos = span[1]


class TestFindRegion:
    """Test locating the text that must be encoded."""

    def test_plain_ascii(self):
        """Test nothing is encoded in plain ASCII."""
        assert find_region(b"Hello world", None) is None

    def test_eight_bit_bytes(self):
        """Test the region spans the first to the last 8-bit byte."""
        assert find_region("a é b ü c".encode("utf-8"), None) == Region(2, 8)

    def test_encoded_word_lookalike(self):
        """Test "=?" at a word start must be encoded."""
        assert find_region(b"a =?b", None) == Region(2, 2)
        assert find_region(b"=?b", None) == Region(0, 0)

    def test_embedded_marker_ignored(self):
        """Test "=?" inside a word is left alone."""
        assert find_region(b"a=?b", None) is None

    def test_specials_widen_region(self):
        """Test specials on either side extend the region."""
        data = "x, é; y".encode("utf-8")
        assert find_region(data, b",;") == Region(1, 5)

    def test_specials_alone_need_no_encoding(self):
        """Test specials without 8-bit text leave the value unencoded."""
        assert find_region(b"Doe, John", b",") is None


class TestWordBoundaries:
    """Test whitespace-aligned word steps."""

    def test_previous_word_start(self):
        """Test stepping back over white space and one word."""
        assert previous_word_start(b"ab cd ef", 6) == 3
        assert previous_word_start(b"ab cd ef", 3) == 0

    def test_next_word_end(self):
        """Test stepping forward over white space and one word."""
        assert next_word_end(b"ab cd ef", 2) == 5
        assert next_word_end(b"ab cd ef", 5) == 8


class TestEncodingPlanner:
    """Test planning encoded words for a header value."""

    @pytest.fixture
    def planner(self):
        """Create an EncodingPlanner with default settings."""
        return EncodingPlanner(Rfc2047Config())

    def test_ascii_passes_through(self, planner):
        """Test plain ASCII is returned unchanged."""
        result = planner.encode(b"Hello world", 0, "utf-8", ["utf-8"])
        assert result.value == b"Hello world"
        assert result.status == EncodeStatus.CLEAN
        assert result.plan.words == []

    def test_single_word(self, planner):
        """Test a short value becomes one Q encoded word."""
        result = planner.encode("Café is ready".encode("utf-8"), 0, "utf-8", ["utf-8"])
        assert result.value == b"=?UTF-8?Q?Caf=C3=A9_is_ready?="
        assert result.status == EncodeStatus.CLEAN
        assert result.plan.region == Region(0, 14)

    def test_shortest_candidate_is_used(self, planner):
        """Test the shorter charset labels the word."""
        result = planner.encode("Café".encode("utf-8"), 0, "utf-8", ["us-ascii", "iso-8859-1", "utf-8"])
        assert result.value == b"=?ISO-8859-1?Q?Caf=E9?="

    def test_no_candidate_charset(self, planner):
        """Test the source charset labels the word when no candidate fits."""
        result = planner.encode("Café".encode("utf-8"), 0, "utf-8", ["us-ascii"])
        assert result.status == EncodeStatus.NO_TARGET_CHARSET
        assert result.value == b"=?utf-8?B?Q2Fmw6k=?="

    def test_unconvertible_source(self, planner):
        """Test 8-bit data that is not in its declared charset is labelled unknown-8bit."""
        result = planner.encode(b"Caf\xe9", 0, "us-ascii", ["utf-8"])
        assert result.status == EncodeStatus.SOURCE_NOT_CONVERTIBLE
        assert result.value == b"=?unknown-8bit?Q?Caf=E9?="

    def test_iso_2022_jp_uses_b(self, planner):
        """Test ISO-2022-JP words are B encoded."""
        result = planner.encode("日本語".encode("utf-8"), 0, "utf-8", ["iso-2022-jp"])
        assert result.value.startswith(b"=?ISO-2022-JP?B?")
        assert decode_header(result.value.decode("ascii")) == "日本語"

    def test_literal_marker_is_encoded(self, planner):
        """Test text that looks like an encoded word is protected."""
        value = "price =?x"
        result = planner.encode(value.encode("utf-8"), 0, "utf-8", ["utf-8"])
        assert result.value.startswith(b"=?UTF-8?")
        assert decode_header(result.value.decode("ascii")) == value

    def test_long_suffix_splits_region(self, planner):
        """Test a long ASCII tail is taken into the region and split over two words."""
        value = "Ü " + "x" * 80
        result = planner.encode(value.encode("utf-8"), 0, "utf-8", ["utf-8"])

        words = result.plan.words
        assert len(words) == 2
        assert isinstance(result.plan.segments[1], Fold)
        assert all(len(word) <= ENCWORD_LEN_MAX for word in words)
        assert decode_header(result.value.decode("ascii")) == value

    def test_prefix_kept_when_region_does_not_fit(self, planner):
        """Test ASCII before a long 8-bit region stays literal."""
        value = "Subject line: " + "ü" * 60
        result = planner.encode(value.encode("utf-8"), 0, "utf-8", ["utf-8"])

        assert result.value.startswith(b"Subject line: =?UTF-8?")
        assert decode_header(result.value.decode("ascii")) == value

    def test_region_grows_past_short_first_word(self, planner):
        """Test the region takes in the next word when the first one leaves no room."""
        value = ("é " + "x" * 50).encode("utf-8")

        result = planner.encode(value, 70, "utf-8", ["utf-8"])

        assert result.plan.region == Region(0, len(value))
        words = _tokens(result.value)
        assert len(words) == 2
        assert all(len(word) <= ENCWORD_LEN_MAX for word in words)
        assert decode_header(result.value.decode("ascii")) == value.decode("utf-8")

    def test_words_are_folded(self, planner):
        """Test consecutive words are separated by a fold."""
        value = "Grüße aus München, schöne Grüße! " * 6
        result = planner.encode(value.strip().encode("utf-8"), 0, "utf-8", ["utf-8"])

        assert b"?=\n\t=?" in result.value
        for segment, following in zip(result.plan.segments, result.plan.segments[1:]):
            if isinstance(segment, EncodedWord) and isinstance(following, EncodedWord):
                pytest.fail("encoded words must be separated by a fold")


class TestEncodedOutputProperties:
    """Test properties every encoded value has."""

    VALUES = [
        "Grüße aus München, schöne Grüße! " * 6,
        "日本語のテキストです。" * 8,
        "Ünïcödé ☃ " * 20,
        "Mixed ascii and ü and more ascii text " * 4,
        "ä" * 200,
    ]

    @pytest.mark.parametrize("value", VALUES)
    @pytest.mark.parametrize("charsets", [["utf-8"], ["us-ascii", "iso-8859-1", "utf-8"]])
    def test_round_trip(self, value, charsets):
        """Test decoding the encoded value gives back the original text."""
        result = rfc2047_encode(value.encode("utf-8"), charsets=charsets)
        assert decode_header(result.value.decode("ascii")) == value

    @pytest.mark.parametrize("value", VALUES)
    def test_word_length_limit(self, value):
        """Test no token is longer than 75 bytes."""
        result = rfc2047_encode(value.encode("utf-8"), column=20)
        tokens = _tokens(result.value)
        assert tokens
        assert all(len(token) <= ENCWORD_LEN_MAX for token in tokens)

    @pytest.mark.parametrize("value", VALUES)
    def test_payload_shape(self, value):
        """Test Q payloads have no spaces and B payloads are padded to 4."""
        result = rfc2047_encode(value.encode("utf-8"))
        for token in _tokens(result.value):
            _, scheme, payload = parse_encoded_word(token)
            if scheme is Scheme.Q:
                assert b" " not in payload
            else:
                assert len(payload) % 4 == 0

    @pytest.mark.parametrize("value", VALUES)
    def test_words_hold_whole_characters(self, value):
        """Test no word splits a UTF-8 sequence."""
        result = rfc2047_encode(value.encode("utf-8"), charsets=["utf-8"])
        for token in _tokens(result.value):
            _, scheme, payload = parse_encoded_word(token)
            data = q_decode(payload) if scheme is Scheme.Q else b_decode(payload)
            data.decode("utf-8")


class TestEncodeString:
    """Test the string-level entry points."""

    def test_encode_string(self):
        """Test encoding text with a configured candidate list."""
        config = Rfc2047Config(send_charsets=["utf-8"])
        assert encode_string("Café is ready", config) == "=?UTF-8?Q?Caf=C3=A9_is_ready?="

    def test_encode_string_ascii(self):
        """Test ASCII text is unchanged."""
        assert encode_string("Meeting at noon") == "Meeting at noon"

    def test_encode_string_empty(self):
        """Test empty values are returned as is."""
        assert encode_string("") == ""

    def test_empty_candidate_list_uses_utf8(self):
        """Test utf-8 is the fallback candidate."""
        config = Rfc2047Config(send_charsets=[])
        assert encode_string("Café", config) == "=?UTF-8?B?Q2Fmw6k=?="

    def test_encode_display_name(self):
        """Test specials in a display name are encoded with it."""
        assert encode_display_name("Doe, John Ü") == "=?ISO-8859-1?Q?Doe=2C_John_=DC?="

    def test_encode_display_name_with_tag(self):
        """Test the header tag sets the starting column."""
        assert encode_display_name("Doe, John Ü", tag="From") == "=?ISO-8859-1?Q?Doe=2C_John_=DC?="

    def test_encode_display_name_ascii(self):
        """Test an ASCII display name with specials is not encoded."""
        assert encode_display_name("Doe, John") == "Doe, John"

    def test_encode_string_unrepresentable_character(self):
        """Test characters outside the internal charset do not raise."""
        config = Rfc2047Config(charset="iso-8859-1")
        result = encode_string("€ hi", config)
        assert result.endswith("hi")
