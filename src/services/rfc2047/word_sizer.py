"""Fit a block of text into a single encoded word."""

from typing import Optional, Union

from src.models.encoded_word import ENCWORD_LEN_MAX, ENCWORD_LEN_MIN, Fits, Scheme, TooBig
from src.services.transcoding.transcoder import TextTranscoder

# Largest payload source a single word can ever carry
_BLOCK_CAPACITY = ENCWORD_LEN_MAX - ENCWORD_LEN_MIN + 1


def q_escape_count(data: bytes, specials: bytes) -> int:
    """Number of bytes the Q encoding writes as =XX."""
    count = 0
    for c in data:
        if c >= 0x7F or c < 0x20 or c == 0x5F or (c != 0x20 and c in specials):
            count += 1
    return count


class WordSizer:
    """
    Decide whether a block fits in one encoded word and which scheme is shorter.

    A block is converted from the source charset (which must be
    stateless) into the target charset before measuring. Without a
    source charset the block is assumed to be 8-bit text already in the
    target charset.
    """

    def __init__(self, specials: bytes, transcoder: Optional[TextTranscoder] = None):
        """
        Initialize sizer.

        Args:
            specials: Bytes the Q encoding must escape
            transcoder: Charset converter (default: TextTranscoder)
        """
        self.specials = specials
        self.transcoder = transcoder or TextTranscoder()

    def convert(self, data: bytes, from_charset: Optional[str], to_charset: str) -> Union[bytes, TooBig]:
        """
        Bring data into to_charset, bounded by the capacity of one word.

        Returns:
            Converted bytes, or TooBig bounding how much source data fits
        """
        limit = _BLOCK_CAPACITY - len(to_charset)
        if from_charset:
            converted, consumed = self.transcoder.convert_prefix(data, from_charset, to_charset, limit)
            if converted is None:
                return TooBig(len(data) if consumed == len(data) else consumed + 1)
            return converted
        if len(data) > limit:
            return TooBig(limit + 1)
        return data

    def size(self, data: bytes, from_charset: Optional[str], to_charset: str) -> Union[Fits, TooBig]:
        """
        Measure the encoded word needed for data.

        Args:
            data: Source block
            from_charset: Charset of data, or None if already in to_charset
            to_charset: Charset label of the word

        Returns:
            Fits(scheme, length) with the shorter scheme (Q on ties), or
            TooBig(n) where n is an upper bound on the convertible length
        """
        converted = self.convert(data, from_charset, to_charset)
        if isinstance(converted, TooBig):
            return converted

        n = len(converted)
        base = ENCWORD_LEN_MIN - 2 + len(to_charset)
        len_b = base + ((n + 2) // 3) * 4
        len_q = base + n + 2 * q_escape_count(converted, self.specials)

        # RFC 1468 requires B encoding for ISO-2022-JP
        if to_charset.upper() == "ISO-2022-JP":
            len_q = ENCWORD_LEN_MAX + 1

        if len_b < len_q and len_b <= ENCWORD_LEN_MAX:
            return Fits(Scheme.B, len_b)
        if len_q <= ENCWORD_LEN_MAX:
            return Fits(Scheme.Q, len_q)
        return TooBig(len(data))
