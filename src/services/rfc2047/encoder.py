"""RFC 2047 header encoding: plan the encoded words for a header value."""

import logging
from typing import Iterable, Optional

from src.config.rfc2047_config import Rfc2047Config
from src.models.encoded_word import ENCWORD_LEN_MAX, ENCWORD_LEN_MIN, EncodeStatus, Fits
from src.models.encoding_plan import EncodeResult, EncodingPlan, Region
from src.services.transcoding.base import TranscodeError
from src.services.transcoding.transcoder import TextTranscoder, is_us_ascii
from src.utils.unicode_utils import encode_text, is_continuation_byte, is_header_space

from .base import OversizedBlockError
from .charset_selector import CharsetSelector
from .word_encoder import WordEncoder
from .word_sizer import WordSizer

logger = logging.getLogger(__name__)

INTERNAL_CHARSET = "utf-8"
UNKNOWN_8BIT = "unknown-8bit"

# A word may end exactly at the line limit
_LINE_LIMIT = ENCWORD_LEN_MAX + 1


def find_region(data: bytes, specials: Optional[bytes]) -> Optional[Region]:
    """
    Find the smallest span of data that has to be encoded.

    The span covers every 8-bit byte and every "=?" that starts a word,
    widened to take in any byte from specials on either side. The end of
    the returned region is the index of the last such byte, not past it.

    Returns:
        Region, or None if data can be sent as it is
    """
    t0 = t1 = s0 = s1 = None
    for i, c in enumerate(data):
        if c & 0x80 or (
            c == 0x3D and data[i + 1 : i + 2] == b"?" and (i == 0 or is_header_space(data, i - 1))
        ):
            if t0 is None:
                t0 = i
            t1 = i
        elif specials and c and c in specials:
            if s0 is None:
                s0 = i
            s1 = i

    if t0 is None:
        return None
    if s0 is not None and s0 < t0:
        t0 = s0
    if s1 is not None and s1 > t1:
        t1 = s1
    return Region(t0, t1)


def previous_word_start(data: bytes, index: int) -> int:
    """Start of the word before index, skipping the whitespace in between."""
    while index > 0 and is_header_space(data, index - 1):
        index -= 1
    while index > 0 and not is_header_space(data, index - 1):
        index -= 1
    return index


def next_word_end(data: bytes, index: int) -> int:
    """End of the word after index, skipping the whitespace in between."""
    while index < len(data) and is_header_space(data, index):
        index += 1
    while index < len(data) and not is_header_space(data, index):
        index += 1
    return index


class EncodingPlanner:
    """
    Turn a header value into literal text and folded encoded words.

    The planner measures candidate blocks with WordSizer before
    committing to them, so every conversion it performs is stateless.
    """

    def __init__(self, config: Optional[Rfc2047Config] = None, transcoder: Optional[TextTranscoder] = None):
        """
        Initialize planner.

        Args:
            config: Encoding settings (default: Rfc2047Config())
            transcoder: Charset converter (default: TextTranscoder)
        """
        self.config = config or Rfc2047Config()
        self.transcoder = transcoder or TextTranscoder()
        self.selector = CharsetSelector(self.transcoder)
        self.sizer = WordSizer(self.config.mime_specials_bytes, self.transcoder)
        self.word_encoder = WordEncoder(self.config.mime_specials_bytes, self.transcoder)

    def encode(
        self,
        data: bytes,
        column: int,
        from_charset: str,
        charsets: Iterable[str],
        specials: Optional[bytes] = None,
    ) -> EncodeResult:
        """
        Encode a single-line header value.

        Args:
            data: Header value in from_charset
            column: Starting column; if non-zero the preceding byte was a space
            from_charset: Charset of data
            charsets: Candidate output charsets in order of precedence
            specials: Extra bytes that force encoding

        Returns:
            EncodeResult with the plan and an informational status
        """
        status = EncodeStatus.CLEAN
        icode: Optional[str] = INTERNAL_CHARSET

        try:
            u = self.transcoder.convert(data, from_charset, icode)
        except TranscodeError as e:
            logger.debug("Cannot convert header from %s, sending raw bytes: %s", from_charset, e)
            status = EncodeStatus.SOURCE_NOT_CONVERTIBLE
            icode = None
            u = bytes(data)

        plan = EncodingPlan()
        region = find_region(u, specials)
        if region is None:
            plan.add_literal(u)
            return EncodeResult(plan, status)

        tocode = from_charset
        if icode:
            chosen = self.selector.choose(u, icode, charsets)
            if chosen:
                tocode = chosen[0]
            else:
                logger.debug("No candidate charset can represent the header, using %s", from_charset)
                status = EncodeStatus.NO_TARGET_CHARSET
                icode = None

        # Don't label 8-bit data as us-ascii
        if not icode and is_us_ascii(tocode):
            tocode = UNKNOWN_8BIT

        try:
            t0 = self._adjust_start(u, region.start, column, icode, tocode)
            t1 = self._adjust_end(u, region.end, icode, tocode)
            t0, t1 = self._widen(u, t0, t1, column, icode, tocode)
            self._pack(plan, u, t0, t1, column, icode, tocode)
        except (OversizedBlockError, TranscodeError) as e:
            logger.warning("Sending header unencoded: %s", e)
            plan = EncodingPlan()
            plan.add_literal(u)
        return EncodeResult(plan, status)

    def _pack(
        self, plan: EncodingPlan, u: bytes, t0: int, t1: int, column: int, icode: Optional[str], tocode: str
    ) -> None:
        """Emit the prefix, the encoded words covering [t0, t1) and the suffix."""
        ulen = len(u)
        plan.add_literal(u[:t0])
        column += t0

        t = t0
        while True:
            n, size = self._choose_block(u, t, t1 - t, column, icode, tocode)
            if n == t1 - t:
                # The ascii suffix has to fit on the same line
                if column + size.length + (ulen - t1) <= _LINE_LIMIT:
                    break
                n = t1 - t - 1
                if icode:
                    while n > 0 and is_continuation_byte(u[t + n]):
                        n -= 1
                if not n:
                    # Only a single character is left but the suffix is too
                    # long to share its line: take in the next word too.
                    if t1 >= ulen:
                        break
                    t1 += 1
                    while t1 < ulen and not is_header_space(u, t1):
                        t1 += 1
                    continue
                n, size = self._choose_block(u, t, n, column, icode, tocode)

            plan.add_word(self.word_encoder.encode_block(u[t : t + n], icode, tocode, size.scheme))
            plan.add_fold()
            column = 1
            t += n

        plan.add_word(self.word_encoder.encode_block(u[t:t1], icode, tocode, size.scheme))
        plan.add_literal(u[t1:])
        plan.region = Region(t0, t1)

    def _fits(self, data: bytes, icode: Optional[str], tocode: str) -> Optional[Fits]:
        size = self.sizer.size(data, icode, tocode)
        return size if isinstance(size, Fits) else None

    def _adjust_start(self, u: bytes, t0: int, column: int, icode: Optional[str], tocode: str) -> int:
        """Move the region start back to a word start the first line can hold."""
        limit = max(_LINE_LIMIT - column - ENCWORD_LEN_MIN, 0)
        t0 = min(t0, limit)

        while t0 > 0:
            if is_header_space(u, t0 - 1):
                t = t0 + 1
                if icode:
                    while t < len(u) and is_continuation_byte(u[t]):
                        t += 1
                size = self._fits(u[t0:t], icode, tocode)
                if size and column + t0 + size.length <= _LINE_LIMIT:
                    break
            t0 -= 1
        return t0

    def _adjust_end(self, u: bytes, t1: int, icode: Optional[str], tocode: str) -> int:
        """Move the region end forward to a word end that leaves room for the suffix."""
        ulen = len(u)
        while t1 < ulen:
            if is_header_space(u, t1):
                t = t1 - 1
                if icode:
                    while t > 0 and is_continuation_byte(u[t]):
                        t -= 1
                size = self._fits(u[t:t1], icode, tocode)
                if size and 1 + size.length + (ulen - t1) <= _LINE_LIMIT:
                    break
            t1 += 1
        return t1

    def _widen(self, u: bytes, t0: int, t1: int, column: int, icode: Optional[str], tocode: str) -> tuple[int, int]:
        """
        Take neighbouring words into the region while it stays one word.

        Each step adds one whitespace-delimited word on the left, then one
        on the right, as long as a single encoded word covering the wider
        region still fits on the line together with the remaining suffix.
        """
        ulen = len(u)
        while True:
            widened = False
            if t0 > 0:
                start = previous_word_start(u, t0)
                if self._fits_line(u, start, t1, column, icode, tocode):
                    t0 = start
                    widened = True
            if t1 < ulen:
                end = next_word_end(u, t1)
                if self._fits_line(u, t0, end, column, icode, tocode):
                    t1 = end
                    widened = True
            if not widened:
                return t0, t1

    def _fits_line(self, u: bytes, t0: int, t1: int, column: int, icode: Optional[str], tocode: str) -> bool:
        size = self._fits(u[t0:t1], icode, tocode)
        return size is not None and column + t0 + size.length + (len(u) - t1) <= _LINE_LIMIT

    def _choose_block(
        self, u: bytes, start: int, dlen: int, column: int, icode: Optional[str], tocode: str
    ) -> tuple[int, Fits]:
        """
        Find how much of u[start:start + dlen] fits in one encoded word at column.

        Returns:
            (number of source bytes, Fits for that block)

        Raises:
            OversizedBlockError: If not even one character can be encoded
        """
        utf8 = bool(icode) and icode.lower() == "utf-8"

        # A word always takes at least one whole character
        first = 1
        if utf8:
            while first < dlen and is_continuation_byte(u[start + first]):
                first += 1

        n = dlen
        while True:
            size = self.sizer.size(u[start : start + n], icode, tocode)
            if isinstance(size, Fits) and (column + size.length <= _LINE_LIMIT or n <= first):
                return n, size
            n = (n if isinstance(size, Fits) else size.max_length) - 1
            if utf8:
                while n > 0 and is_continuation_byte(u[start + n]):
                    n -= 1
            if n <= 0:
                raise OversizedBlockError(f"No block at offset {start} fits in an encoded word")


def rfc2047_encode(
    data: bytes,
    column: int = 0,
    from_charset: str = INTERNAL_CHARSET,
    charsets: Iterable[str] = ("utf-8",),
    specials: Optional[bytes] = None,
    config: Optional[Rfc2047Config] = None,
) -> EncodeResult:
    """
    Encode a header value into RFC 2047 encoded words.

    Examples:
        >>> rfc2047_encode("Café is ready".encode("utf-8")).value
        b'=?UTF-8?Q?Caf=C3=A9_is_ready?='
    """
    return EncodingPlanner(config).encode(data, column, from_charset, charsets, specials)


def encode_string(
    value: str, config: Optional[Rfc2047Config] = None, encode_specials: bool = False, column: int = 0
) -> str:
    """
    Encode a header value given as text.

    Args:
        value: Header value
        config: Encoding settings (default: Rfc2047Config())
        encode_specials: Also force RFC 822 specials into encoded words
        column: Column the value starts at

    Returns:
        Encoded header value
    """
    if not value:
        return value
    config = config or Rfc2047Config()
    charsets = config.send_charsets or ("utf-8",)
    specials = config.address_specials_bytes if encode_specials else None

    result = EncodingPlanner(config).encode(
        encode_text(value, config.charset), column, config.charset, charsets, specials
    )
    return result.value.decode(config.charset, errors="surrogateescape")


def encode_display_name(name: str, config: Optional[Rfc2047Config] = None, tag: Optional[str] = None) -> str:
    """
    Encode the display name of an address.

    Args:
        name: Display name
        config: Encoding settings
        tag: Header field name the address belongs to (e.g. "From")

    Returns:
        Encoded display name
    """
    column = len(tag) + 2 if tag else 32
    return encode_string(name, config, encode_specials=True, column=column)
