"""Target charset selection for outbound encoding."""

import logging
from typing import Iterable, Optional

from src.services.transcoding.base import TranscodeError
from src.services.transcoding.transcoder import TextTranscoder, canonical_charset

logger = logging.getLogger(__name__)


class CharsetSelector:
    """Pick the candidate charset giving the shortest re-encoding of a text."""

    def __init__(self, transcoder: Optional[TextTranscoder] = None):
        """
        Initialize selector.

        Args:
            transcoder: Charset converter (default: TextTranscoder)
        """
        self.transcoder = transcoder or TextTranscoder()

    def choose(
        self, data: bytes, from_charset: str, candidates: Iterable[str]
    ) -> Optional[tuple[str, bytes]]:
        """
        Choose a target charset for data.

        Args:
            data: Text in from_charset
            from_charset: Charset of data
            candidates: Charset names in order of precedence

        Returns:
            (canonical charset name, converted bytes), or None if no
            candidate can represent data

        Notes:
            - Candidates that fail to convert are skipped
            - A later candidate replaces the current best only if its
              output is strictly shorter
        """
        best_charset = None
        best = b""

        for candidate in candidates:
            if not candidate:
                continue
            try:
                converted = self.transcoder.convert(data, from_charset, candidate)
            except TranscodeError as e:
                logger.debug("Skipping charset %s: %s", candidate, e)
                continue

            if best_charset is None or len(converted) < len(best):
                best_charset = candidate
                best = converted
                if not best:
                    break

        if best_charset is None:
            return None
        return canonical_charset(best_charset), best
