"""Materialize encoded words."""

import base64
from typing import Optional

from src.models.encoded_word import EncodedWord, Scheme
from src.services.transcoding.transcoder import TextTranscoder

_HEX = b"0123456789ABCDEF"


def q_encode(data: bytes, specials: bytes) -> bytes:
    out = bytearray()
    for c in data:
        if c == 0x20:
            out.append(0x5F)
        elif c >= 0x7F or c < 0x20 or c == 0x5F or c in specials:
            out.append(0x3D)
            out.append(_HEX[c >> 4])
            out.append(_HEX[c & 0x0F])
        else:
            out.append(c)
    return bytes(out)


def b_encode(data: bytes) -> bytes:
    return base64.b64encode(data)


class WordEncoder:
    """Turn a block of text into an EncodedWord using a chosen scheme."""

    def __init__(self, specials: bytes, transcoder: Optional[TextTranscoder] = None):
        self.specials = specials
        self.transcoder = transcoder or TextTranscoder()

    def encode(self, charset: str, scheme: Scheme, data: bytes) -> EncodedWord:
        """
        Encode bytes already in charset.

        Args:
            charset: Charset label written into the word
            scheme: Q or B
            data: Payload source bytes in charset

        Returns:
            EncodedWord
        """
        if scheme is Scheme.B:
            payload = b_encode(data)
        else:
            payload = q_encode(data, self.specials)
        return EncodedWord(charset=charset, scheme=scheme, payload=payload)

    def encode_block(
        self, data: bytes, from_charset: Optional[str], charset: str, scheme: Scheme
    ) -> EncodedWord:
        """Convert data from from_charset (if given) and encode it."""
        if from_charset:
            data = self.transcoder.convert(data, from_charset, charset)
        return self.encode(charset, scheme, data)
