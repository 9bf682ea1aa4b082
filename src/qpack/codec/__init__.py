"""QPack binary codec.

This module provides the encoder, the decoder and the tag grammar they share.
"""

from __future__ import annotations

from .decoder import decode, decode_at, iter_decode
from .encoder import encode

__all__ = [
    "encode",
    "decode",
    "decode_at",
    "iter_decode",
]
