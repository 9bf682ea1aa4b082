"""Pydantic option models for qpack.

This module provides the validated, immutable option objects accepted by the
encode and decode functions.
"""

from __future__ import annotations

from .options import DEFAULT_MAX_DEPTH, PackOptions, UnpackOptions

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "PackOptions",
    "UnpackOptions",
]
