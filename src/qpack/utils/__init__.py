"""Utility functions for qpack.

This module provides size calculation and encoded-buffer inspection.
"""

from __future__ import annotations

from .dump import describe
from .sizing import encoded_size

__all__ = [
    "encoded_size",
    "describe",
]
