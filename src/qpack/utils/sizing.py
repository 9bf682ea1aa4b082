"""Encoded size calculation utilities.

This module provides a function to calculate the packed size of a value
without actually encoding it.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Optional

from ..codec import tags
from ..exceptions import DepthExceededError, EncodeError, UnsupportedTypeError, ValueOutOfRangeError
from ..models.options import DEFAULT_PACK_OPTIONS, PackOptions


def encoded_size(value: Any, *, options: Optional[PackOptions] = None) -> int:
    """Calculate the QPack encoded size of a value in bytes.

    The result always equals ``len(encode(value))``, and the same values are
    rejected with the same errors.

    Args:
        value: Value to measure
        options: Packing options (defaults when None)

    Returns:
        Size in bytes

    Raises:
        UnsupportedTypeError: If the tree holds a value qpack cannot encode
        ValueOutOfRangeError: If an integer or length exceeds 64 bits
        DepthExceededError: If nesting is deeper than options.max_depth

    Example:
        >>> encoded_size(42)
        1
        >>> encoded_size({"a": 1, "b": [2, 3]})
        9
        >>> encoded_size(b"x" * 100)
        102
    """
    opts = options if options is not None else DEFAULT_PACK_OPTIONS
    return _size(value, 0, opts)


def _size(value: Any, depth: int, opts: PackOptions) -> int:
    if value is None or isinstance(value, bool):
        return 1

    if isinstance(value, int):
        try:
            return 1 + tags.int_tag(value)[1]
        except ValueError as err:
            raise ValueOutOfRangeError(
                f"qpack allows up to 64bit signed integers, got {value}"
            ) from err

    if isinstance(value, float):
        if (value == 0.0 and math.copysign(1.0, value) > 0) or value in (1.0, -1.0):
            return 1
        return 9

    if isinstance(value, str):
        try:
            length = len(value.encode("utf-8"))
        except UnicodeEncodeError as err:
            raise EncodeError(f"str value is not encodable as UTF-8: {err}") from err
        return _raw_size(length)

    if isinstance(value, memoryview):
        return _raw_size(value.nbytes)

    if isinstance(value, (bytes, bytearray)):
        return _raw_size(len(value))

    if isinstance(value, (list, tuple)) or isinstance(value, Mapping):
        if depth >= opts.max_depth:
            raise DepthExceededError(f"nesting deeper than max_depth={opts.max_depth}")
        if isinstance(value, Mapping):
            body = sum(
                _size(k, depth + 1, opts) + _size(v, depth + 1, opts) for k, v in value.items()
            )
        else:
            body = sum(_size(item, depth + 1, opts) for item in value)
        # open/close form adds a closing marker
        return body + (1 if len(value) <= tags.INLINE_COUNT_MAX else 2)

    raise UnsupportedTypeError(
        f"packing type {type(value).__module__}.{type(value).__qualname__} "
        f"is not supported with qpack"
    )


def _raw_size(length: int) -> int:
    try:
        return 1 + tags.raw_tag(length)[1] + length
    except ValueError as err:
        raise ValueOutOfRangeError(f"raw string length too large to fit in qpack: {length}") from err
