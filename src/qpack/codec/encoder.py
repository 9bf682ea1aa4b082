"""QPack encoder.

This module provides the encode() function that converts a Python value tree
to the compact, self-describing QPack binary format.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Optional

from ..exceptions import DepthExceededError, EncodeError, UnsupportedTypeError, ValueOutOfRangeError
from ..models.options import DEFAULT_PACK_OPTIONS, PackOptions
from . import tags
from .buffer import ByteWriter


def encode(value: Any, *, options: Optional[PackOptions] = None) -> bytes:
    """Encode a value to QPack binary format.

    Every value picks its smallest representation: small integers and the
    doubles 0.0, 1.0 and -1.0 take a single byte, larger integers and byte
    strings get the narrowest width that holds them, and arrays and maps of
    fewer than six items carry their count in the tag.

    Args:
        value: None, bool, int, float, bytes-like, str, list/tuple or mapping,
            nested to any depth up to options.max_depth
        options: Packing options (defaults when None)

    Returns:
        QPack encoded bytes

    Raises:
        UnsupportedTypeError: If the tree holds a value of any other kind
        ValueOutOfRangeError: If an integer or length exceeds 64 bits
        DepthExceededError: If nesting is deeper than options.max_depth
        EncodeError: If a str cannot be encoded as UTF-8

    Examples:
        ```python
        from qpack import encode

        encode(1)                       # b'\\x01'
        encode({"a": 1, "b": [2, 3]})   # b'\\xf9\\x83a\\x01\\x83b\\xf1\\x02\\x03'
        ```
    """
    opts = options if options is not None else DEFAULT_PACK_OPTIONS
    writer = ByteWriter()
    try:
        encode_into(writer, value, 0, opts)
    except RecursionError as err:
        raise DepthExceededError(
            f"nesting exceeds the interpreter recursion limit (max_depth={opts.max_depth})"
        ) from err
    return writer.to_bytes()


def encode_into(writer: ByteWriter, value: Any, depth: int, options: PackOptions) -> None:
    """Append the encoding of a value to a caller-owned writer.

    Args:
        writer: ByteWriter to append to
        value: Value to encode
        depth: Container nesting level of value (0 at the top)
        options: Packing options

    Raises:
        Same as encode()
    """
    # None
    if value is None:
        writer.write_tag(tags.QP_NULL)
        return

    # Boolean (before int, bool is an int subclass)
    if isinstance(value, bool):
        writer.write_tag(tags.QP_BOOL_TRUE if value else tags.QP_BOOL_FALSE)
        return

    # Integer
    if isinstance(value, int):
        _encode_int(writer, value)
        return

    # Double
    if isinstance(value, float):
        _encode_double(writer, value)
        return

    # Raw
    if isinstance(value, str):
        try:
            raw = value.encode("utf-8")
        except UnicodeEncodeError as err:
            raise EncodeError(f"str value is not encodable as UTF-8: {err}") from err
        _encode_raw(writer, raw)
        return

    if isinstance(value, (bytes, bytearray, memoryview)):
        _encode_raw(writer, value)
        return

    # Array
    if isinstance(value, (list, tuple)):
        _check_depth(depth, options)
        count = len(value)
        if count <= tags.INLINE_COUNT_MAX:
            writer.write_tag(tags.QP_ARRAY0 + count)
            for item in value:
                encode_into(writer, item, depth + 1, options)
        else:
            writer.write_tag(tags.QP_OPEN_ARRAY)
            for item in value:
                encode_into(writer, item, depth + 1, options)
            writer.write_tag(tags.QP_CLOSE_ARRAY)
        return

    # Map
    if isinstance(value, Mapping):
        _check_depth(depth, options)
        count = len(value)
        if count <= tags.INLINE_COUNT_MAX:
            writer.write_tag(tags.QP_MAP0 + count)
            for key, item in value.items():
                encode_into(writer, key, depth + 1, options)
                encode_into(writer, item, depth + 1, options)
        else:
            writer.write_tag(tags.QP_OPEN_MAP)
            for key, item in value.items():
                encode_into(writer, key, depth + 1, options)
                encode_into(writer, item, depth + 1, options)
            writer.write_tag(tags.QP_CLOSE_MAP)
        return

    raise UnsupportedTypeError(
        f"packing type {type(value).__module__}.{type(value).__qualname__} "
        f"is not supported with qpack"
    )


def _check_depth(depth: int, options: PackOptions) -> None:
    if depth >= options.max_depth:
        raise DepthExceededError(
            f"nesting deeper than max_depth={options.max_depth} "
            f"(self-referencing container?)"
        )


def _encode_int(writer: ByteWriter, value: int) -> None:
    """Encode an integer inline or with the narrowest sized tag.

    Raises:
        ValueOutOfRangeError: If value does not fit in 64 bits signed
    """
    try:
        tag, width = tags.int_tag(value)
    except ValueError as err:
        raise ValueOutOfRangeError(
            f"qpack allows up to 64bit signed integers, got {value}"
        ) from err

    writer.write_tag(tag)
    if width:
        writer.write_int(value, width)


def _encode_double(writer: ByteWriter, value: float) -> None:
    """Encode a double; 0.0, 1.0 and -1.0 take a single tag byte."""
    # -0.0 == 0.0, so the sign bit decides whether the short form is exact
    if value == 0.0 and math.copysign(1.0, value) > 0:
        writer.write_tag(tags.QP_DOUBLE_0)
    elif value == 1.0:
        writer.write_tag(tags.QP_DOUBLE_1)
    elif value == -1.0:
        writer.write_tag(tags.QP_DOUBLE_N1)
    else:
        writer.write_tag(tags.QP_DOUBLE)
        writer.write_double(value)


def _encode_raw(writer: ByteWriter, data: bytes | bytearray | memoryview) -> None:
    """Encode a raw byte string with an inline or sized length.

    Raises:
        ValueOutOfRangeError: If the length exceeds 64 bits unsigned
    """
    if isinstance(data, memoryview):
        data = data.cast("B")
    length = len(data)
    try:
        tag, width = tags.raw_tag(length)
    except ValueError as err:
        raise ValueOutOfRangeError(f"raw string length too large to fit in qpack: {length}") from err

    writer.write_tag(tag)
    if width:
        writer.write_uint(length, width)
    writer.write_bytes(data)
