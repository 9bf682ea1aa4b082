"""QPack decoder.

This module provides the decode() function that converts QPack binary data
back to a Python value tree, plus the cursor-based decode_at() and the
streaming iter_decode() built on top of it.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, List, Optional, Tuple

from ..exceptions import DepthExceededError, MalformedInputError
from ..models.options import DEFAULT_UNPACK_OPTIONS, UnpackOptions
from . import tags
from .buffer import ByteReader

logger = logging.getLogger(__name__)

Buffer = bytes | bytearray | memoryview


def decode(data: Buffer, *, options: Optional[UnpackOptions] = None) -> Any:
    """Decode a single QPack value spanning the whole buffer.

    Args:
        data: QPack encoded bytes
        options: Unpacking options (defaults when None)

    Returns:
        The decoded value: None, bool, int, float, bytes (or str when
        options.decode is set), list, or dict (or whatever
        options.object_pairs_hook builds)

    Raises:
        MalformedInputError: If data is truncated, structurally inconsistent,
            or has bytes left over after the value
        DepthExceededError: If nesting is deeper than options.max_depth
        TypeError: If data is not a bytes-like object

    Examples:
        ```python
        from qpack import UnpackOptions, decode

        decode(b"\\xf9\\x83a\\x01\\x83b\\xf1\\x02\\x03")
        # {b'a': 1, b'b': [2, 3]}

        decode(b"\\x83a", options=UnpackOptions(decode="utf-8"))
        # 'a'
        ```
    """
    value, end = decode_at(data, 0, options=options)
    remaining = len(memoryview(data).cast("B")) - end
    if remaining:
        logger.debug("Rejecting qpack input: %d trailing bytes at offset %d", remaining, end)
        raise MalformedInputError(f"{remaining} trailing bytes after value at position {end}")
    return value


def decode_at(
    data: Buffer, pos: int = 0, *, options: Optional[UnpackOptions] = None
) -> Tuple[Any, int]:
    """Decode one QPack value starting at a byte offset.

    Bytes after the value are left alone, so this can walk a buffer holding
    several concatenated values.

    Args:
        data: Buffer holding QPack encoded bytes
        pos: Offset of the value's tag byte
        options: Unpacking options (defaults when None)

    Returns:
        Tuple of (decoded value, offset just after the value)

    Raises:
        MalformedInputError: If the value is truncated or inconsistent
        DepthExceededError: If nesting is deeper than options.max_depth
        TypeError: If data is not a bytes-like object
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"a bytes-like object is required, not {type(data).__name__!r}")

    opts = options if options is not None else DEFAULT_UNPACK_OPTIONS
    try:
        reader = ByteReader(data, pos)
    except IndexError as e:
        raise MalformedInputError(str(e)) from e

    try:
        value = _decode_value(reader, 0, opts)
    except IndexError as e:
        logger.debug("Rejecting qpack input: truncated at offset %d", reader.position())
        raise MalformedInputError(
            f"Truncated data at position {reader.position()}: {e}"
        ) from e
    except RecursionError as e:
        raise DepthExceededError(
            f"nesting exceeds the interpreter recursion limit "
            f"(max_depth={opts.max_depth})"
        ) from e

    return value, reader.position()


def iter_decode(data: Buffer, *, options: Optional[UnpackOptions] = None) -> Iterator[Any]:
    """Yield every value of a buffer holding concatenated QPack values.

    Raises:
        MalformedInputError: If any value is truncated or inconsistent
    """
    end = len(memoryview(data).cast("B"))
    pos = 0
    while pos < end:
        value, pos = decode_at(data, pos, options=options)
        yield value


def _malformed(position: int, message: str) -> MalformedInputError:
    logger.debug("Rejecting qpack input at offset %d: %s", position, message)
    return MalformedInputError(f"{message} at position {position}")


def _decode_value(reader: ByteReader, depth: int, opts: UnpackOptions) -> Any:
    """Decode the value whose tag is at the reader's position.

    Containers are decoded here as well, so every nesting level costs one
    stack frame.

    Raises:
        MalformedInputError: If the tag is out of place or the data is invalid
        DepthExceededError: If nesting is deeper than opts.max_depth
        IndexError: If data is truncated
    """
    start = reader.position()
    tp = reader.read_tag()

    # fixed integer
    if tp <= tags.QP_INT_POS_MAX:
        return tp

    # fixed negative integer
    if tp <= tags.QP_INT_NEG_LAST:
        return tags.QP_INT_NEG_BASE - tp

    if tp == tags.QP_BOOL_TRUE:
        return True

    if tp == tags.QP_BOOL_FALSE:
        return False

    # reserved for an object hook
    if tp == tags.QP_HOOK:
        return opts.hook() if opts.hook is not None else None

    # fixed doubles
    if tp <= tags.QP_DOUBLE_1:
        return tags.FIXED_DOUBLES[tp]

    # fixed length raw
    if tp < tags.QP_RAW8:
        return _decode_raw(start, reader.read_bytes(tp - tags.QP_RAW_INLINE), opts)

    # raw with length field
    if tp <= tags.QP_RAW64:
        length = reader.read_uint(tags.RAW_WIDTH_BY_TAG[tp])
        if length > reader.bytes_remaining():
            raise _malformed(
                start,
                f"raw length {length} exceeds the {reader.bytes_remaining()} remaining bytes",
            )
        return _decode_raw(start, reader.read_bytes(length), opts)

    # sized integer
    if tp <= tags.QP_INT64:
        return reader.read_int(tags.INT_WIDTH_BY_TAG[tp])

    if tp == tags.QP_DOUBLE:
        return reader.read_double()

    if tp == tags.QP_CLOSE_ARRAY or tp == tags.QP_CLOSE_MAP:
        raise _malformed(start, f"unexpected {tags.tag_name(tp)} marker")

    if tp == tags.QP_NULL:
        return None

    # everything left opens an array or a map
    if depth >= opts.max_depth:
        raise DepthExceededError(
            f"nesting deeper than max_depth={opts.max_depth} "
            f"at position {start}"
        )

    # fixed size array
    items: List[Any] = []
    if tp < tags.QP_OPEN_ARRAY:
        for _ in range(tp - tags.QP_ARRAY0):
            items.append(_decode_value(reader, depth + 1, opts))
        return items

    if tp == tags.QP_OPEN_ARRAY:
        while True:
            nxt = reader.peek_tag()
            if nxt == tags.QP_CLOSE_ARRAY:
                reader.read_tag()
                return items
            if nxt == tags.QP_CLOSE_MAP:
                reader.read_tag()
                raise _malformed(reader.position() - 1, "close map marker inside an open array")
            items.append(_decode_value(reader, depth + 1, opts))

    pairs: List[Tuple[Any, Any]] = []

    # fixed size map
    if tp < tags.QP_OPEN_MAP:
        for _ in range(tp - tags.QP_MAP0):
            key = _decode_value(reader, depth + 1, opts)
            pairs.append((key, _decode_value(reader, depth + 1, opts)))
        return _build_map(start, pairs, opts)

    # open map
    while True:
        nxt = reader.peek_tag()
        if nxt == tags.QP_CLOSE_MAP:
            reader.read_tag()
            return _build_map(start, pairs, opts)
        if nxt == tags.QP_CLOSE_ARRAY:
            reader.read_tag()
            raise _malformed(reader.position() - 1, "close array marker inside an open map")
        key = _decode_value(reader, depth + 1, opts)
        pairs.append((key, _decode_value(reader, depth + 1, opts)))


def _decode_raw(start: int, raw: bytes, opts: UnpackOptions) -> Any:
    if opts.decode is None:
        return raw
    try:
        return raw.decode(opts.decode)
    except UnicodeDecodeError as e:
        raise _malformed(start, f"raw value is not valid {opts.decode}: {e.reason}") from e


def _build_map(start: int, pairs: List[Tuple[Any, Any]], opts: UnpackOptions) -> Any:
    if opts.object_pairs_hook is not None:
        return opts.object_pairs_hook(pairs)
    result: dict[Any, Any] = {}
    for key, value in pairs:
        try:
            result[key] = value
        except TypeError as e:
            raise _malformed(
                start,
                f"unhashable map key of type {type(key).__name__} "
                f"(use object_pairs_hook to keep such maps)",
            ) from e
    return result
