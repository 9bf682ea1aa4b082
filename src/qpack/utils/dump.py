"""Tag-by-tag breakdown of QPack encoded data.

Used by the ``qpack --inspect`` command to show how a buffer is laid out on
the wire.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ..codec import tags
from ..codec.buffer import ByteReader
from ..exceptions import MalformedInputError

_PREVIEW_BYTES = 16

_CLOSE_FOR = {tags.QP_OPEN_ARRAY: tags.QP_CLOSE_ARRAY, tags.QP_OPEN_MAP: tags.QP_CLOSE_MAP}


@dataclass
class _Frame:
    """An enclosing container while walking the buffer.

    For inline containers open_tag is None and count is the number of
    children still expected. For open containers open_tag is the opening
    marker and count is the number of children seen so far.
    """

    open_tag: Optional[int]
    count: int


def describe(data: bytes | bytearray | memoryview) -> List[str]:
    """Return one line per tag of an encoded buffer.

    Each line holds the tag offset, the tag byte in hex, the tag name and a
    short rendering of its payload. Nested values are indented. Close markers
    are checked against their containers, so a buffer that decode() rejects
    is rejected here too.

    Args:
        data: QPack encoded bytes, possibly several concatenated values

    Returns:
        List of text lines

    Raises:
        MalformedInputError: If the buffer is truncated, leaves a container
            open, or has a close marker that does not match its container

    Example:
        >>> for line in describe(b"\\xf1\\x01\\x81"):
        ...     print(line)
        0000  f1  array[2]
        0001  01    int 1
        0002  81    double 1.0
    """
    reader = ByteReader(data)
    lines: List[str] = []
    stack: List[_Frame] = []
    try:
        while reader.bytes_remaining():
            offset = reader.position()
            tp = reader.read_tag()
            if tp in (tags.QP_CLOSE_ARRAY, tags.QP_CLOSE_MAP):
                _close(stack, tp, offset)
            indent = "  " * len(stack)
            lines.append(f"{offset:04x}  {tp:02x}  {indent}{tags.tag_name(tp)}{_payload(reader, tp)}")

            if tp in _CLOSE_FOR:
                stack.append(_Frame(tp, 0))
                continue
            if tags.QP_ARRAY0 < tp < tags.QP_OPEN_ARRAY:
                stack.append(_Frame(None, tp - tags.QP_ARRAY0))
                continue
            if tags.QP_MAP0 < tp < tags.QP_OPEN_MAP:
                stack.append(_Frame(None, 2 * (tp - tags.QP_MAP0)))
                continue

            _complete(stack)
    except IndexError as e:
        raise MalformedInputError(f"Truncated data at position {reader.position()}: {e}") from e

    if stack:
        raise MalformedInputError(
            f"Truncated data at position {reader.position()}: "
            f"{len(stack)} container(s) left open"
        )
    return lines


def _close(stack: List[_Frame], tp: int, offset: int) -> None:
    """Pop the open container ended by a close marker."""
    if not stack or stack[-1].open_tag is None:
        raise MalformedInputError(f"unexpected {tags.tag_name(tp)} marker at position {offset}")
    frame = stack[-1]
    if _CLOSE_FOR[frame.open_tag] != tp:
        raise MalformedInputError(
            f"{tags.tag_name(tp)} marker inside an {tags.tag_name(frame.open_tag)} "
            f"at position {offset}"
        )
    # a key without its value
    if tp == tags.QP_CLOSE_MAP and frame.count % 2:
        raise MalformedInputError(f"unexpected close map marker at position {offset}")
    stack.pop()


def _complete(stack: List[_Frame]) -> None:
    """Count a finished value against the containers that enclose it."""
    while stack:
        frame = stack[-1]
        if frame.open_tag is not None:
            frame.count += 1
            return
        frame.count -= 1
        if frame.count:
            return
        stack.pop()


def _payload(reader: ByteReader, tp: int) -> str:
    """Consume the payload of a tag and return a rendering of it."""
    if tags.QP_RAW_INLINE <= tp < tags.QP_RAW8:
        return " " + _preview(reader.read_bytes(tp - tags.QP_RAW_INLINE))
    if tp in tags.RAW_WIDTH_BY_TAG:
        length = reader.read_uint(tags.RAW_WIDTH_BY_TAG[tp])
        return f" length={length} " + _preview(reader.read_bytes(length))
    if tp in tags.INT_WIDTH_BY_TAG:
        return f" {reader.read_int(tags.INT_WIDTH_BY_TAG[tp])}"
    if tp == tags.QP_DOUBLE:
        return f" {reader.read_double()!r}"
    return ""


def _preview(raw: bytes) -> str:
    if len(raw) <= _PREVIEW_BYTES:
        return repr(raw)
    return f"{raw[:_PREVIEW_BYTES]!r}..."
