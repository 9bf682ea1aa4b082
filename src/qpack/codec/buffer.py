"""Byte-level packing and unpacking utilities.

This module provides the output accumulator and the bounds-checked read
cursor used by the QPack encoder and decoder. All multi-byte numbers are
little-endian.
"""

from __future__ import annotations

import struct

_DOUBLE = struct.Struct("<d")

_VALID_WIDTHS = (1, 2, 4, 8)


class ByteWriter:
    """Accumulates packed bytes.

    Each encode call owns its own writer, so nested and concurrent calls
    never share an output buffer.

    Example:
        >>> writer = ByteWriter()
        >>> writer.write_tag(0xEB)
        >>> writer.write_int(300, 2)
        >>> writer.to_bytes()
        b'\\xeb,\\x01'
    """

    def __init__(self) -> None:
        """Initialize an empty writer."""
        self._buffer = bytearray()

    def write_tag(self, tag: int) -> None:
        """Write a single tag byte.

        Args:
            tag: Tag value (0-255)
        """
        self._buffer.append(tag)

    def write_uint(self, value: int, num_bytes: int) -> None:
        """Write an unsigned integer as little-endian bytes.

        Args:
            value: Unsigned integer value to write (must be >= 0)
            num_bytes: Width of the field (1, 2, 4 or 8)

        Raises:
            ValueError: If the width is invalid or the value doesn't fit
        """
        if num_bytes not in _VALID_WIDTHS:
            raise ValueError(f"num_bytes must be 1, 2, 4 or 8, got {num_bytes}")
        if value < 0:
            raise ValueError(f"write_uint requires non-negative value, got {value}")
        try:
            self._buffer += value.to_bytes(num_bytes, "little")
        except OverflowError as err:
            raise ValueError(f"Value {value} doesn't fit in {num_bytes} bytes") from err

    def write_int(self, value: int, num_bytes: int) -> None:
        """Write a signed integer as little-endian two's complement.

        Args:
            value: Signed integer value to write
            num_bytes: Width of the field (1, 2, 4 or 8)

        Raises:
            ValueError: If the width is invalid or the value doesn't fit
        """
        if num_bytes not in _VALID_WIDTHS:
            raise ValueError(f"num_bytes must be 1, 2, 4 or 8, got {num_bytes}")
        try:
            self._buffer += value.to_bytes(num_bytes, "little", signed=True)
        except OverflowError as err:
            raise ValueError(f"Value {value} doesn't fit in {num_bytes} bytes") from err

    def write_double(self, value: float) -> None:
        """Write an IEEE-754 double as 8 little-endian bytes."""
        self._buffer += _DOUBLE.pack(value)

    def write_bytes(self, data: bytes | bytearray | memoryview) -> None:
        """Write raw bytes."""
        self._buffer += data

    def byte_length(self) -> int:
        """Return the current number of bytes written."""
        return len(self._buffer)

    def to_bytes(self) -> bytes:
        """Return the written bytes as an immutable bytes object."""
        return bytes(self._buffer)


class ByteReader:
    """Reads tags and payloads from a byte buffer.

    The reader never reads past the end of the buffer: every read checks the
    remaining length first and raises IndexError when it is too short.

    Example:
        >>> reader = ByteReader(b"\\xeb,\\x01")
        >>> reader.read_tag()
        235
        >>> reader.read_int(2)
        300
    """

    def __init__(self, data: bytes | bytearray | memoryview, position: int = 0) -> None:
        """Initialize a reader over the given data.

        Args:
            data: Byte buffer to read
            position: Offset of the first byte to read
        """
        self._data = memoryview(data).cast("B")
        if position < 0 or position > len(self._data):
            raise IndexError(f"Start position {position} outside buffer of {len(self._data)} bytes")
        self._position = position

    def _take(self, num_bytes: int) -> memoryview:
        if num_bytes > len(self._data) - self._position:
            raise IndexError(
                f"Not enough bytes: need {num_bytes}, have {len(self._data) - self._position}"
            )
        start = self._position
        self._position += num_bytes
        return self._data[start : self._position]

    def read_tag(self) -> int:
        """Read a single tag byte.

        Raises:
            IndexError: If the buffer is exhausted
        """
        if self._position >= len(self._data):
            raise IndexError("Attempted to read past end of buffer")
        tag = self._data[self._position]
        self._position += 1
        return tag

    def peek_tag(self) -> int:
        """Return the next tag byte without consuming it.

        Raises:
            IndexError: If the buffer is exhausted
        """
        if self._position >= len(self._data):
            raise IndexError("Attempted to read past end of buffer")
        return self._data[self._position]

    def read_uint(self, num_bytes: int) -> int:
        """Read a little-endian unsigned integer.

        Raises:
            IndexError: If not enough bytes are available
        """
        return int.from_bytes(self._take(num_bytes), "little")

    def read_int(self, num_bytes: int) -> int:
        """Read a little-endian two's complement signed integer.

        Raises:
            IndexError: If not enough bytes are available
        """
        return int.from_bytes(self._take(num_bytes), "little", signed=True)

    def read_double(self) -> float:
        """Read an 8-byte little-endian IEEE-754 double.

        Raises:
            IndexError: If not enough bytes are available
        """
        return _DOUBLE.unpack(self._take(8))[0]

    def read_bytes(self, num_bytes: int) -> bytes:
        """Read raw bytes.

        Raises:
            IndexError: If not enough bytes are available
        """
        return bytes(self._take(num_bytes))

    def bytes_remaining(self) -> int:
        """Return the number of unread bytes."""
        return len(self._data) - self._position

    def position(self) -> int:
        """Return the current read position in bytes."""
        return self._position
