"""Unit tests for decoding."""

from __future__ import annotations

import math
import struct
from typing import Any

import pytest

from qpack import (
    DecodeError,
    DepthExceededError,
    MalformedInputError,
    UnpackOptions,
    decode,
    decode_at,
    encode,
    iter_decode,
)


class TestDecodeScalars:
    """Test single-value decodings."""

    def test_null_and_bool(self) -> None:
        """Test None, True and False."""
        assert decode(b"\xff") is None
        assert decode(b"\x7c") is True
        assert decode(b"\x7d") is False

    def test_inline_ints(self) -> None:
        """Test every inline integer tag."""
        for tag in range(64):
            assert decode(bytes([tag])) == tag
        for tag in range(64, 124):
            assert decode(bytes([tag])) == 63 - tag

    def test_sized_ints(self) -> None:
        """Test little-endian two's complement payloads."""
        assert decode(b"\xea\xc3") == -61
        assert decode(b"\xeb\x80\x00") == 128
        assert decode(b"\xec\xff\xff\xff\x7f") == 2**31 - 1
        assert decode(b"\xed" + b"\x00" * 7 + b"\x80") == -(2**63)

    def test_fixed_doubles(self) -> None:
        """Test single-byte doubles decode as floats."""
        assert decode(b"\x7f") == -1.0
        assert decode(b"\x80") == 0.0
        assert decode(b"\x81") == 1.0
        assert isinstance(decode(b"\x80"), float)

    def test_sized_doubles(self) -> None:
        """Test 8-byte doubles are reproduced bit-for-bit."""
        assert decode(b"\xee" + struct.pack("<d", 3.25)) == 3.25
        assert math.copysign(1.0, decode(b"\xee" + struct.pack("<d", -0.0))) == -1.0
        assert math.isnan(decode(b"\xee" + struct.pack("<d", float("nan"))))

    def test_raw(self) -> None:
        """Test inline and sized raw values."""
        assert decode(b"\x82") == b""
        assert decode(b"\x85abc") == b"abc"
        assert decode(b"\xe6\x64" + b"x" * 100) == b"x" * 100
        assert decode(b"\xe7\x00\x01" + b"y" * 256) == b"y" * 256

    def test_raw_as_text(self) -> None:
        """Test raw values decoded with a text codec."""
        options = UnpackOptions(decode="utf-8")

        assert decode(b"\x84\xc3\xa9", options=options) == "é"
        assert decode(b"\x82", options=options) == ""


class TestDecodeHook:
    """Test the reserved hook tag."""

    def test_hook_without_callback(self) -> None:
        """Test the hook tag decodes to None."""
        assert decode(b"\x7e") is None
        assert decode(b"\xf1\x7e\x01") == [None, 1]

    def test_hook_with_callback(self) -> None:
        """Test the configured callback supplies the value."""
        options = UnpackOptions(hook=lambda: "hooked")

        assert decode(b"\xf1\x7e\x01", options=options) == ["hooked", 1]


class TestDecodeContainers:
    """Test array and map decodings."""

    def test_sample_map(self, sample_map_bytes: bytes) -> None:
        """Test the inline map layout decodes in order."""
        value = decode(sample_map_bytes)

        assert value == {b"a": 1, b"b": [2, 3]}
        assert list(value) == [b"a", b"b"]

    def test_sample_map_as_text(self, sample_map: dict[str, Any], sample_map_bytes: bytes) -> None:
        """Test text decoding applies to keys too."""
        assert decode(sample_map_bytes, options=UnpackOptions(decode="utf-8")) == sample_map

    def test_inline_and_open_array(self) -> None:
        """Test both array forms decode to the same content."""
        assert decode(b"\xf4\x01\x02\x03\x04\x05") == [1, 2, 3, 4, 5]
        assert decode(b"\xf5\x00\x01\x02\x03\x04\x05\xf6") == [0, 1, 2, 3, 4, 5]
        assert decode(b"\xf5\xf6") == []

    def test_open_map(self) -> None:
        """Test the open map form."""
        data = b"\xfd" + b"".join(bytes([i, i + 10]) for i in range(6)) + b"\xfe"

        assert decode(data) == {i: i + 10 for i in range(6)}

    def test_nested_open_forms(self) -> None:
        """Test open containers nested in open containers."""
        inner = list(range(6))
        value = [inner, {"k": inner, "l": [inner]}, 1, 2, 3, 4]
        options = UnpackOptions(decode="utf-8")

        assert decode(encode(value), options=options) == value

    def test_object_pairs_hook(self) -> None:
        """Test maps handed over as ordered pair lists."""
        options = UnpackOptions(object_pairs_hook=list)

        assert decode(b"\xf9\x02\x00\x01\x00", options=options) == [(2, 0), (1, 0)]

    def test_duplicate_keys(self) -> None:
        """Test duplicate keys are not rejected."""
        data = b"\xf9\x01\x02\x01\x03"

        assert decode(data) == {1: 3}
        assert decode(data, options=UnpackOptions(object_pairs_hook=list)) == [(1, 2), (1, 3)]

    def test_unhashable_key(self) -> None:
        """Test array keys need object_pairs_hook."""
        data = b"\xf8\xef\x01"

        with pytest.raises(MalformedInputError, match="unhashable"):
            decode(data)

        assert decode(data, options=UnpackOptions(object_pairs_hook=list)) == [([], 1)]


class TestDecodeCursor:
    """Test cursor threading and streaming."""

    def test_decode_at(self) -> None:
        """Test decoding from an offset returns the next offset."""
        data = encode(1) + encode([2, 3]) + encode(b"x" * 120)

        value, pos = decode_at(data)
        assert (value, pos) == (1, 1)

        value, pos = decode_at(data, pos)
        assert (value, pos) == ([2, 3], 4)

        value, pos = decode_at(data, pos)
        assert (value, pos) == (b"x" * 120, len(data))

    def test_iter_decode(self) -> None:
        """Test walking concatenated values."""
        data = encode(1) + encode("a") + encode([1]) + encode(None)

        assert list(iter_decode(data)) == [1, b"a", [1], None]
        assert list(iter_decode(b"")) == []

    def test_bytes_like_input(self) -> None:
        """Test bytearray and memoryview input."""
        assert decode(bytearray(b"\xf0\x01")) == [1]
        assert decode(memoryview(b"\x00\xf0\x01")[1:]) == [1]

    def test_rejects_non_bytes(self) -> None:
        """Test text input is rejected."""
        with pytest.raises(TypeError, match="bytes-like"):
            decode("\x01")  # type: ignore[arg-type]


class TestDecodeErrors:
    """Test decoding error handling."""

    @pytest.mark.parametrize(
        "data",
        [
            b"",
            b"\xeb\x01",
            b"\xed\x00\x00\x00",
            b"\xee\x00\x00",
            b"\x85ab",
            b"\xe6",
            b"\xe7\x01",
            b"\xf3\x01",
            b"\xf9\x01",
            b"\xf5\x01\x02",
            b"\xfd\x01\x02",
            b"\xfd\x01",
        ],
    )
    def test_truncated(self, data: bytes) -> None:
        """Test buffers that end early."""
        with pytest.raises(MalformedInputError):
            decode(data)

    def test_truncated_message(self) -> None:
        """Test the error reports truncation."""
        with pytest.raises(MalformedInputError, match="Truncated"):
            decode(b"\xeb\x01")

    def test_raw_length_beyond_buffer(self) -> None:
        """Test declared lengths longer than the data."""
        with pytest.raises(MalformedInputError, match="exceeds"):
            decode(b"\xe6\xff" + b"a" * 3)

        with pytest.raises(MalformedInputError, match="exceeds"):
            decode(b"\xe9" + b"\xff" * 8)

    def test_trailing_bytes(self) -> None:
        """Test over-long input."""
        with pytest.raises(MalformedInputError, match="trailing"):
            decode(b"\x01\x02")

    def test_stray_close_markers(self) -> None:
        """Test close markers in value position."""
        with pytest.raises(MalformedInputError, match="unexpected close array"):
            decode(b"\xf6")

        with pytest.raises(MalformedInputError, match="unexpected close map"):
            decode(b"\xf1\xfe")

        with pytest.raises(MalformedInputError, match="unexpected close map"):
            decode(b"\xfd\x01\xfe")

    def test_mismatched_close_markers(self) -> None:
        """Test close markers of the wrong kind."""
        with pytest.raises(MalformedInputError, match="close map marker inside an open array"):
            decode(b"\xf5\x01\xfe")

        with pytest.raises(MalformedInputError, match="close array marker inside an open map"):
            decode(b"\xfd\x01\x02\xf6")

    def test_invalid_text(self) -> None:
        """Test raw values that are not valid in the text codec."""
        with pytest.raises(MalformedInputError, match="not valid utf-8"):
            decode(b"\x83\xff", options=UnpackOptions(decode="utf-8"))

    def test_start_outside_buffer(self) -> None:
        """Test offsets past the end."""
        with pytest.raises(MalformedInputError):
            decode_at(b"\x01", 1)

        with pytest.raises(MalformedInputError):
            decode_at(b"\x01", 5)

    def test_error_reports_position(self) -> None:
        """Test error messages carry the byte offset."""
        with pytest.raises(MalformedInputError, match="position 3"):
            decode(b"\xf5\x01\x02\xfe")

    def test_malformed_is_decode_error(self) -> None:
        """Test the error hierarchy."""
        with pytest.raises(DecodeError):
            decode(b"\xf6")

        with pytest.raises(ValueError):
            decode(b"\xf6")

    def test_single_bytes(self) -> None:
        """Test every one-byte buffer decodes or fails cleanly."""
        for tag in range(256):
            try:
                decode(bytes([tag]))
            except MalformedInputError:
                pass


class TestDecodeDepth:
    """Test the nesting guard."""

    def test_max_depth(self) -> None:
        """Test nesting beyond max_depth."""
        data = b"\xf0" * 11 + b"\x00"
        options = UnpackOptions(max_depth=10)

        with pytest.raises(DepthExceededError, match="max_depth=10"):
            decode(data, options=options)

        assert decode(data[1:], options=options) == [[[[[[[[[[0]]]]]]]]]]

    def test_deep_untrusted_input(self) -> None:
        """Test very deep input fails instead of exhausting the stack."""
        with pytest.raises(DepthExceededError):
            decode(b"\xf5" * 100_000)

    def test_depth_error_is_decode_error(self) -> None:
        """Test the depth error can be caught as a decode error."""
        with pytest.raises(DecodeError):
            decode(b"\xf0" * 3 + b"\x00", options=UnpackOptions(max_depth=1))
