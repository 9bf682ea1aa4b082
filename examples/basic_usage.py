#!/usr/bin/env python3
"""Basic usage example for qpack.

This example demonstrates:
1. Encoding a value tree to compact binary format
2. Inspecting the encoding tag by tag
3. Decoding back, with raw values as bytes or as text
4. Walking a stream of concatenated messages
"""

from __future__ import annotations

from qpack import UnpackOptions, decode, describe, encode, encoded_size, iter_decode


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("qpack Basic Usage Example")
    print("=" * 60)
    print()

    # Build a value tree
    print("1. Building a query result...")
    result = {
        "name": "cpu.load",
        "columns": ["time", "value"],
        "points": [[1_700_000_000 + i * 60, 0.5 + i / 8] for i in range(8)],
        "truncated": False,
    }
    print(f"   {result}")
    print()

    # Size and encode
    print("2. Encoding...")
    data = encode(result)
    print(f"   Predicted size: {encoded_size(result)} bytes")
    print(f"   Encoded size:   {len(data)} bytes (repr is {len(repr(result))} characters)")
    print(f"   Hex: {data[:24].hex()}...")
    print()

    # Show the layout
    print("3. First tags of the encoding...")
    for line in describe(data)[:10]:
        print(f"   {line}")
    print()

    # Decode
    print("4. Decoding...")
    raw = decode(data)
    text = decode(data, options=UnpackOptions(decode="utf-8"))
    print(f"   Keys as bytes: {list(raw)}")
    print(f"   Keys as text:  {list(text)}")
    print(f"   Round trip OK: {text == result}")
    print()

    # Stream of messages
    print("5. Reading a stream of concatenated messages...")
    stream = encode({"id": 1}) + encode([1, 2, 3]) + encode(None) + encode(-1.0)
    for i, message in enumerate(iter_decode(stream), 1):
        print(f"   message {i}: {message!r}")


if __name__ == "__main__":
    main()
