"""Encoded buffer inspection CLI command."""

from __future__ import annotations

from ..codec import iter_decode
from ..utils.dump import describe


def inspect_bytes(data: bytes) -> None:
    """Print a tag-by-tag breakdown of an encoded buffer.

    Args:
        data: QPack encoded bytes, possibly several concatenated values

    Raises:
        MalformedInputError: If the buffer is truncated or inconsistent
    """
    # Validates structure before anything is printed
    count = sum(1 for _ in iter_decode(data))

    print("|" * 7, "qpack: compact binary serialization", "|" * 7)
    print(f"{len(data)} byte{'s' if len(data) != 1 else ''}, "
          f"{count} value{'s' if count != 1 else ''}.")
    print()

    print(f"{'-' * 6} offset / tag / meaning {'-' * 6}")
    for line in describe(data):
        print(line)
    print()
