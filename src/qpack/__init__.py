"""qpack: compact schema-less binary serialization

QPack packs a tree of None, bool, int, float, bytes/str, lists and maps into
a dense, self-describing byte stream and unpacks it again. Small values cost
a single byte, and collections of any size need no length prefix.

Key Features:
- Single-byte encodings for small integers, booleans, None and 0.0/1.0/-1.0
- Narrowest-width integers and length fields
- Open/close markers for large arrays and maps
- Bounds-checked, depth-limited decoding of untrusted input

Quick Start:
    >>> from qpack import decode, encode
    >>>
    >>> data = encode({"a": 1, "b": [2, 3]})
    >>> data
    b'\\xf9\\x83a\\x01\\x83b\\xf1\\x02\\x03'
    >>> decode(data)
    {b'a': 1, b'b': [2, 3]}
"""

from __future__ import annotations

import logging

from .codec import decode, decode_at, encode, iter_decode
from .exceptions import (
    DecodeError,
    DepthExceededError,
    EncodeError,
    MalformedInputError,
    QPackError,
    UnsupportedTypeError,
    ValueOutOfRangeError,
)
from .models import PackOptions, UnpackOptions
from .utils import describe, encoded_size

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Names used by other QPack implementations
pack = encode
unpack = decode

__version__ = "0.1.0"

__all__ = [
    # Core API
    "encode",
    "decode",
    "decode_at",
    "iter_decode",
    "pack",
    "unpack",
    # Options
    "PackOptions",
    "UnpackOptions",
    # Exceptions
    "QPackError",
    "EncodeError",
    "DecodeError",
    "UnsupportedTypeError",
    "ValueOutOfRangeError",
    "MalformedInputError",
    "DepthExceededError",
    # Utilities
    "encoded_size",
    "describe",
    # Version
    "__version__",
]
