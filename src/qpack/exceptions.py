"""Exception hierarchy for qpack.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from QPackError for easy catching of any qpack-specific error.
"""

from __future__ import annotations


class QPackError(Exception):
    """Base exception for all qpack errors."""

    pass


class EncodeError(QPackError):
    """Raised when packing a value fails.

    Examples:
        - Value of a kind QPack cannot represent
        - Integer or length beyond 64-bit limits
        - Text that cannot be encoded as UTF-8
    """

    pass


class DecodeError(QPackError):
    """Raised when unpacking binary data fails.

    Examples:
        - Truncated data (insufficient bytes)
        - Unexpected or mismatched tag
        - Trailing bytes after a complete value
    """

    pass


class UnsupportedTypeError(EncodeError, TypeError):
    """Raised when the encoder is given a value kind outside the QPack data model.

    Supported kinds are None, bool, int, float, bytes-like, str, list/tuple
    and mappings. The offending type name is part of the message.
    """

    pass


class ValueOutOfRangeError(EncodeError, ValueError):
    """Raised when a numeric or length value exceeds the format's widths.

    Integers must fit in 64-bit signed, raw lengths in 64-bit unsigned.
    """

    pass


class MalformedInputError(DecodeError, ValueError):
    """Raised when the decoder meets invalid input.

    Examples:
        - Buffer ends before a tag, payload or close marker
        - Close marker in value position, or of the wrong kind
        - Bytes left over after the top-level value
        - Raw value that does not decode with the configured text codec
    """

    pass


class DepthExceededError(EncodeError, DecodeError):
    """Raised when nesting goes deeper than the configured ``max_depth``.

    Raised by both directions, so it can be caught as either an
    EncodeError or a DecodeError.
    """

    pass
