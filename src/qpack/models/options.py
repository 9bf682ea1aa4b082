"""Packing and unpacking options.

Options are immutable Pydantic models, so a single instance can be shared
between threads and reused across calls.
"""

from __future__ import annotations

import codecs
from typing import Any, Callable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_MAX_DEPTH = 512


class _Options(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        # Callables are stored as-is
        arbitrary_types_allowed=True,
        extra="forbid",
    )


class PackOptions(_Options):
    """Options for encode().

    Attributes:
        max_depth: Deepest array/map nesting accepted before DepthExceededError
    """

    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1)


class UnpackOptions(_Options):
    """Options for decode(), decode_at() and iter_decode().

    Example:
        >>> from qpack import UnpackOptions, decode
        >>> decode(b"\\xf7", options=UnpackOptions(object_pairs_hook=list))
        []

    Attributes:
        decode: Text codec applied to every raw value (e.g. "utf-8"); None keeps bytes
        max_depth: Deepest array/map nesting accepted before DepthExceededError
        hook: Called with no arguments for each hook tag; None decodes the tag as None
        object_pairs_hook: Called with the ordered list of (key, value) pairs of
            every map; None builds a dict
    """

    decode: Optional[str] = None
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1)
    hook: Optional[Callable[[], Any]] = None
    object_pairs_hook: Optional[Callable[[List[Tuple[Any, Any]]], Any]] = None

    @field_validator("decode")
    @classmethod
    def _known_codec(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            try:
                info = codecs.lookup(value)
            except LookupError as err:
                raise ValueError(f"unknown text codec: {value!r}") from err
            # bytes-to-bytes codecs such as base64 or rot13 cannot produce str
            if not getattr(info, "_is_text_encoding", True):
                raise ValueError(f"{value!r} is not a text encoding")
        return value


DEFAULT_PACK_OPTIONS = PackOptions()
DEFAULT_UNPACK_OPTIONS = UnpackOptions()
