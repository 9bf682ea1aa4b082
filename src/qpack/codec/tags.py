"""QPack tag grammar.

Every encoded value starts with a single tag byte. The tag selects the kind
of the value and the shape of any payload that follows. Both the encoder and
the decoder dispatch on the constants in this module; they are the wire
contract and must never change.

Tag layout:

    0x00-0x3f   inline int 0..63 (value = tag)
    0x40-0x7b   inline int -1..-60 (value = 63 - tag)
    0x7c        true
    0x7d        false
    0x7e        hook (no payload)
    0x7f-0x81   double -1.0, 0.0, 1.0
    0x82-0xe5   inline raw, length 0..99 (length = tag - 0x82)
    0xe6-0xe9   raw with 1/2/4/8 byte little-endian length
    0xea-0xed   int with 1/2/4/8 byte little-endian payload
    0xee        double with 8 byte little-endian payload
    0xef-0xf4   inline array, 0..5 items
    0xf5, 0xf6  open / close array
    0xf7-0xfc   inline map, 0..5 pairs
    0xfd, 0xfe  open / close map
    0xff        null

Inline negatives stop at -60 to leave room for true, false and null, so -61
and -62 take the two byte int8 form.
"""

from __future__ import annotations

# Inline integers
QP_INT_POS_MAX: int = 0x3F
QP_INT_NEG_BASE: int = 0x3F  # value = QP_INT_NEG_BASE - tag
QP_INT_NEG_FIRST: int = 0x40
QP_INT_NEG_LAST: int = 0x7B
INLINE_INT_MIN: int = QP_INT_NEG_BASE - QP_INT_NEG_LAST  # -60
INLINE_INT_MAX: int = QP_INT_POS_MAX  # 63

QP_BOOL_TRUE: int = 0x7C
QP_BOOL_FALSE: int = 0x7D
QP_HOOK: int = 0x7E

# Fixed doubles
QP_DOUBLE_N1: int = 0x7F
QP_DOUBLE_0: int = 0x80
QP_DOUBLE_1: int = 0x81

# Raw byte strings
QP_RAW_INLINE: int = 0x82
QP_RAW_INLINE_MAX: int = 99
QP_RAW8: int = 0xE6
QP_RAW16: int = 0xE7
QP_RAW32: int = 0xE8
QP_RAW64: int = 0xE9

# Sized numbers
QP_INT8: int = 0xEA
QP_INT16: int = 0xEB
QP_INT32: int = 0xEC
QP_INT64: int = 0xED
QP_DOUBLE: int = 0xEE

# Containers
QP_ARRAY0: int = 0xEF
QP_OPEN_ARRAY: int = 0xF5
QP_CLOSE_ARRAY: int = 0xF6
QP_MAP0: int = 0xF7
QP_OPEN_MAP: int = 0xFD
QP_CLOSE_MAP: int = 0xFE
INLINE_COUNT_MAX: int = 5

QP_NULL: int = 0xFF

INT64_MIN: int = -(2**63)
INT64_MAX: int = 2**63 - 1
RAW_LENGTH_MAX: int = 2**64 - 1

# (tag, payload width in bytes), smallest first
INT_WIDTHS: tuple[tuple[int, int], ...] = (
    (QP_INT8, 1),
    (QP_INT16, 2),
    (QP_INT32, 4),
    (QP_INT64, 8),
)
RAW_WIDTHS: tuple[tuple[int, int], ...] = (
    (QP_RAW8, 1),
    (QP_RAW16, 2),
    (QP_RAW32, 4),
    (QP_RAW64, 8),
)

INT_WIDTH_BY_TAG: dict[int, int] = dict(INT_WIDTHS)
RAW_WIDTH_BY_TAG: dict[int, int] = dict(RAW_WIDTHS)

FIXED_DOUBLES: dict[int, float] = {
    QP_DOUBLE_N1: -1.0,
    QP_DOUBLE_0: 0.0,
    QP_DOUBLE_1: 1.0,
}


def int_tag(value: int) -> tuple[int, int]:
    """Return the (tag, payload width) pair used to pack an integer.

    Inline integers report a width of 0.

    Raises:
        ValueError: If the value does not fit in a 64-bit signed integer
    """
    if 0 <= value <= INLINE_INT_MAX:
        return value, 0
    if INLINE_INT_MIN <= value < 0:
        return QP_INT_NEG_BASE - value, 0
    for tag, width in INT_WIDTHS:
        bound = 1 << (width * 8 - 1)
        if -bound <= value < bound:
            return tag, width
    raise ValueError(f"{value} does not fit in a 64-bit signed integer")


def raw_tag(length: int) -> tuple[int, int]:
    """Return the (tag, length field width) pair used to pack a raw value.

    Inline lengths report a width of 0.

    Raises:
        ValueError: If the length does not fit in a 64-bit unsigned integer
    """
    if length <= QP_RAW_INLINE_MAX:
        return QP_RAW_INLINE + length, 0
    for tag, width in RAW_WIDTHS:
        if length < 1 << (width * 8):
            return tag, width
    raise ValueError(f"raw length {length} does not fit in 64 bits")


def tag_name(tag: int) -> str:
    """Return a short human readable name for a tag byte."""
    if tag <= QP_INT_POS_MAX:
        return f"int {tag}"
    if tag <= QP_INT_NEG_LAST:
        return f"int {QP_INT_NEG_BASE - tag}"
    if tag == QP_BOOL_TRUE:
        return "true"
    if tag == QP_BOOL_FALSE:
        return "false"
    if tag == QP_HOOK:
        return "hook"
    if tag in FIXED_DOUBLES:
        return f"double {FIXED_DOUBLES[tag]!r}"
    if QP_RAW_INLINE <= tag <= QP_RAW_INLINE + QP_RAW_INLINE_MAX:
        return f"raw[{tag - QP_RAW_INLINE}]"
    if tag in RAW_WIDTH_BY_TAG:
        return f"raw{RAW_WIDTH_BY_TAG[tag] * 8}"
    if tag in INT_WIDTH_BY_TAG:
        return f"int{INT_WIDTH_BY_TAG[tag] * 8}"
    if tag == QP_DOUBLE:
        return "double"
    if QP_ARRAY0 <= tag < QP_OPEN_ARRAY:
        return f"array[{tag - QP_ARRAY0}]"
    if tag == QP_OPEN_ARRAY:
        return "open array"
    if tag == QP_CLOSE_ARRAY:
        return "close array"
    if QP_MAP0 <= tag < QP_OPEN_MAP:
        return f"map[{tag - QP_MAP0}]"
    if tag == QP_OPEN_MAP:
        return "open map"
    if tag == QP_CLOSE_MAP:
        return "close map"
    return "null"
