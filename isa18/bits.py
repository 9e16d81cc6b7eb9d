"""Conversions between MSB-first bit vectors and Python integers.

Every routine takes the width to interpret a vector with; the vector itself
never decides it. Bits at or beyond that width are ignored.
"""
from __future__ import annotations

from isa18.constants import BYTE_BITS, WORD_BITS
from isa18.errors import WidthOverflowError
from isa18.word import BitVector, Word


def _check_width(width: int) -> None:
    if width < 0:
        raise ValueError(f"width must be non-negative, got {width}")


def to_unsigned(bits: BitVector, width: int) -> int:
    _check_width(width)
    value = 0
    for i in range(width):
        if bits.get(i):
            value += 1 << (width - 1 - i)
    return value


def to_unsigned_byte(bits: BitVector, width: int) -> int:
    """Unsigned value of a vector no wider than a byte.

    Widths above 8 raise rather than wrap, since the sum could leave the
    byte range.
    """
    if width > BYTE_BITS:
        raise WidthOverflowError(
            f"{width}-bit vector does not fit an unsigned byte"
        )
    return to_unsigned(bits, width)


def to_signed(bits: BitVector, width: int) -> int:
    _check_width(width)
    if width == 0 or not bits.get(0):
        return to_unsigned(bits, width)

    # Two's complement: flip everything, decode, then undo the +1.
    temp = BitVector()
    resize(bits, width, temp, width)
    temp.flip(0, width)
    return -(to_unsigned(temp, width) + 1)


def from_integer(value: int, width: int) -> BitVector:
    """Encode ``value`` into ``width`` bits, truncating high-order bits."""
    _check_width(width)
    if value < 0:
        magnitude = -value
        # encode magnitude - 1 then invert, same as invert-then-add-one
        encoded = from_integer(magnitude - 1, width)
        encoded.flip(0, width)
        return encoded

    bits = BitVector()
    for i in range(width - 1, -1, -1):
        bits.set(i, value & 1 == 1)
        value >>= 1
    return bits


def resize(
    source: BitVector,
    source_width: int,
    destination: BitVector,
    destination_width: int,
) -> None:
    """Copy ``source`` into ``destination`` as an unsigned quantity.

    Widening right-aligns the source and zero-fills the new high-order bits.
    Narrowing keeps the low-order ``destination_width`` bits. A signed value
    whose width changes must go through ``to_signed``/``from_integer``
    instead.
    """
    _check_width(source_width)
    _check_width(destination_width)
    if source_width <= destination_width:
        destination.clear()
        offset = destination_width - source_width
        for j in range(source_width):
            destination.set(offset + j, source.get(j))
    else:
        offset = source_width - destination_width
        for j in range(destination_width):
            destination.set(j, source.get(offset + j))


def sign_extend(source: BitVector, source_width: int, destination_width: int) -> BitVector:
    """Resize a signed quantity, propagating its sign bit when widening."""
    value = to_signed(source, source_width)
    if destination_width < source_width and not fits_signed(value, destination_width):
        raise WidthOverflowError(
            f"{value} does not fit a signed {destination_width}-bit field"
        )
    return from_integer(value, destination_width)


def test_bit(byte_value: int, bit_index: int) -> bool:
    return (byte_value & (1 << bit_index)) != 0


def copy_bits_into_word(
    source_byte: int,
    target: BitVector,
    bit_count: int,
    high_bit_index: int,
) -> None:
    """Set the low ``bit_count`` bits of ``source_byte`` into ``target``.

    Bit ``i`` of the source lands at ``high_bit_index - i``, so the source's
    LSB sits at ``high_bit_index`` and its higher bits run toward index 0.
    Target bits are only ever set, never cleared.
    """
    for i in range(bit_count):
        if test_bit(source_byte, i):
            target.set(high_bit_index - i)


def register_to_word(bits: BitVector, width: int) -> Word:
    result = Word()
    resize(bits, width, result, WORD_BITS)
    return result


def format_bits(bits: BitVector, width: int) -> str:
    _check_width(width)
    return bits.to_string(width)


def fits_unsigned(value: int, width: int) -> bool:
    return 0 <= value < (1 << width)


def fits_signed(value: int, width: int) -> bool:
    if width == 0:
        return value == 0
    return -(1 << (width - 1)) <= value < (1 << (width - 1))


def check_width(value: int, width: int, *, signed: bool = False) -> int:
    ok = fits_signed(value, width) if signed else fits_unsigned(value, width)
    if not ok:
        kind = "signed" if signed else "unsigned"
        raise WidthOverflowError(f"{value} does not fit a {kind} {width}-bit field")
    return value
