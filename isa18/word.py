from __future__ import annotations

from isa18.constants import WORD_BITS

WORD_MASK = (1 << WORD_BITS) - 1
WORD_SIGN_BIT = 1 << (WORD_BITS - 1)


def word(value: int) -> int:
    return value & WORD_MASK


def signed18(value: int) -> int:
    w = value & WORD_MASK
    if w >= WORD_SIGN_BIT:
        return w - (WORD_MASK + 1)
    return w


class BitVector:
    """Growable bit sequence addressed MSB-first.

    The vector has no width of its own. Index 0 is the most-significant bit
    of whatever width the caller interprets it with, and bits past that
    width are simply ignored by the conversion routines in ``isa18.bits``.
    """

    __slots__ = ("_bits",)

    def __init__(self, bits: int = 0) -> None:
        if bits < 0:
            raise ValueError("bit storage cannot be negative")
        # bit i of _bits holds index i
        self._bits = bits

    @classmethod
    def from_string(cls, text: str) -> BitVector:
        vec = cls()
        for i, ch in enumerate(text.replace("_", "")):
            if ch not in "01":
                raise ValueError(f"invalid bit character: {ch!r}")
            if ch == "1":
                vec.set(i)
        return vec

    def _check_index(self, index: int) -> None:
        if index < 0:
            raise IndexError(f"bit index {index} out of range")

    def get(self, index: int) -> bool:
        self._check_index(index)
        return (self._bits >> index) & 1 == 1

    def set(self, index: int, value: bool = True) -> None:
        self._check_index(index)
        if value:
            self._bits |= 1 << index
        else:
            self._bits &= ~(1 << index)

    def clear(self, index: int | None = None) -> None:
        if index is None:
            self._bits = 0
            return
        self.set(index, False)

    def flip(self, start: int, stop: int) -> None:
        if start < 0 or stop < start:
            raise IndexError(f"invalid flip range [{start}, {stop})")
        self._check_index(max(stop - 1, start))
        self._bits ^= ((1 << (stop - start)) - 1) << start

    def copy(self) -> BitVector:
        return type(self)(self._bits)

    def length(self) -> int:
        """Index of the highest set bit plus one, 0 when nothing is set."""
        return self._bits.bit_length()

    def to_string(self, width: int) -> str:
        return "".join("1" if self.get(i) else "0" for i in range(width))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BitVector):
            return NotImplemented
        return self._bits == other._bits

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_string(max(self.length(), 1))!r})"


class Word(BitVector):
    """An 18-bit instruction or data word, bit 0 being the MSB."""

    __slots__ = ()

    width = WORD_BITS

    def _check_index(self, index: int) -> None:
        if not 0 <= index < WORD_BITS:
            raise IndexError(f"bit index {index} out of range for {WORD_BITS}-bit word")

    @classmethod
    def from_int(cls, value: int) -> Word:
        w = cls()
        value = word(value)
        for i in range(WORD_BITS):
            if (value >> (WORD_BITS - 1 - i)) & 1:
                w.set(i)
        return w

    def to_int(self) -> int:
        value = 0
        for i in range(WORD_BITS):
            value = (value << 1) | int(self.get(i))
        return value

    def to_signed(self) -> int:
        return signed18(self.to_int())

    def field(self, lsb_index: int, bit_count: int) -> int:
        """Unsigned value of the ``bit_count`` bits ending at ``lsb_index``."""
        start = lsb_index - bit_count + 1
        if start < 0 or lsb_index >= WORD_BITS:
            raise IndexError(f"field [{start}, {lsb_index}] out of range")
        value = 0
        for i in range(start, lsb_index + 1):
            value = (value << 1) | int(self.get(i))
        return value

    def to_binary(self) -> str:
        return self.to_string(WORD_BITS)

    def to_octal(self) -> str:
        return f"{self.to_int():06o}"

    def __int__(self) -> int:
        return self.to_int()

    def __repr__(self) -> str:
        return f"Word({self.to_binary()!r})"
