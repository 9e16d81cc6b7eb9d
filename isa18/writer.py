from __future__ import annotations

from typing import Iterable

from isa18.bits import copy_bits_into_word
from isa18.constants import (
    ADDRESS_BITS,
    ADDRESS_LSB,
    AL_LSB,
    COUNT_BITS,
    COUNT_LSB,
    DEVID_BITS,
    DEVID_LSB,
    INDEX_REGISTER_BITS,
    INDEX_REGISTER_LSB,
    INDIRECTION_BITS,
    INDIRECTION_LSB,
    LR_LSB,
    OPCODE_BITS,
    OPCODE_LSB,
    REGISTER_BITS,
    REGISTER_LSB,
    REGISTER_Y_LSB,
    SHIFT_FLAG_BITS,
)
from isa18.formats import FormatRegistry, InstructionFormat, default_registry
from isa18.word import Word

LOAD_STORE_FORMATS = frozenset(
    (InstructionFormat.ONE, InstructionFormat.TWO, InstructionFormat.THREE, InstructionFormat.FOUR)
)
XY_ARITH_FORMATS = frozenset((InstructionFormat.FIVE, InstructionFormat.SIX))


class WordWriter:
    """Places decoded fields into an 18-bit word.

    Every field keeps only as many low-order bits as its slot holds, and
    bits outside a layout's slots are left as they were.
    """

    def _write_opcode(self, word: Word, opcode: int) -> None:
        copy_bits_into_word(opcode, word, OPCODE_BITS, OPCODE_LSB)

    def write_load_store(
        self,
        word: Word,
        opcode: int,
        general_register: int,
        index_register: int,
        indirection: int,
        address: int,
    ) -> Word:
        self._write_opcode(word, opcode)
        copy_bits_into_word(general_register, word, REGISTER_BITS, REGISTER_LSB)
        copy_bits_into_word(index_register, word, INDEX_REGISTER_BITS, INDEX_REGISTER_LSB)
        copy_bits_into_word(indirection, word, INDIRECTION_BITS, INDIRECTION_LSB)
        copy_bits_into_word(address, word, ADDRESS_BITS, ADDRESS_LSB)
        return word

    def write_xy_arith(self, word: Word, opcode: int, register_x: int, register_y: int) -> Word:
        self._write_opcode(word, opcode)
        copy_bits_into_word(register_x, word, REGISTER_BITS, REGISTER_LSB)
        copy_bits_into_word(register_y, word, REGISTER_BITS, REGISTER_Y_LSB)
        return word

    def write_shift(
        self,
        word: Word,
        opcode: int,
        general_register: int,
        count: int,
        lr: int,
        al: int,
    ) -> Word:
        self._write_opcode(word, opcode)
        copy_bits_into_word(general_register, word, REGISTER_BITS, REGISTER_LSB)
        copy_bits_into_word(al, word, SHIFT_FLAG_BITS, AL_LSB)
        copy_bits_into_word(lr, word, SHIFT_FLAG_BITS, LR_LSB)
        copy_bits_into_word(count, word, COUNT_BITS, COUNT_LSB)
        return word

    def write_io(self, word: Word, opcode: int, general_register: int, devid: int) -> Word:
        self._write_opcode(word, opcode)
        copy_bits_into_word(general_register, word, REGISTER_BITS, REGISTER_LSB)
        copy_bits_into_word(devid, word, DEVID_BITS, DEVID_LSB)
        return word


def decode_word(word: Word | int, registry: FormatRegistry | None = None) -> dict:
    if isinstance(word, int):
        word = Word.from_int(word)
    registry = registry or default_registry()

    opcode = word.field(OPCODE_LSB, OPCODE_BITS)
    mnemonic = next((k for k, v in registry.opcodes.items() if v == opcode), None)

    if mnemonic is None:
        return {"opcode": opcode, "mnemonic": None, "raw": word.to_int()}

    fmt = registry.formats[mnemonic]
    result: dict = {"opcode": opcode, "mnemonic": mnemonic.strip(), "format": fmt}

    if fmt in LOAD_STORE_FORMATS:
        result.update(
            type="LS",
            r=word.field(REGISTER_LSB, REGISTER_BITS),
            ix=word.field(INDEX_REGISTER_LSB, INDEX_REGISTER_BITS),
            i=word.field(INDIRECTION_LSB, INDIRECTION_BITS),
            address=word.field(ADDRESS_LSB, ADDRESS_BITS),
        )
    elif fmt in XY_ARITH_FORMATS:
        result.update(
            type="XY",
            rx=word.field(REGISTER_LSB, REGISTER_BITS),
            ry=word.field(REGISTER_Y_LSB, REGISTER_BITS),
        )
    elif fmt == InstructionFormat.SEVEN:
        result.update(
            type="SHIFT",
            r=word.field(REGISTER_LSB, REGISTER_BITS),
            al=word.field(AL_LSB, SHIFT_FLAG_BITS),
            lr=word.field(LR_LSB, SHIFT_FLAG_BITS),
            count=word.field(COUNT_LSB, COUNT_BITS),
        )
    else:
        result.update(
            type="IO",
            r=word.field(REGISTER_LSB, REGISTER_BITS),
            devid=word.field(DEVID_LSB, DEVID_BITS),
        )
    return result


def format_octal(words: Iterable[Word], words_per_line: int = 8) -> str:
    words = list(words)
    lines: list[str] = []
    for i in range(0, len(words), words_per_line):
        chunk = words[i:i + words_per_line]
        lines.append(" ".join(w.to_octal() for w in chunk))
    return "\n".join(lines)


def format_binary(words: Iterable[Word]) -> str:
    return "\n".join(w.to_binary() for w in words)
