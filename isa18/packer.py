"""Turn one textual instruction line into an 18-bit word.

A line starts with its mnemonic key (``IN`` or any three characters), the
first operand usually sits at a fixed column right after it, and the rest
are comma separated::

    LDR 1,2,10,1    R=1 IX=2 ADDR=10 I=1
    IN 1,3          R=1 DEVID=3
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from isa18.constants import BYTE_MAX_SIGNED, BYTE_MIN_SIGNED
from isa18.errors import (
    EncodingError,
    ErrorKind,
    MalformedOperandError,
    UnknownOpcodeError,
)
from isa18.formats import FormatRegistry, InstructionFormat, default_registry
from isa18.word import Word
from isa18.writer import LOAD_STORE_FORMATS, XY_ARITH_FORMATS, WordWriter

logger = logging.getLogger(__name__)

SHORT_KEY_PREFIX = "IN"
FIELD_OFFSET = 4

_NUMBER_RE = re.compile(r"[+-]?\d+")


@dataclass(slots=True)
class DecodedFields:
    general_register: int = 0
    index_register: int = 0
    address: int = 0
    indirection: int = 0
    register_x: int = 0
    register_y: int = 0
    count: int = 0
    lr: int = 0
    al: int = 0
    devid: int = 0


@dataclass(frozen=True, slots=True)
class PackError:
    kind: ErrorKind
    message: str
    column: int | None = None

    def __str__(self) -> str:
        return f"[{self.kind.code}] {self.message}"


@dataclass(frozen=True, slots=True)
class PackResult:
    word: Word | None
    error: PackError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, word: Word) -> PackResult:
        return cls(word=word)

    @classmethod
    def failure(cls, error: EncodingError) -> PackResult:
        return cls(word=None, error=PackError(error.kind, error.message, error.column))


def opcode_key(line: str) -> str:
    if line.startswith(SHORT_KEY_PREFIX):
        return line[:len(SHORT_KEY_PREFIX)]
    return line[:3]


def parse_byte(text: str, name: str, column: int | None = None) -> int:
    stripped = text.strip()
    if not _NUMBER_RE.fullmatch(stripped):
        raise MalformedOperandError(f"{name}: expected a number, got {text!r}", column=column)
    value = int(stripped)
    if not BYTE_MIN_SIGNED <= value <= BYTE_MAX_SIGNED:
        raise MalformedOperandError(f"{name}: {value} does not fit in a byte", column=column)
    return value


class _Operands:
    def __init__(self, line: str) -> None:
        self.line = line
        self.tokens = line.split(",")

    def at_offset(self, offset: int, name: str) -> int:
        if offset >= len(self.line):
            raise MalformedOperandError(f"{name}: missing operand at column {offset + 1}", column=offset)
        return parse_byte(self.line[offset], name, offset)

    def tail(self, offset: int, name: str) -> int:
        return parse_byte(self.line[offset:], name, offset)

    def token(self, index: int, name: str) -> int:
        if index >= len(self.tokens):
            raise MalformedOperandError(f"{name}: missing operand {index}")
        column = sum(len(t) + 1 for t in self.tokens[:index])
        return parse_byte(self.tokens[index], name, column)

    def optional_token(self, index: int, name: str) -> int:
        if index >= len(self.tokens):
            return 0
        return self.token(index, name)


def decode_fields(line: str, fmt: InstructionFormat, key: str) -> DecodedFields:
    ops = _Operands(line)
    fields = DecodedFields()

    if fmt == InstructionFormat.ONE:
        fields.general_register = ops.at_offset(FIELD_OFFSET, "R")
        fields.index_register = ops.token(1, "IX")
        fields.address = ops.token(2, "ADDR")
        fields.indirection = ops.optional_token(3, "I")
    elif fmt == InstructionFormat.TWO:
        fields.index_register = ops.at_offset(FIELD_OFFSET, "IX")
        fields.address = ops.token(1, "ADDR")
        fields.indirection = ops.optional_token(2, "I")
    elif fmt == InstructionFormat.THREE:
        fields.general_register = ops.at_offset(FIELD_OFFSET, "R")
        fields.address = ops.token(1, "ADDR")
    elif fmt == InstructionFormat.FOUR:
        fields.address = ops.tail(FIELD_OFFSET, "ADDR")
    elif fmt == InstructionFormat.FIVE:
        fields.register_x = ops.at_offset(FIELD_OFFSET, "RX")
    elif fmt == InstructionFormat.SIX:
        fields.register_x = ops.at_offset(FIELD_OFFSET, "RX")
        fields.register_y = ops.token(1, "RY")
    elif fmt == InstructionFormat.SEVEN:
        fields.general_register = ops.at_offset(FIELD_OFFSET, "R")
        fields.count = ops.token(1, "COUNT")
        fields.lr = ops.token(2, "L/R")
        fields.al = ops.token(3, "A/L")
    elif fmt == InstructionFormat.EIGHT:
        fields.general_register = ops.at_offset(len(key) + 1, "R")
        fields.devid = ops.token(1, "DEVID")
    return fields


class InstructionPacker:
    def __init__(self, registry: FormatRegistry | None = None, writer: WordWriter | None = None) -> None:
        self._registry = registry or default_registry()
        self._writer = writer or WordWriter()

    @property
    def registry(self) -> FormatRegistry:
        return self._registry

    def pack(self, line: str) -> PackResult:
        try:
            return PackResult.success(self.pack_or_raise(line))
        except EncodingError as e:
            logger.warning("Illegal operation %r: %s", line, e)
            return PackResult.failure(e)

    def pack_or_raise(self, line: str) -> Word:
        key = opcode_key(line)
        fmt = self._registry.lookup_format(key)
        opcode = self._registry.lookup_opcode(key)
        if fmt is None or opcode is None:
            raise UnknownOpcodeError(f"unknown opcode: {key.strip()!r}", column=0)

        fields = decode_fields(line, fmt, key)
        word = Word()
        writer = self._writer

        if fmt in LOAD_STORE_FORMATS:
            logger.debug(
                "Writing: opcode = %d, R = %d, X = %d, I = %d, ADDR = %d",
                opcode, fields.general_register, fields.index_register,
                fields.indirection, fields.address,
            )
            return writer.write_load_store(
                word, opcode, fields.general_register, fields.index_register,
                fields.indirection, fields.address,
            )
        if fmt in XY_ARITH_FORMATS:
            logger.debug(
                "Writing: opcode = %d, RX = %d, RY = %d",
                opcode, fields.register_x, fields.register_y,
            )
            return writer.write_xy_arith(word, opcode, fields.register_x, fields.register_y)
        if fmt == InstructionFormat.SEVEN:
            logger.debug(
                "Writing: opcode = %d, R = %d, COUNT = %d, LR = %d, AL = %d",
                opcode, fields.general_register, fields.count, fields.lr, fields.al,
            )
            return writer.write_shift(
                word, opcode, fields.general_register, fields.count, fields.lr, fields.al,
            )
        logger.debug(
            "Writing: opcode = %d, R = %d, DEVID = %d",
            opcode, fields.general_register, fields.devid,
        )
        return writer.write_io(word, opcode, fields.general_register, fields.devid)


def string_to_word(line: str, registry: FormatRegistry | None = None) -> Word | None:
    return InstructionPacker(registry).pack(line).word
