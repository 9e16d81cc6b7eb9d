from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from isa18.bits import check_width
from isa18.constants import DEFAULT_INDEX_TO_FLAGS, OPCODE_BITS
from isa18.errors import WidthOverflowError

logger = logging.getLogger(__name__)


class InstructionFormat(Enum):
    ONE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8

    @classmethod
    def from_str(cls, s: str) -> InstructionFormat | None:
        try:
            return cls[s.upper()]
        except KeyError:
            return None

    @classmethod
    def parse(cls, value: str | int) -> InstructionFormat:
        if isinstance(value, int):
            return cls(value)
        fmt = cls.from_str(value)
        if fmt is None:
            raise ValueError(f"unknown instruction format: {value!r}")
        return fmt


# (mnemonic key, format, opcode)
DEFAULT_INSTRUCTIONS: tuple[tuple[str, InstructionFormat, int], ...] = (
    ("LDR", InstructionFormat.ONE, 0o01),
    ("STR", InstructionFormat.ONE, 0o02),
    ("LDA", InstructionFormat.ONE, 0o03),
    ("AMR", InstructionFormat.ONE, 0o04),
    ("SMR", InstructionFormat.ONE, 0o05),
    ("AIR", InstructionFormat.THREE, 0o06),
    ("SIR", InstructionFormat.THREE, 0o07),
    ("JZ ", InstructionFormat.ONE, 0o10),
    ("JNE", InstructionFormat.ONE, 0o11),
    ("JCC", InstructionFormat.ONE, 0o12),
    ("JMP", InstructionFormat.TWO, 0o13),
    ("JSR", InstructionFormat.TWO, 0o14),
    ("RFS", InstructionFormat.FOUR, 0o15),
    ("SOB", InstructionFormat.ONE, 0o16),
    ("JGE", InstructionFormat.ONE, 0o17),
    ("MLT", InstructionFormat.SIX, 0o20),
    ("DVD", InstructionFormat.SIX, 0o21),
    ("TRR", InstructionFormat.SIX, 0o22),
    ("AND", InstructionFormat.SIX, 0o23),
    ("ORR", InstructionFormat.SIX, 0o24),
    ("NOT", InstructionFormat.FIVE, 0o25),
    ("SRC", InstructionFormat.SEVEN, 0o31),
    ("RRC", InstructionFormat.SEVEN, 0o32),
    ("LDX", InstructionFormat.TWO, 0o41),
    ("STX", InstructionFormat.TWO, 0o42),
    ("IN", InstructionFormat.EIGHT, 0o61),
    ("OUT", InstructionFormat.EIGHT, 0o62),
    ("CHK", InstructionFormat.EIGHT, 0o63),
)


@dataclass(frozen=True, slots=True)
class FormatRegistry:
    """Read-only mnemonic tables shared by every packer.

    Two-letter mnemonics other than ``IN`` are keyed with a trailing space
    (``"JZ "``) because the packer always takes three characters for them.
    """

    formats: Mapping[str, InstructionFormat]
    opcodes: Mapping[str, int]
    index_to_flags: tuple[int, ...] = field(default=DEFAULT_INDEX_TO_FLAGS)

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[tuple[str, InstructionFormat, int]],
        *,
        index_to_flags: Iterable[int] = DEFAULT_INDEX_TO_FLAGS,
    ) -> FormatRegistry:
        formats: dict[str, InstructionFormat] = {}
        opcodes: dict[str, int] = {}
        for key, fmt, opcode in entries:
            if not 2 <= len(key) <= 3:
                raise ValueError(f"mnemonic key must be 2 or 3 characters: {key!r}")
            if key in formats:
                raise ValueError(f"duplicate mnemonic key: {key!r}")
            check_width(opcode, OPCODE_BITS)
            formats[key] = fmt
            opcodes[key] = opcode
        return cls(
            formats=MappingProxyType(formats),
            opcodes=MappingProxyType(opcodes),
            index_to_flags=tuple(index_to_flags),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FormatRegistry:
        """Build a registry from decoded JSON; any bad content raises ValueError."""
        if not isinstance(data, Mapping):
            raise ValueError(f"registry must be an object, got {type(data).__name__}")
        instructions = data.get("instructions", [])
        if not isinstance(instructions, list):
            raise ValueError("registry 'instructions' must be a list")
        entries = []
        for item in instructions:
            try:
                key = item["mnemonic"]
                fmt = InstructionFormat.parse(item["format"])
                opcode = _parse_opcode(item["opcode"])
            except (KeyError, TypeError) as e:
                raise ValueError(f"invalid registry entry {item!r}: {e}") from e
            if not isinstance(key, str):
                raise ValueError(f"mnemonic must be a string: {key!r}")
            entries.append((key, fmt, opcode))
        flags = data.get("index_to_flags", DEFAULT_INDEX_TO_FLAGS)
        try:
            return cls.from_entries(entries, index_to_flags=flags)
        except (WidthOverflowError, TypeError) as e:
            raise ValueError(f"invalid registry: {e}") from e

    @classmethod
    def from_json(cls, path: Path | str) -> FormatRegistry:
        path = Path(path).expanduser()
        data = json.loads(path.read_text(encoding="utf-8"))
        registry = cls.from_dict(data)
        logger.debug("Loaded %d mnemonics from %s", len(registry.formats), path)
        return registry

    def lookup_format(self, key: str) -> InstructionFormat | None:
        return self.formats.get(key)

    def lookup_opcode(self, key: str) -> int | None:
        return self.opcodes.get(key)

    def lookup_flag(self, index: int) -> int:
        if not 0 <= index < len(self.index_to_flags):
            raise IndexError(f"no flag registered for index {index}")
        return self.index_to_flags[index]

    def __contains__(self, key: object) -> bool:
        return key in self.formats


def _parse_opcode(value: str | int) -> int:
    if isinstance(value, bool):
        raise TypeError("opcode must be an integer or numeric string")
    if isinstance(value, int):
        return value
    return int(value, 0)


@lru_cache(maxsize=1)
def default_registry() -> FormatRegistry:
    return FormatRegistry.from_entries(DEFAULT_INSTRUCTIONS)
