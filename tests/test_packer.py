from __future__ import annotations

import logging

import pytest
from hypothesis import given, strategies as st

from isa18.errors import ErrorKind, MalformedOperandError, UnknownOpcodeError
from isa18.formats import FormatRegistry, InstructionFormat, default_registry
from isa18.packer import (
    DecodedFields,
    InstructionPacker,
    decode_fields,
    opcode_key,
    parse_byte,
    string_to_word,
)
from isa18.writer import decode_word


@pytest.fixture
def packer() -> InstructionPacker:
    return InstructionPacker(default_registry())


def _decode(packer: InstructionPacker, line: str) -> dict:
    result = packer.pack(line)
    assert result.ok, result.error
    assert result.word is not None
    return decode_word(result.word, packer.registry)


def test_opcode_key() -> None:
    assert opcode_key("IN 1,3") == "IN"
    assert opcode_key("LDR 1,2,3") == "LDR"
    assert opcode_key("JZ  1,2,3") == "JZ "


def test_lda_packs_opcode_and_address(packer: InstructionPacker) -> None:
    fields = _decode(packer, "LDA,1,100")
    assert fields["opcode"] == default_registry().lookup_opcode("LDA")
    assert fields["address"] == 100
    assert fields["r"] == 1
    assert fields["ix"] == 1


def test_in_reads_register_after_short_key(packer: InstructionPacker) -> None:
    fields = _decode(packer, "IN 1,3")
    assert fields["format"] == InstructionFormat.EIGHT
    assert fields["devid"] == 3
    assert fields["r"] == 1


def test_unknown_mnemonic_fails_without_word(packer: InstructionPacker) -> None:
    result = packer.pack("XYZ 1,2")
    assert not result.ok
    assert result.word is None
    assert result.error is not None
    assert result.error.kind == ErrorKind.UNKNOWN_OPCODE
    assert string_to_word("XYZ 1,2") is None


def test_empty_line_is_unknown_opcode(packer: InstructionPacker) -> None:
    assert packer.pack("").error.kind == ErrorKind.UNKNOWN_OPCODE


def test_format_one_indirection_is_optional(packer: InstructionPacker) -> None:
    fields = _decode(packer, "LDR 1,2,10")
    assert (fields["r"], fields["ix"], fields["address"], fields["i"]) == (1, 2, 10, 0)

    fields = _decode(packer, "LDR 1,2,10,1")
    assert fields["i"] == 1


def test_format_two(packer: InstructionPacker) -> None:
    fields = _decode(packer, "LDX 2,15")
    assert (fields["r"], fields["ix"], fields["address"], fields["i"]) == (0, 2, 15, 0)

    fields = _decode(packer, "JMP 1,10,1")
    assert (fields["ix"], fields["address"], fields["i"]) == (1, 10, 1)


def test_format_three(packer: InstructionPacker) -> None:
    fields = _decode(packer, "AIR 3,20")
    assert (fields["r"], fields["address"]) == (3, 20)


def test_format_four(packer: InstructionPacker) -> None:
    fields = _decode(packer, "RFS 12")
    assert fields["mnemonic"] == "RFS"
    assert fields["address"] == 12

    result = packer.pack("RFS")
    assert result.error.kind == ErrorKind.MALFORMED_OPERAND


def test_format_five_and_six(packer: InstructionPacker) -> None:
    fields = _decode(packer, "NOT 2")
    assert (fields["rx"], fields["ry"]) == (2, 0)

    fields = _decode(packer, "TRR 1,3")
    assert (fields["rx"], fields["ry"]) == (1, 3)


def test_format_seven(packer: InstructionPacker) -> None:
    fields = _decode(packer, "SRC 1,4,1,0")
    assert (fields["r"], fields["count"], fields["lr"], fields["al"]) == (1, 4, 1, 0)

    result = packer.pack("SRC 1,4,1")
    assert result.error.kind == ErrorKind.MALFORMED_OPERAND


def test_format_eight_three_letter_key(packer: InstructionPacker) -> None:
    fields = _decode(packer, "OUT 2,31")
    assert (fields["mnemonic"], fields["r"], fields["devid"]) == ("OUT", 2, 31)


def test_two_letter_key_padded_to_three_columns(packer: InstructionPacker) -> None:
    fields = _decode(packer, "JZ  1,0,5")
    assert (fields["mnemonic"], fields["r"], fields["address"]) == ("JZ", 1, 5)


@pytest.mark.parametrize(
    "line, column",
    [
        ("LDR x,2,10", 4),
        ("LDR 1,a,10", 6),
        ("LDR 1,2,", 8),
        ("LDR 1,2,10,y", 11),
        ("LDR 1,0,200", 8),
    ],
)
def test_malformed_operands(packer: InstructionPacker, line: str, column: int) -> None:
    result = packer.pack(line)
    assert result.word is None
    assert result.error.kind == ErrorKind.MALFORMED_OPERAND
    assert result.error.column == column


def test_missing_required_token(packer: InstructionPacker) -> None:
    result = packer.pack("LDR 1,2")
    assert result.error.kind == ErrorKind.MALFORMED_OPERAND
    assert "missing" in result.error.message


def test_missing_fixed_column(packer: InstructionPacker) -> None:
    result = packer.pack("NOT")
    assert result.error.kind == ErrorKind.MALFORMED_OPERAND


def test_negative_field_is_truncated_to_slot(packer: InstructionPacker) -> None:
    fields = _decode(packer, "LDR 0,0,-1")
    assert fields["address"] == 0x7F
    assert fields["i"] == 0


def test_pack_or_raise(packer: InstructionPacker) -> None:
    assert packer.pack_or_raise("NOT 1").field(7, 2) == 1
    with pytest.raises(UnknownOpcodeError):
        packer.pack_or_raise("ZZZ 1")
    with pytest.raises(MalformedOperandError):
        packer.pack_or_raise("NOT q")


def test_parse_byte() -> None:
    assert parse_byte(" 12 ", "ADDR") == 12
    assert parse_byte("-128", "ADDR") == -128
    assert parse_byte("+7", "ADDR") == 7
    with pytest.raises(MalformedOperandError):
        parse_byte("128", "ADDR")
    with pytest.raises(MalformedOperandError):
        parse_byte("", "ADDR")
    with pytest.raises(MalformedOperandError):
        parse_byte("1.5", "ADDR")


def test_decode_fields_defaults_unset_fields() -> None:
    fields = decode_fields("AIR 2,9", InstructionFormat.THREE, "AIR")
    assert fields == DecodedFields(general_register=2, address=9)


def test_injected_registry() -> None:
    registry = FormatRegistry.from_entries([("FOO", InstructionFormat.FIVE, 0o70)])
    packer = InstructionPacker(registry)

    fields = _decode(packer, "FOO 3")
    assert (fields["opcode"], fields["mnemonic"], fields["rx"]) == (0o70, "FOO", 3)
    assert packer.pack("LDR 1,2,3").error.kind == ErrorKind.UNKNOWN_OPCODE


def test_logging(packer: InstructionPacker, caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="isa18.packer"):
        packer.pack("LDR 1,2,10")
        packer.pack("XYZ 1")
    assert "Writing: opcode = 1, R = 1, X = 2, I = 0, ADDR = 10" in caplog.text
    assert "Illegal operation" in caplog.text


@given(
    st.integers(0, 3),
    st.integers(0, 3),
    st.integers(0, 127),
    st.integers(0, 1),
)
def test_load_store_fields_survive_packing(r: int, ix: int, address: int, i: int) -> None:
    packer = InstructionPacker()
    fields = _decode(packer, f"STR {r},{ix},{address},{i}")
    assert (fields["r"], fields["ix"], fields["address"], fields["i"]) == (r, ix, address, i)
