from __future__ import annotations

from textwrap import dedent

from isa18.assembler import assemble, strip_comment
from isa18.errors import ErrorKind


def test_strip_comment() -> None:
    assert strip_comment("LDR 1,2,3   ; load") == "LDR 1,2,3"
    assert strip_comment("; only a comment") == ""


def test_assemble_skips_blank_and_comment_lines() -> None:
    source = dedent(
        """\
        ; header
        LDR 1,2,10

        IN 1,3   ; keyboard
        """
    )
    result = assemble(source)

    assert not result.has_errors()
    assert result.format_diagnostics() == "No issues found."
    assert [line.line_no for line in result.lines] == [2, 4]
    assert [w.to_octal() for w in result.words] == ["013012", "612003"]


def test_assemble_collects_every_error() -> None:
    source = "LDR 1,2,10\nXYZ 1\nLDR 1,x,10\nNOT 2\n"
    result = assemble(source)

    assert result.has_errors()
    assert [line.text for line in result.lines] == ["LDR 1,2,10", "NOT 2"]
    codes = [(d.code, d.span.line) for d in result.diagnostics]
    assert codes == [
        (ErrorKind.UNKNOWN_OPCODE.code, 2),
        (ErrorKind.MALFORMED_OPERAND.code, 3),
    ]
    assert str(result.diagnostics[1].span) == "3:7-8"


def test_format_diagnostics_with_label() -> None:
    result = assemble("LDR 1,2,10\nXYZ 1\n")
    text = result.format_diagnostics("prog.asm")
    assert "=== 1 Error(s) ===" in text
    assert "[E001] error:" in text
    assert "at prog.asm:2:1-2" in text


def test_assemble_accepts_indented_lines() -> None:
    result = assemble("    LDR 1,2,10   ; load\n\tIN 1,3\n")

    assert not result.has_errors()
    assert [line.text for line in result.lines] == ["LDR 1,2,10", "IN 1,3"]
    assert [w.to_octal() for w in result.words] == ["013012", "612003"]


def test_indented_error_columns_point_into_raw_line() -> None:
    result = assemble("    LDR 1,x,10\n  XYZ 1\n")

    spans = [str(d.span) for d in result.diagnostics]
    assert spans == ["1:11-12", "2:3-4"]
