from __future__ import annotations

import logging
from dataclasses import dataclass, field

from isa18.diagnostics import Diagnostic, DiagnosticCollector, Severity
from isa18.errors import EncodingError
from isa18.formats import FormatRegistry
from isa18.packer import InstructionPacker
from isa18.word import Word

logger = logging.getLogger(__name__)

COMMENT_CHAR = ";"


@dataclass(frozen=True, slots=True)
class AssembledLine:
    line_no: int
    text: str
    word: Word


@dataclass(slots=True)
class AssembleResult:
    lines: list[AssembledLine] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def words(self) -> tuple[Word, ...]:
        return tuple(line.word for line in self.lines)

    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self.diagnostics)

    def format_diagnostics(self, label: str | None = None) -> str:
        if not self.diagnostics:
            return "No issues found."

        errors = [d for d in self.diagnostics if d.severity == Severity.ERROR]

        def render(d: Diagnostic) -> str:
            if label is None:
                return str(d)
            return f"[{d.code}] {d.severity.value}: {d.message} at {label}:{d.span}"

        lines = [f"=== {len(errors)} Error(s) ==="]
        lines.extend(render(d) for d in errors)
        return "\n".join(lines)


def strip_comment(raw: str) -> str:
    idx = raw.find(COMMENT_CHAR)
    if idx >= 0:
        raw = raw[:idx]
    return raw.rstrip()


def assemble(source: str, registry: FormatRegistry | None = None) -> AssembleResult:
    """Pack every instruction line of ``source``, one word per line.

    Blank lines and ``;`` comments are skipped. A bad line adds a diagnostic
    and produces no word; the remaining lines are still packed.
    """
    packer = InstructionPacker(registry)
    diagnostics = DiagnosticCollector()
    result = AssembleResult()

    for line_no, raw in enumerate(source.splitlines(), start=1):
        stripped = strip_comment(raw)
        text = stripped.lstrip()
        if not text:
            continue
        # operand columns are relative to the mnemonic, not the raw line
        indent = len(stripped) - len(text)
        try:
            word = packer.pack_or_raise(text)
        except EncodingError as e:
            logger.warning("Line %d: illegal operation %r: %s", line_no, text, e)
            diagnostics.add_encoding_error(e, line_no, text, indent)
            continue
        result.lines.append(AssembledLine(line_no, text, word))

    result.diagnostics = diagnostics.diagnostics
    return result
