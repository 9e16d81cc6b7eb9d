from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from isa18.errors import EncodingError


class Severity(Enum):
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class SourceSpan:
    line: int
    start_col: int
    end_col: int

    def __str__(self) -> str:
        return f"{self.line}:{self.start_col}-{self.end_col}"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    code: str
    message: str
    severity: Severity
    span: SourceSpan

    def __str__(self) -> str:
        return f"[{self.code}] {self.severity.value}: {self.message} at {self.span}"


class DiagnosticCollector:
    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return list(self._diagnostics)

    def add(self, code: str, message: str, severity: Severity, span: SourceSpan) -> Diagnostic:
        diag = Diagnostic(code=code, message=message, severity=severity, span=span)
        self._diagnostics.append(diag)
        return diag

    def add_error(self, code: str, message: str, span: SourceSpan) -> Diagnostic:
        return self.add(code, message, Severity.ERROR, span)

    def add_encoding_error(
        self, error: EncodingError, line: int, text: str, indent: int = 0
    ) -> Diagnostic:
        if error.column is not None:
            start = indent + error.column + 1
            span = SourceSpan(line, start, start + 1)
        else:
            span = SourceSpan(line, indent + 1, indent + len(text) + 1)
        return self.add_error(error.kind.code, error.message, span)
