from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    UNKNOWN_OPCODE = "E001"
    MALFORMED_OPERAND = "E002"
    WIDTH_OVERFLOW = "E003"

    @property
    def code(self) -> str:
        return self.value


class EncodingError(Exception):
    kind: ErrorKind = ErrorKind.MALFORMED_OPERAND

    def __init__(self, message: str, *, column: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.column = column


class UnknownOpcodeError(EncodingError):
    kind = ErrorKind.UNKNOWN_OPCODE


class MalformedOperandError(EncodingError):
    kind = ErrorKind.MALFORMED_OPERAND


class WidthOverflowError(EncodingError):
    kind = ErrorKind.WIDTH_OVERFLOW
