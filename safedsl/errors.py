"""
safedsl Error Taxonomy

Every failure of a parse/execute cycle surfaces as one of four typed errors.
Callers must be able to tell a malformed program from a forbidden one, so
SecurityError is never folded into ParseError.

Key classes:
- DSLError: Base class carrying kind, message and source position
- LexError: Unterminated literal/comment or unexpected character
- ParseError: Grammar violation or nesting limit exceeded
- SecurityError: Denied method name or suspicious identifier
- ExecutionError: Runtime failure while dispatching to a capability
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Position:
    """Location in source text (1-based line/column, 0-based offset)."""
    line: int = 1
    column: int = 1
    offset: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"line": self.line, "column": self.column, "offset": self.offset}

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column}"


class DSLError(Exception):
    """Base class for all interpreter errors."""

    kind = "dsl_error"

    def __init__(self, message: str, position: Optional[Position] = None):
        self.message = message
        self.position = position
        super().__init__(self._format())

    def _format(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} at {self.position}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "message": self.message,
            "position": self.position.to_dict() if self.position else None,
        }


class LexError(DSLError):
    """Raised by the tokenizer."""

    kind = "lex_error"

    def __init__(self, reason: str, position: Optional[Position] = None):
        self.reason = reason
        super().__init__(reason, position)


class ParseError(DSLError):
    """Raised by the parser on grammar violations."""

    kind = "parse_error"

    def __init__(self,
                 message: str,
                 position: Optional[Position] = None,
                 expected: Optional[str] = None,
                 found: Optional[str] = None):
        self.expected = expected
        self.found = found
        super().__init__(message, position)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["expected"] = self.expected
        data["found"] = self.found
        return data


class SecurityError(DSLError):
    """Raised when a method name or identifier is refused by the policy."""

    kind = "security_error"

    def __init__(self,
                 method_name: str,
                 reason: str = "is not allowed",
                 position: Optional[Position] = None):
        self.method_name = method_name
        self.reason = reason
        super().__init__(f"'{method_name}' {reason}", position)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["method_name"] = self.method_name
        return data


class ExecutionError(DSLError):
    """Raised while executing an AST against a capability context."""

    kind = "execution_error"

    def __init__(self,
                 message: str,
                 method_name: Optional[str] = None,
                 position: Optional[Position] = None):
        self.method_name = method_name
        super().__init__(message, position)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["method_name"] = self.method_name
        return data
