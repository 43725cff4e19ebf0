"""
safedsl Tokens

Key classes:
- TokenType: Lexical categories
- Token: Immutable token with source position
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from safedsl.errors import Position


class TokenType(Enum):
    IDENTIFIER = "IDENTIFIER"
    KEYWORD = "KEYWORD"
    PUNCTUATION = "PUNCTUATION"
    STRING = "STRING"
    NUMBER = "NUMBER"
    SYMBOL = "SYMBOL"
    BOOLEAN = "BOOLEAN"
    NIL = "NIL"
    COMMENT = "COMMENT"
    EOF = "EOF"


KEYWORDS = frozenset({"do", "end"})
PUNCTUATION = frozenset(".(),:{};")

LITERAL_TYPES = frozenset({
    TokenType.STRING,
    TokenType.NUMBER,
    TokenType.SYMBOL,
    TokenType.BOOLEAN,
    TokenType.NIL,
})


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: Any
    position: Position

    def is_punct(self, char: str) -> bool:
        return self.type is TokenType.PUNCTUATION and self.value == char

    def is_keyword(self, word: str) -> bool:
        return self.type is TokenType.KEYWORD and self.value == word

    def describe(self) -> str:
        """Short human-readable form used in error messages."""
        if self.type is TokenType.EOF:
            return "end of input"
        if self.type is TokenType.NIL:
            return "nil"
        if self.type is TokenType.STRING:
            return f"string {self.value!r}"
        if self.type is TokenType.SYMBOL:
            return f"symbol :{self.value}"
        if self.type is TokenType.PUNCTUATION:
            return f"'{self.value}'"
        return f"{self.type.value.lower()} {self.value!r}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "value": self.value,
            "position": self.position.to_dict(),
        }
