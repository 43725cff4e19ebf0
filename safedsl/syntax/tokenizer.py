"""
safedsl Tokenizer

Single-pass character scanner turning source text into a flat token list.
Every character is looked at a bounded number of times and no regular
expressions are involved, so lexing time is linear in the input length.

Key classes:
- Tokenizer: Scanner state for one source string
"""

from __future__ import annotations

import logging
from typing import List, Optional

from safedsl.errors import LexError, Position, SecurityError
from safedsl.governance.policy import DEFAULT_POLICY, SHELL_METACHARACTERS, SecurityPolicy
from safedsl.syntax.tokens import KEYWORDS, PUNCTUATION, Token, TokenType

logger = logging.getLogger(__name__)

IDENT_START = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")
IDENT_CHARS = IDENT_START | frozenset("0123456789")
DIGITS = frozenset("0123456789")
WHITESPACE = frozenset(" \t\r\n\f\v")

# Digits allowed in one number literal, separators and sign excluded.
MAX_NUMBER_DIGITS = 32

ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "\\": "\\",
    '"': '"',
    "'": "'",
}


class Tokenizer:
    """Scans one source string; use ``tokenize()`` for the common case."""

    def __init__(self,
                 source: str,
                 keep_comments: bool = False,
                 policy: Optional[SecurityPolicy] = None):
        if not isinstance(source, str):
            raise TypeError("source must be a string")
        self.source = source
        self.keep_comments = keep_comments
        self.policy = policy or DEFAULT_POLICY
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []
        self._ident_end = -1  # offset right after the last identifier

    def tokenize(self) -> List[Token]:
        length = len(self.source)
        while self.pos < length:
            ch = self.source[self.pos]
            if ch in WHITESPACE:
                self._advance()
            elif ch == "#":
                self._line_comment()
            elif ch == "=" and self.column == 1 and self._at_block_comment():
                self._block_comment()
            elif ch == '"' or ch == "'":
                self._string(ch)
            elif ch in DIGITS or (ch == "-" and self._peek_char(1) in DIGITS):
                self._number()
            elif ch in IDENT_START:
                self._identifier()
            elif ch == ":":
                self._colon()
            elif ch in PUNCTUATION:
                self._emit(TokenType.PUNCTUATION, ch, self._position())
                self._advance()
            else:
                self._unexpected(ch)

        self.tokens.append(Token(TokenType.EOF, None, self._position()))
        logger.debug("Tokenized %d characters into %d tokens", length, len(self.tokens))
        return self.tokens

    # -- scanning helpers -------------------------------------------------

    def _position(self) -> Position:
        return Position(line=self.line, column=self.column, offset=self.pos)

    def _peek_char(self, offset: int = 0) -> str:
        index = self.pos + offset
        if index < len(self.source):
            return self.source[index]
        return ""

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _emit(self, token_type: TokenType, value, position: Position) -> None:
        self.tokens.append(Token(token_type, value, position))

    # -- comments ---------------------------------------------------------

    def _line_comment(self) -> None:
        start = self._position()
        chars = []
        self._advance()  # '#'
        while self.pos < len(self.source) and self.source[self.pos] != "\n":
            chars.append(self._advance())
        if self.keep_comments:
            self._emit(TokenType.COMMENT, "".join(chars).strip(), start)

    def _at_block_comment(self) -> bool:
        if not self.source.startswith("=begin", self.pos):
            return False
        after = self._peek_char(len("=begin"))
        return after == "" or after in WHITESPACE

    def _block_comment(self) -> None:
        start = self._position()
        chars = []
        # skip the '=begin' line
        while self.pos < len(self.source) and self.source[self.pos] != "\n":
            self._advance()
        while self.pos < len(self.source):
            self._advance()  # newline
            if self.source.startswith("=end", self.pos):
                after = self._peek_char(len("=end"))
                if after == "" or after in WHITESPACE:
                    while self.pos < len(self.source) and self.source[self.pos] != "\n":
                        self._advance()
                    if self.keep_comments:
                        self._emit(TokenType.COMMENT, "".join(chars).strip(), start)
                    return
            while self.pos < len(self.source) and self.source[self.pos] != "\n":
                chars.append(self._advance())
            chars.append("\n")
        raise LexError("unterminated block comment", start)

    # -- literals ---------------------------------------------------------

    def _string(self, quote: str) -> None:
        start = self._position()
        self._advance()  # opening quote
        chars = []
        while self.pos < len(self.source):
            ch = self._advance()
            if ch == quote:
                self._emit(TokenType.STRING, "".join(chars), start)
                return
            if ch == "\\":
                if self.pos >= len(self.source):
                    break
                escaped = self._advance()
                chars.append(ESCAPES.get(escaped, escaped))
            else:
                chars.append(ch)
        raise LexError("unterminated string", start)

    def _number(self) -> None:
        start = self._position()
        chars = []
        if self.source[self.pos] == "-":
            chars.append(self._advance())
        is_float = False
        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch in DIGITS or ch == "_":
                chars.append(self._advance())
            elif ch == "." and not is_float and self._peek_char(1) in DIGITS:
                is_float = True
                chars.append(self._advance())
            else:
                break
        if self._peek_char() in IDENT_START:
            raise LexError("invalid number literal", start)

        text = "".join(chars).replace("_", "")
        if sum(ch in DIGITS for ch in text) > MAX_NUMBER_DIGITS:
            raise LexError("number literal too long", start)
        value = float(text) if is_float else int(text)
        self._emit(TokenType.NUMBER, value, start)

    def _identifier(self) -> None:
        start = self._position()
        chars = []
        while self.pos < len(self.source) and self.source[self.pos] in IDENT_CHARS:
            chars.append(self._advance())
        if self._peek_char() in ("?", "!"):
            chars.append(self._advance())
        word = "".join(chars)

        if word in KEYWORDS:
            self._emit(TokenType.KEYWORD, word, start)
        elif word in ("true", "false"):
            self._emit(TokenType.BOOLEAN, word == "true", start)
        elif word == "nil":
            self._emit(TokenType.NIL, None, start)
        else:
            self._emit(TokenType.IDENTIFIER, word, start)
            self._ident_end = self.pos

    def _colon(self) -> None:
        start = self._position()
        attached = self._ident_end == self.pos
        self._advance()
        if not attached and self._peek_char() in IDENT_START:
            chars = []
            while self.pos < len(self.source) and self.source[self.pos] in IDENT_CHARS:
                chars.append(self._advance())
            if self._peek_char() in ("?", "!"):
                chars.append(self._advance())
            self._emit(TokenType.SYMBOL, "".join(chars), start)
        else:
            self._emit(TokenType.PUNCTUATION, ":", start)

    def _unexpected(self, ch: str) -> None:
        position = self._position()
        window = self.source[self.pos:self.pos + 2]
        if self.policy.is_identifier_suspicious(ch):
            raise SecurityError(ch, "contains a shell metacharacter sequence", position)
        if window in SHELL_METACHARACTERS:
            raise SecurityError(window, "contains a shell metacharacter sequence", position)
        raise LexError(f"unexpected character {ch!r}", position)


def tokenize(source: str,
             keep_comments: bool = False,
             max_length: Optional[int] = None,
             policy: Optional[SecurityPolicy] = None) -> List[Token]:
    """
    Convert source text into a token list ending with an EOF token.

    Args:
        source: DSL source text
        keep_comments: Emit COMMENT tokens instead of dropping comments
        max_length: Reject sources longer than this many characters
        policy: Policy used to classify unexpected characters

    Raises:
        LexError: Unterminated string/comment, bad character, oversized input
        SecurityError: Shell metacharacter sequence outside a string
    """
    if max_length is not None and isinstance(source, str) and len(source) > max_length:
        raise LexError(f"source exceeds {max_length} characters", Position())
    return Tokenizer(source, keep_comments=keep_comments, policy=policy).tokenize()
