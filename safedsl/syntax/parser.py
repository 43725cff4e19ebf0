"""
safedsl Parser

Recursive-descent parser with one token of lookahead. The security policy is
consulted before any MethodCall node is built, so a rejected name never
appears in an AST.

Key classes:
- Parser: Parser state over one token list

Grammar:
    program    := statement (sep? statement)* EOF
    chain      := primary ('.' IDENT call_tail)*
    primary    := literal | IDENT call_tail | '(' chain ')'
    call_tail  := ('(' arguments? ')' | command)? block?
    arguments  := argument (',' argument)* ','?
    command    := argument (',' argument)*
    argument   := IDENT ':' chain | chain
    block      := 'do' statements 'end' | '{' statements '}'
    sep        := ';'

Statements on the same line must be separated by ';'. A command argument
list (`text "Hi"`, `button "Save", disabled: true`) must start on the line
of its method name.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from safedsl.errors import ParseError
from safedsl.governance.policy import DEFAULT_POLICY, SecurityPolicy
from safedsl.syntax.ast import (
    Argument,
    Block,
    Literal,
    LiteralKind,
    MethodCall,
    NamedArg,
    Node,
    PositionalArg,
)
from safedsl.syntax.tokens import Token, TokenType

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 32
DEFAULT_MAX_CHAIN = 256

_LITERAL_KINDS = {
    TokenType.STRING: LiteralKind.STRING,
    TokenType.NUMBER: LiteralKind.NUMBER,
    TokenType.BOOLEAN: LiteralKind.BOOLEAN,
    TokenType.NIL: LiteralKind.NIL,
    TokenType.SYMBOL: LiteralKind.SYMBOL,
}


class Parser:
    """Parses a token list produced by the tokenizer."""

    def __init__(self,
                 tokens: Sequence[Token],
                 policy: Optional[SecurityPolicy] = None,
                 max_depth: int = DEFAULT_MAX_DEPTH,
                 max_chain: int = DEFAULT_MAX_CHAIN):
        self.tokens = [t for t in tokens if t.type is not TokenType.COMMENT]
        if not self.tokens or self.tokens[-1].type is not TokenType.EOF:
            raise ParseError("token stream must end with EOF")
        self.policy = policy or DEFAULT_POLICY
        self.max_depth = max_depth
        self.max_chain = max_chain
        self.index = 0
        self.depth = 0
        self._last: Optional[Token] = None

    # -- navigation -------------------------------------------------------

    def _current(self) -> Token:
        return self.tokens[self.index]

    def _peek(self, offset: int = 1) -> Token:
        index = min(self.index + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def _advance(self) -> Token:
        token = self.tokens[self.index]
        if token.type is not TokenType.EOF:
            self.index += 1
        self._last = token
        return token

    def _check_punct(self, char: str) -> bool:
        return self._current().is_punct(char)

    def _expect_punct(self, char: str) -> Token:
        if not self._check_punct(char):
            self._fail(f"expected '{char}'", expected=f"'{char}'")
        return self._advance()

    def _expect_closing(self, closing: str) -> Token:
        token = self._current()
        if closing == "end" and token.is_keyword("end"):
            return self._advance()
        if closing == "}" and token.is_punct("}"):
            return self._advance()
        self._fail(f"expected '{closing}' to close block", expected=f"'{closing}'")

    def _fail(self, message: str, expected: Optional[str] = None):
        token = self._current()
        raise ParseError(message, token.position, expected=expected, found=token.describe())

    def _enter(self) -> None:
        self.depth += 1
        if self.depth > self.max_depth:
            self._fail(f"nesting exceeds maximum depth of {self.max_depth}")

    def _leave(self) -> None:
        self.depth -= 1

    # -- grammar ----------------------------------------------------------

    def parse(self) -> Node:
        """Parse a whole program; one statement yields that node, more yield a Block."""
        start = self._current().position
        statements = self._statements(closing=None)
        if not statements:
            raise ParseError("empty program", start, expected="statement", found="end of input")
        logger.debug("Parsed %d top-level statement(s)", len(statements))
        if len(statements) == 1:
            return statements[0]
        return Block(tuple(statements), start)

    def _at_closing(self, closing: Optional[str]) -> bool:
        token = self._current()
        if token.type is TokenType.EOF:
            return True
        if closing == "end":
            return token.is_keyword("end")
        if closing == "}":
            return token.is_punct("}")
        return False

    def _skip_separators(self) -> bool:
        skipped = False
        while self._check_punct(";"):
            self._advance()
            skipped = True
        return skipped

    def _statements(self, closing: Optional[str]) -> List[Node]:
        statements: List[Node] = []
        self._skip_separators()
        while not self._at_closing(closing):
            statements.append(self._chain())
            separated = self._skip_separators()
            if self._at_closing(closing):
                break
            if not separated and self._current().position.line == self._last.position.line:
                self._fail("expected ';' or newline between statements", expected="';' or newline")
        if closing is not None and self._current().type is TokenType.EOF:
            self._fail(f"expected '{closing}' to close block", expected=f"'{closing}'")
        return statements

    def _chain(self) -> Node:
        node = self._primary()
        links = 1 if isinstance(node, MethodCall) else 0
        while self._check_punct("."):
            self._advance()
            name = self._current()
            if name.type is not TokenType.IDENTIFIER:
                self._fail("expected method name after '.'", expected="method name")
            links += 1
            if links > self.max_chain:
                self._fail(f"method chain exceeds maximum length of {self.max_chain}")
            self._advance()
            node = self._call(name, receiver=node)
        return node

    def _primary(self) -> Node:
        token = self._current()
        kind = _LITERAL_KINDS.get(token.type)
        if kind is not None:
            self._advance()
            if kind is LiteralKind.SYMBOL:
                self.policy.check_identifier(token.value, token.position)
            return Literal(kind, token.value, token.position)

        if token.type is TokenType.IDENTIFIER:
            self._advance()
            return self._call(token, receiver=None)

        if token.is_punct("("):
            self._enter()
            self._advance()
            node = self._chain()
            self._expect_punct(")")
            self._leave()
            return node

        self._fail("unexpected token", expected="expression")

    def _call(self, name: Token, receiver: Optional[Node]) -> MethodCall:
        # Checked before arguments are parsed so a denied call fails at its name.
        self.policy.check_method(name.value, name.position)

        args: tuple = ()
        if self._check_punct("("):
            args = self._arguments()
        elif self._starts_command_arguments(name):
            args = self._command_arguments()

        block = None
        token = self._current()
        if token.is_keyword("do") or token.is_punct("{"):
            block = self._block()

        return MethodCall(name.value, receiver, args, block, name.position)

    def _starts_command_arguments(self, name: Token) -> bool:
        """True when `name "a"` or `name key: 1` continues on the same line."""
        token = self._current()
        if token.position.line != name.position.line:
            return False
        return token.type in _LITERAL_KINDS or token.type is TokenType.IDENTIFIER

    def _arguments(self) -> tuple:
        self._enter()
        self._expect_punct("(")
        args: List[Argument] = []
        seen_keys = set()

        while not self._check_punct(")"):
            self._argument(args, seen_keys)
            if self._check_punct(","):
                self._advance()
            elif not self._check_punct(")"):
                self._fail("expected ',' or ')' in argument list", expected="',' or ')'")

        self._advance()
        self._leave()
        return tuple(args)

    def _command_arguments(self) -> tuple:
        # Ends at the first token that is not ','; a ',' may continue on the next line.
        self._enter()
        args: List[Argument] = []
        seen_keys = set()
        self._argument(args, seen_keys)
        while self._check_punct(","):
            self._advance()
            self._argument(args, seen_keys)
        self._leave()
        return tuple(args)

    def _argument(self, args: List[Argument], seen_keys: set) -> None:
        token = self._current()
        if token.type is TokenType.IDENTIFIER and self._peek().is_punct(":"):
            self.policy.check_identifier(token.value, token.position)
            if token.value in seen_keys:
                self._fail(f"duplicate named argument '{token.value}'", expected="unique key")
            seen_keys.add(token.value)
            self._advance()
            self._advance()
            args.append(NamedArg(token.value, self._chain()))
        else:
            if seen_keys:
                self._fail("positional argument after named argument", expected="named argument")
            args.append(PositionalArg(self._chain()))

    def _block(self) -> Block:
        opener = self._advance()
        closing = "end" if opener.is_keyword("do") else "}"
        self._enter()
        statements = self._statements(closing)
        self._expect_closing(closing)
        self._leave()
        return Block(tuple(statements), opener.position)


def parse(tokens: Sequence[Token],
          policy: Optional[SecurityPolicy] = None,
          max_depth: int = DEFAULT_MAX_DEPTH,
          max_chain: int = DEFAULT_MAX_CHAIN) -> Node:
    """
    Parse a token list into an AST.

    Raises:
        ParseError: Grammar violation, empty program or limit exceeded
        SecurityError: A method name, key or symbol refused by the policy
    """
    return Parser(tokens, policy=policy, max_depth=max_depth, max_chain=max_chain).parse()
