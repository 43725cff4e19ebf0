"""
safedsl Syntax

Source text to AST:
- tokenizer: Linear-time scanner producing Token lists
- parser: Recursive-descent parser guarded by the security policy
- ast: Immutable node types
"""

from safedsl.syntax.tokens import Token, TokenType
from safedsl.syntax.tokenizer import Tokenizer, tokenize
from safedsl.syntax.ast import (
    Block,
    Literal,
    LiteralKind,
    MethodCall,
    NamedArg,
    PositionalArg,
    Symbol,
)
from safedsl.syntax.parser import Parser, parse

__all__ = [
    "Token",
    "TokenType",
    "Tokenizer",
    "tokenize",
    "Block",
    "Literal",
    "LiteralKind",
    "MethodCall",
    "NamedArg",
    "PositionalArg",
    "Symbol",
    "Parser",
    "parse",
]
