"""
safedsl Abstract Syntax Tree

Immutable node types produced by the parser. Nodes are frozen dataclasses
holding tuples, so an AST can be compared structurally and shared freely.

Key classes:
- MethodCall: Call with optional receiver, arguments and block
- PositionalArg / NamedArg: Call arguments
- Literal: String, number, boolean, nil or symbol leaf
- Block: Ordered statements of a do/end or {} body
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from safedsl.errors import Position


class LiteralKind(Enum):
    STRING = "STRING"
    NUMBER = "NUMBER"
    BOOLEAN = "BOOLEAN"
    NIL = "NIL"
    SYMBOL = "SYMBOL"


@dataclass(frozen=True)
class Symbol:
    """Runtime value of a symbol literal such as ``:center``."""
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Literal:
    kind: LiteralKind
    value: Any
    position: Position = field(default_factory=Position, compare=False)

    def evaluate(self) -> Any:
        if self.kind is LiteralKind.SYMBOL:
            return Symbol(self.value)
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "literal", "kind": self.kind.value, "value": self.value}


@dataclass(frozen=True)
class PositionalArg:
    value: "Node"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "positional_arg", "value": self.value.to_dict()}


@dataclass(frozen=True)
class NamedArg:
    key: str
    value: "Node"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "named_arg", "key": self.key, "value": self.value.to_dict()}


Argument = Union[PositionalArg, NamedArg]


@dataclass(frozen=True)
class Block:
    statements: Tuple["Node", ...] = ()
    position: Position = field(default_factory=Position, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "block",
            "statements": [stmt.to_dict() for stmt in self.statements],
        }


@dataclass(frozen=True)
class MethodCall:
    method: str
    receiver: Optional["Node"] = None
    args: Tuple[Argument, ...] = ()
    block: Optional[Block] = None
    position: Position = field(default_factory=Position, compare=False)

    @property
    def positional_args(self) -> Tuple[PositionalArg, ...]:
        return tuple(a for a in self.args if isinstance(a, PositionalArg))

    @property
    def named_args(self) -> Tuple[NamedArg, ...]:
        return tuple(a for a in self.args if isinstance(a, NamedArg))

    def chain(self) -> Tuple["MethodCall", ...]:
        """Calls of a receiver chain, innermost first."""
        links = []
        node: Optional[Node] = self
        while isinstance(node, MethodCall):
            links.append(node)
            node = node.receiver
        links.reverse()
        return tuple(links)

    def chain_root(self) -> Optional["Node"]:
        """Non-call receiver at the bottom of the chain (usually None)."""
        return self.chain()[0].receiver

    def to_dict(self) -> Dict[str, Any]:
        # Walk the receiver chain iteratively; chains can be long.
        data: Optional[Dict[str, Any]] = None
        root = self.chain_root()
        if root is not None:
            data = root.to_dict()
        for call in self.chain():
            data = {
                "type": "method_call",
                "method": call.method,
                "receiver": data,
                "args": [arg.to_dict() for arg in call.args],
                "block": call.block.to_dict() if call.block else None,
            }
        return data


Node = Union[MethodCall, Literal, Block]


def count_calls(node: Node) -> int:
    """Number of MethodCall nodes in a tree."""
    total = 0
    stack = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, MethodCall):
            total += 1
            if current.receiver is not None:
                stack.append(current.receiver)
            stack.extend(arg.value for arg in current.args)
            if current.block is not None:
                stack.append(current.block)
        elif isinstance(current, Block):
            stack.extend(current.statements)
    return total
