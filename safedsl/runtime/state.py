"""
safedsl Runtime State

Key classes:
- RenderNode: Immutable output node (tag, attributes, children, text)
- Scope: Explicit child accumulator for one block execution
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

FRAGMENT_TAG = "fragment"


@dataclass(frozen=True)
class RenderNode:
    """
    Renderable output node.

    Attributes are kept as an ordered tuple of pairs so the node stays
    hashable; ``attributes`` exposes them as a dict.
    """
    tag: str
    attribute_items: Tuple[Tuple[str, str], ...] = ()
    children: Tuple["RenderNode", ...] = ()
    text: Optional[str] = None

    @classmethod
    def create(cls,
               tag: str,
               attributes: Optional[Dict[str, str]] = None,
               children=(),
               text: Optional[str] = None) -> "RenderNode":
        items = tuple((attributes or {}).items())
        return cls(tag, items, tuple(children), text)

    @classmethod
    def text_node(cls, value: str) -> "RenderNode":
        return cls("span", (), (), value)

    @classmethod
    def fragment(cls, children) -> "RenderNode":
        return cls(FRAGMENT_TAG, (), tuple(children), None)

    @property
    def attributes(self) -> Dict[str, str]:
        return dict(self.attribute_items)

    @property
    def is_fragment(self) -> bool:
        return self.tag == FRAGMENT_TAG

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag,
            "attributes": self.attributes,
            "children": [child.to_dict() for child in self.children],
            "text": self.text,
        }

    def digest(self) -> str:
        """sha256 over the canonical JSON form."""
        canon = json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))
        return "sha256:" + hashlib.sha256(canon.encode("utf-8")).hexdigest()

    def count(self) -> int:
        """Number of nodes in this subtree."""
        total = 0
        stack = [self]
        while stack:
            node = stack.pop()
            total += 1
            stack.extend(node.children)
        return total


@dataclass
class Scope:
    """
    Execution scope of one block.

    ``children`` collects rendered statement results in source order; it is
    owned by the block being executed and discarded once merged.
    """
    parent: Optional["Scope"] = None
    depth: int = 0
    children: List[RenderNode] = field(default_factory=list)

    def child(self) -> "Scope":
        return Scope(parent=self, depth=self.depth + 1)

    def collect(self, node: RenderNode) -> None:
        self.children.append(node)

    def result(self) -> Tuple[RenderNode, ...]:
        return tuple(self.children)
