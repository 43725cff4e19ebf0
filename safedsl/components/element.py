"""
safedsl Element

Chainable UI value handed out by the standard context. Every modifier returns
a new Element; nothing is mutated in place. Values that end up in CSS class
names pass through ``safe_css_token`` first.

Key classes:
- Element: Immutable element under construction (tag, text, classes, attributes, children)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

from safedsl.errors import ExecutionError
from safedsl.governance.values import safe_css_token, sanitize_data_key, stringify
from safedsl.runtime.environment import CapabilityProvider, operation
from safedsl.runtime.state import RenderNode

SPACING_UTILITIES = {
    "m": "m", "mt": "mt", "mr": "mr", "mb": "mb", "ml": "ml", "mx": "mx", "my": "my",
    "p": "p", "pt": "pt", "pr": "pr", "pb": "pb", "pl": "pl", "px": "px", "py": "py",
}

SIZE_UTILITIES = {
    "w": "w", "min_w": "min-w", "max_w": "max-w",
    "h": "h", "min_h": "min-h", "max_h": "max-h",
}

TEXT_UTILITIES = {
    "text_size": "text", "font_size": "text", "text_color": "text",
    "font_weight": "font", "text_align": "text", "line_clamp": "line-clamp",
}

# Modifiers without arguments that add the class of the same name.
FLAG_UTILITIES = (
    "italic", "underline",
    "flex", "block", "inline", "hidden",
    "relative", "absolute", "fixed",
)

HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _is_hex_color(value: str) -> bool:
    return (
        value.startswith("#")
        and len(value) in (4, 5, 7, 9)
        and all(ch in HEX_DIGITS for ch in value[1:])
    )


@dataclass(frozen=True)
class Element(CapabilityProvider):
    tag: str
    text: Optional[str] = None
    classes: Tuple[str, ...] = ()
    attributes: Tuple[Tuple[str, str], ...] = ()
    children: Tuple[RenderNode, ...] = ()

    # -- construction helpers (not DSL operations) ------------------------

    def add_classes(self, *classes: str) -> "Element":
        added = tuple(c for c in classes if c and c not in self.classes)
        return replace(self, classes=self.classes + added)

    def set_attribute(self, name: str, value: Any) -> "Element":
        text = stringify(value, name)
        items = [(k, v) for k, v in self.attributes if k != name]
        items.append((name, text))
        return replace(self, attributes=tuple(items))

    def get_attribute(self, name: str) -> Optional[str]:
        return dict(self.attributes).get(name)

    def with_children(self, children) -> "Element":
        return replace(self, children=self.children + tuple(children))

    def render(self) -> RenderNode:
        attributes: Dict[str, str] = {}
        if self.classes:
            attributes["class"] = " ".join(self.classes)
        for name, value in self.attributes:
            if name == "class":
                continue
            attributes[name] = value
        return RenderNode.create(self.tag, attributes, self.children, self.text)

    # -- modifiers --------------------------------------------------------

    @operation()
    def tw(self, *classes):
        """Add raw utility classes (space separated)."""
        tokens = []
        for value in classes:
            for part in stringify(value, "tw").split():
                tokens.append(safe_css_token(part, "tw"))
        return self.add_classes(*tokens)

    @operation()
    def padding(self, size):
        """Add padding on all sides."""
        return self.add_classes(f"p-{safe_css_token(size, 'padding')}")

    @operation()
    def margin(self, size):
        """Add margin on all sides."""
        return self.add_classes(f"m-{safe_css_token(size, 'margin')}")

    @operation()
    def width(self, size):
        return self.add_classes(f"w-{safe_css_token(size, 'width')}")

    @operation()
    def height(self, size):
        return self.add_classes(f"h-{safe_css_token(size, 'height')}")

    @operation()
    def bg(self, color):
        """Background color utility class."""
        return self.add_classes(f"bg-{safe_css_token(color, 'bg')}")

    @operation()
    def background(self, color):
        """Background color; hex values become an inline style."""
        value = stringify(color, "background")
        if value.startswith("#"):
            if not _is_hex_color(value):
                raise ExecutionError(f"invalid color {value!r}", method_name="background")
            style = self.get_attribute("style")
            declaration = f"background-color: {value}"
            return self.set_attribute("style", f"{style}; {declaration}" if style else declaration)
        return self.add_classes(f"bg-{safe_css_token(value, 'background')}")

    @operation()
    def rounded(self, size=""):
        if stringify(size, "rounded") == "":
            return self.add_classes("rounded")
        return self.add_classes(f"rounded-{safe_css_token(size, 'rounded')}")

    @operation()
    def corner_radius(self, size):
        return self.add_classes(f"rounded-{safe_css_token(size, 'corner_radius')}")

    @operation()
    def shadow(self, size=""):
        if stringify(size, "shadow") == "":
            return self.add_classes("shadow")
        return self.add_classes(f"shadow-{safe_css_token(size, 'shadow')}")

    @operation()
    def border(self, width=None):
        if width is None:
            return self.add_classes("border")
        return self.add_classes(f"border-{safe_css_token(width, 'border')}")

    @operation()
    def opacity(self, value):
        return self.add_classes(f"opacity-{safe_css_token(value, 'opacity')}")

    @operation()
    def disabled(self, value=True):
        """Mark the element disabled and dim it."""
        if not value:
            return self
        return self.add_classes("opacity-50", "cursor-not-allowed").set_attribute("disabled", "disabled")

    @operation()
    def id(self, value):
        return self.set_attribute("id", value)

    @operation()
    def title(self, value):
        return self.set_attribute("title", value)

    @operation()
    def aria_label(self, value):
        return self.set_attribute("aria-label", value)

    @operation()
    def data(self, pair=None, **attributes):
        """
        Set data-* attributes, either ``data(key: value)`` or ``data("key:value")``.
        """
        element = self
        if pair is not None:
            text = stringify(pair, "data")
            if ":" not in text:
                raise ExecutionError(f"expected 'key:value', got {text!r}", method_name="data")
            key, value = text.split(":", 1)
            attributes = {key: value, **attributes}
        for key, value in attributes.items():
            element = element.set_attribute(f"data-{sanitize_data_key(key)}", value)
        return element


def _utility(prefix: str, method_name: str):
    def modifier(self, value):
        return self.add_classes(f"{prefix}-{safe_css_token(value, method_name)}")
    modifier.__name__ = method_name
    modifier.__doc__ = f"Add the '{prefix}-<value>' utility class."
    return modifier


def _flag(class_name: str):
    def modifier(self):
        return self.add_classes(class_name)
    modifier.__name__ = class_name
    modifier.__doc__ = f"Add the '{class_name}' class."
    return modifier


for _name, _prefix in {**SPACING_UTILITIES, **SIZE_UTILITIES, **TEXT_UTILITIES}.items():
    Element.extend(_name, _utility(_prefix, _name))

for _name in FLAG_UTILITIES:
    Element.extend(_name, _flag(_name))
