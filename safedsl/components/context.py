"""
safedsl Standard Context

Reference capability context for SwiftUI-style UI programs. Layout
operations map to Tailwind utility classes; content operations produce
Elements that programs refine with chained modifiers.

Key classes:
- StandardContext: Layout, content and HTML element operations
"""

from __future__ import annotations

import logging
from numbers import Number

from safedsl.components.element import Element
from safedsl.errors import ExecutionError
from safedsl.governance.values import (
    safe_css_token,
    stringify,
    validate_image_src,
    validate_link_href,
)
from safedsl.runtime.environment import CapabilityContext, operation
from safedsl.runtime.state import FRAGMENT_TAG, RenderNode

logger = logging.getLogger(__name__)

ALIGNMENT_CLASSES = {
    "top": "start",
    "start": "start",
    "leading": "start",
    "center": "center",
    "bottom": "end",
    "end": "end",
    "trailing": "end",
    "stretch": "stretch",
    "baseline": "baseline",
}

JUSTIFY_CLASSES = {
    "start": "justify-start",
    "center": "justify-center",
    "end": "justify-end",
    "between": "justify-between",
    "around": "justify-around",
    "evenly": "justify-evenly",
}

# Justify modes that distribute space themselves; no space-* class is added.
DISTRIBUTED_JUSTIFY = frozenset({"between", "around", "evenly"})

RESPONSIVE_GRID_COLUMNS = {
    1: "grid-cols-1",
    2: "grid-cols-1 sm:grid-cols-2",
    3: "grid-cols-1 sm:grid-cols-2 lg:grid-cols-3",
    4: "grid-cols-1 sm:grid-cols-2 lg:grid-cols-3 xl:grid-cols-4",
    5: "grid-cols-1 sm:grid-cols-2 md:grid-cols-3 lg:grid-cols-4 xl:grid-cols-5",
    6: "grid-cols-2 sm:grid-cols-3 lg:grid-cols-4 xl:grid-cols-6",
}

CARD_SHADOWS = {0: None, 1: "shadow", 2: "shadow-md", 3: "shadow-lg", 4: "shadow-xl"}

# Plain HTML element operations: DSL name -> tag.
HTML_ELEMENTS = {
    "div": "div",
    "span": "span",
    "section": "section",
    "article": "article",
    "header": "header",
    "footer": "footer",
    "nav": "nav",
    "paragraph": "p",
}


def _number(value, method_name: str, name: str):
    if isinstance(value, bool) or not isinstance(value, Number):
        raise ExecutionError(f"{name} must be a number, got {type(value).__name__}", method_name=method_name)
    if value < 0:
        raise ExecutionError(f"{name} must not be negative", method_name=method_name)
    return value


def _content(tag: str, value, method_name: str) -> Element:
    """Element holding text, or a nested element passed as the content."""
    if isinstance(value, Element):
        return Element(tag, children=(value.render(),))
    if isinstance(value, RenderNode):
        return Element(tag, children=(value,))
    return Element(tag, text=None if value is None else stringify(value, method_name))


def _stack(direction: str, alignment, spacing, justify, method_name: str) -> Element:
    axis = "y" if direction == "col" else "x"
    fill = "h-full" if direction == "col" else "w-full"
    align_key = stringify(alignment, "alignment")
    justify_key = stringify(justify, "justify")
    spacing = _number(spacing, method_name, "spacing")

    classes = [
        "flex",
        f"flex-{direction}",
        f"items-{ALIGNMENT_CLASSES.get(align_key, 'center')}",
        JUSTIFY_CLASSES.get(justify_key, "justify-start"),
    ]
    if justify_key in DISTRIBUTED_JUSTIFY:
        classes.append(fill)
    elif spacing > 0:
        classes.append(f"space-{axis}-{safe_css_token(spacing, method_name)}")
    return Element("div").add_classes(*classes)


class StandardContext(CapabilityContext):
    """
    Standard UI context.

    Symbols and strings are interchangeable for option values, so
    ``vstack(alignment: :leading)`` and ``vstack(alignment: "leading")`` agree.
    """

    value_types = (Element,)

    # -- layout -----------------------------------------------------------

    @operation()
    def swift_ui(self):
        """Root container; renders as a fragment of its block."""
        return Element(FRAGMENT_TAG)

    @operation()
    def vstack(self, alignment="center", spacing=8, justify="start"):
        """Vertical flex stack."""
        return _stack("col", alignment, spacing, justify, "vstack")

    @operation()
    def hstack(self, alignment="center", spacing=8, justify="start"):
        """Horizontal flex stack."""
        return _stack("row", alignment, spacing, justify, "hstack")

    @operation()
    def zstack(self):
        """Layered container (relative positioning)."""
        return Element("div").add_classes("relative")

    @operation()
    def grid(self, columns=2, spacing=8, responsive=True):
        """Grid with responsive column breakpoints."""
        logger.debug("grid called with columns=%s spacing=%s", columns, spacing)
        columns = _number(columns, "grid", "columns")
        spacing = _number(spacing, "grid", "spacing")
        if responsive and columns in RESPONSIVE_GRID_COLUMNS:
            column_classes = RESPONSIVE_GRID_COLUMNS[columns].split()
        else:
            column_classes = [f"grid-cols-{safe_css_token(columns, 'grid')}"]
        return Element("div").add_classes(
            "grid", *column_classes, f"gap-{safe_css_token(spacing, 'grid')}"
        )

    @operation()
    def spacer(self, min_length=None):
        """Flexible space filling the stack axis."""
        element = Element("div", text="").add_classes("flex-1")
        if min_length is not None:
            length = _number(min_length, "spacer", "min_length")
            element = element.set_attribute("style", f"min-height: {stringify(length)}px")
        return element

    @operation()
    def divider(self):
        return Element("hr").add_classes("border-t", "border-gray-300")

    @operation()
    def scroll_view(self):
        return Element("div").add_classes("overflow-auto")

    # -- content ----------------------------------------------------------

    @operation()
    def text(self, content):
        """Inline text."""
        return _content("span", "" if content is None else content, "text")

    @operation()
    def button(self, title=None, disabled=False):
        return _content("button", title, "button").set_attribute("type", "button").disabled(disabled)

    @operation()
    def link(self, title=None, destination="#"):
        """Anchor; unsafe destinations are replaced with '#'."""
        return _content("a", title, "link").set_attribute("href", validate_link_href(destination))

    @operation()
    def image(self, src=None, alt=""):
        """Image; unsafe sources fall back to a placeholder."""
        if src is None:
            raise ExecutionError("image requires src", method_name="image")
        return (
            Element("img")
            .set_attribute("src", validate_image_src(src))
            .set_attribute("alt", alt)
            .set_attribute("loading", "lazy")
        )

    @operation()
    def label(self, text_content=None, for_input=None):
        element = _content("label", text_content, "label")
        if for_input is not None:
            element = element.set_attribute("for", for_input)
        return element

    @operation()
    def textfield(self, placeholder="", value=""):
        return (
            Element("input")
            .set_attribute("type", "text")
            .set_attribute("placeholder", placeholder)
            .set_attribute("value", value)
        )

    @operation()
    def card(self, elevation=1):
        """Rounded white container with an elevation shadow."""
        elevation = _number(elevation, "card", "elevation")
        shadow = CARD_SHADOWS.get(elevation, "shadow")
        return Element("div").add_classes("rounded-lg", "bg-white", shadow)

    @operation()
    def list(self):
        return Element("ul")

    @operation()
    def list_item(self, content=None):
        return _content("li", content, "list_item")


def _html_element(tag: str, method_name: str):
    def create(self, content=None):
        return _content(tag, content, method_name)
    create.__name__ = method_name
    create.__doc__ = f"<{tag}> element."
    return create


def _heading(level: int):
    def heading(self, content=None):
        return _content(f"h{level}", content, f"h{level}")
    heading.__name__ = f"h{level}"
    heading.__doc__ = f"Level {level} heading."
    return heading


for _name, _tag in HTML_ELEMENTS.items():
    StandardContext.extend(_name, _html_element(_tag, _name))

for _level in range(1, 7):
    StandardContext.extend(f"h{_level}", _heading(_level))
