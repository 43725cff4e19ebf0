"""
safedsl Components

Reference UI context:
- StandardContext: Layout and content operations
- Element: Chainable element value with Tailwind modifiers
"""

from safedsl.components.element import Element
from safedsl.components.context import StandardContext

__all__ = ["Element", "StandardContext"]
