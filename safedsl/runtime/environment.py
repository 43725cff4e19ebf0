"""
safedsl Runtime Environment

Capability tables: the closed set of operations a context or chainable value
exposes to DSL programs. Tables are built once per class when the class is
created and are read-only afterwards; the executor dispatches only through
them, never by attribute lookup on arbitrary objects.

Key classes:
- Capability: One operation (name, handler, summary)
- CapabilityProvider: Base for anything that exposes operations
- CapabilityContext: Top-level provider a program executes against
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, ClassVar, Dict, FrozenSet, Mapping, Optional, Tuple, Type

from safedsl.errors import ExecutionError


def operation(name: Optional[str] = None) -> Callable:
    """
    Mark a method as a DSL operation.

    Args:
        name: DSL name, defaults to the Python method name
    """
    def decorator(fn: Callable) -> Callable:
        fn.__capability__ = name or fn.__name__
        return fn
    return decorator


@dataclass(frozen=True)
class Capability:
    """A single entry of a capability table."""
    name: str
    handler: Callable
    summary: str = ""

    @property
    def signature(self) -> str:
        params = list(inspect.signature(self.handler).parameters.values())[1:]
        return f"{self.name}({', '.join(str(p) for p in params)})"

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "signature": self.signature, "summary": self.summary}


def _summary(fn: Callable) -> str:
    doc = inspect.getdoc(fn) or ""
    return doc.splitlines()[0] if doc else ""


class CapabilityProvider:
    """
    Base class for values that expose DSL operations.

    Subclasses declare operations with ``@operation``; the resulting table
    inherits the parent's entries and may override them.
    """

    capabilities: ClassVar[Mapping[str, Capability]] = MappingProxyType({})

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        table: Dict[str, Capability] = dict(cls.capabilities)
        for attr in vars(cls).values():
            name = getattr(attr, "__capability__", None)
            if name is not None:
                table[name] = Capability(name, attr, _summary(attr))
        cls.capabilities = MappingProxyType(table)

    @classmethod
    def capability(cls, name: str) -> Optional[Capability]:
        return cls.capabilities.get(name)

    @classmethod
    def extend(cls, name: str, handler: Callable, summary: Optional[str] = None) -> None:
        """Add an operation generated after class creation (e.g. h1..h6)."""
        table = dict(cls.capabilities)
        table[name] = Capability(name, handler, summary if summary is not None else _summary(handler))
        cls.capabilities = MappingProxyType(table)

    @classmethod
    def operation_names(cls) -> FrozenSet[str]:
        return frozenset(cls.capabilities)

    def render(self):
        raise ExecutionError(f"{type(self).__name__} cannot be rendered")

    def with_children(self, children):
        raise ExecutionError(f"{type(self).__name__} does not accept a block")


class CapabilityContext(CapabilityProvider):
    """
    Provider that top-level calls resolve against.

    ``value_types`` lists the chainable provider classes the context can hand
    out, so the full set of reachable operation names is known statically.
    """

    value_types: ClassVar[Tuple[Type[CapabilityProvider], ...]] = ()

    @classmethod
    def allowed_names(cls) -> FrozenSet[str]:
        names = set(cls.capabilities)
        for value_type in cls.value_types:
            names.update(value_type.capabilities)
        return frozenset(names)

    @classmethod
    def describe(cls) -> Dict[str, Any]:
        return {
            "context": cls.__name__,
            "operations": [cap.to_dict() for _, cap in sorted(cls.capabilities.items())],
            "value_types": {
                vt.__name__: [cap.to_dict() for _, cap in sorted(vt.capabilities.items())]
                for vt in cls.value_types
            },
        }
