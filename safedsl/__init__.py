"""
safedsl - Sandboxed interpreter for a SwiftUI-style UI DSL

Untrusted program text is tokenized, parsed into an immutable AST under a
security policy, and executed against a closed capability context.

Exports:
- Interpreter / InterpreterConfig / InterpretResult: Full pipeline facade
- tokenize / parse / execute: Individual pipeline stages
- StandardContext: Reference UI context
- DSLError and its subclasses: Typed error channel
"""

from safedsl.errors import (
    DSLError,
    ExecutionError,
    LexError,
    ParseError,
    Position,
    SecurityError,
)
from safedsl.governance import DEFAULT_POLICY, SecurityPolicy
from safedsl.syntax import parse, tokenize
from safedsl.runtime import (
    CapabilityContext,
    CapabilityProvider,
    Interpreter,
    InterpreterConfig,
    InterpretResult,
    RenderNode,
    execute,
    operation,
)
from safedsl.components import Element, StandardContext

__version__ = "1.0.0"


def interpret(source: str, config: InterpreterConfig = None) -> InterpretResult:
    """Run a program against a fresh StandardContext."""
    return Interpreter(StandardContext, config).interpret(source)


__all__ = [
    "DSLError",
    "ExecutionError",
    "LexError",
    "ParseError",
    "Position",
    "SecurityError",
    "DEFAULT_POLICY",
    "SecurityPolicy",
    "tokenize",
    "parse",
    "execute",
    "CapabilityContext",
    "CapabilityProvider",
    "Interpreter",
    "InterpreterConfig",
    "InterpretResult",
    "RenderNode",
    "operation",
    "Element",
    "StandardContext",
    "interpret",
    "__version__",
]
