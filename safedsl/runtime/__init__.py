"""
safedsl Runtime

Executes parsed programs against capability contexts:
- Environment: Capability tables and the context base classes
- State: RenderNode output tree and block scopes
- Executor: Tree-walking AST executor
- Interpreter: tokenize/parse/execute facade with configuration
"""

from safedsl.runtime.environment import (
    Capability,
    CapabilityContext,
    CapabilityProvider,
    operation,
)
from safedsl.runtime.state import RenderNode, Scope
from safedsl.runtime.executor import ASTExecutor, execute, to_render_node
from safedsl.runtime.interpreter import Interpreter, InterpreterConfig, InterpretResult

__all__ = [
    "Capability",
    "CapabilityContext",
    "CapabilityProvider",
    "operation",
    "RenderNode",
    "Scope",
    "ASTExecutor",
    "execute",
    "to_render_node",
    "Interpreter",
    "InterpreterConfig",
    "InterpretResult",
]
