"""
safedsl Interpreter

Facade running the whole tokenize -> parse -> execute cycle for one source
string. Each call builds a fresh context, token list, AST and executor, so
one Interpreter can serve many requests.

Key classes:
- InterpreterConfig: Limits and policy options
- InterpretResult: Outcome of one interpretation
- Interpreter: The facade
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Type

from safedsl.errors import DSLError, ExecutionError, SecurityError
from safedsl.governance.policy import DEFAULT_POLICY, SecurityPolicy
from safedsl.runtime.environment import CapabilityContext
from safedsl.runtime.executor import DEFAULT_MAX_STEPS, ASTExecutor, to_render_node
from safedsl.runtime.state import RenderNode
from safedsl.syntax.ast import Block, Node
from safedsl.syntax.parser import DEFAULT_MAX_CHAIN, DEFAULT_MAX_DEPTH, parse
from safedsl.syntax.tokenizer import tokenize

logger = logging.getLogger(__name__)


@dataclass
class InterpreterConfig:
    """Configuration for interpretation."""
    max_source_length: int = 65536
    max_depth: int = DEFAULT_MAX_DEPTH
    max_chain: int = DEFAULT_MAX_CHAIN
    max_steps: int = DEFAULT_MAX_STEPS
    use_allowlist: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_source_length": self.max_source_length,
            "max_depth": self.max_depth,
            "max_chain": self.max_chain,
            "max_steps": self.max_steps,
            "use_allowlist": self.use_allowlist,
        }


@dataclass
class InterpretResult:
    """Result of interpreting one source string."""
    success: bool
    tree: Optional[RenderNode] = None
    error: Optional[DSLError] = None
    digest: str = ""
    execution_time_ms: float = 0.0
    statement_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "tree": self.tree.to_dict() if self.tree is not None else None,
            "error": self.error.to_dict() if self.error is not None else None,
            "digest": self.digest,
            "execution_time_ms": self.execution_time_ms,
            "statement_count": self.statement_count,
        }


def statement_count(ast: Node) -> int:
    return len(ast.statements) if isinstance(ast, Block) else 1


class Interpreter:
    """
    Runs DSL programs against contexts produced by ``context_factory``.

    Args:
        context_factory: Callable returning a fresh CapabilityContext
        config: Limits; defaults to InterpreterConfig()
        policy: Base policy; narrowed to the context's operations when
            ``config.use_allowlist`` is set
        context_type: Class whose ``allowed_names()`` feeds the allowlist,
            for factories that are not the context class itself
    """

    def __init__(self,
                 context_factory: Callable[[], CapabilityContext],
                 config: InterpreterConfig = None,
                 policy: SecurityPolicy = None,
                 context_type: Optional[Type[CapabilityContext]] = None):
        self.context_factory = context_factory
        self.config = config or InterpreterConfig()
        self.base_policy = policy or DEFAULT_POLICY
        self.context_type = context_type
        self._policy: Optional[SecurityPolicy] = None

    @property
    def policy(self) -> SecurityPolicy:
        """Effective policy, allowlist included when configured."""
        if self._policy is None:
            policy = self.base_policy
            if self.config.use_allowlist:
                source = self.context_type or self.context_factory
                allowed_names = getattr(source, "allowed_names", None)
                if allowed_names is None:
                    logger.warning(
                        "Allowlist requested but %r has no allowed_names(); "
                        "pass context_type to enable it. Using the denylist only.",
                        source,
                    )
                else:
                    policy = policy.with_allowlist(allowed_names())
            self._policy = policy
        return self._policy

    def parse(self, source: str) -> Node:
        """
        Tokenize and parse without executing.

        Raises:
            LexError, ParseError, SecurityError
        """
        tokens = tokenize(
            source,
            max_length=self.config.max_source_length,
            policy=self.policy,
        )
        return parse(
            tokens,
            policy=self.policy,
            max_depth=self.config.max_depth,
            max_chain=self.config.max_chain,
        )

    def run(self, source: str) -> RenderNode:
        """
        Parse and execute, returning the render tree.

        Raises:
            DSLError: Any lex, parse, security or execution failure
        """
        ast = self.parse(source)
        return self._execute(ast)

    def _execute(self, ast: Node) -> RenderNode:
        context = self.context_factory()
        executor = ASTExecutor(context, policy=self.policy, max_steps=self.config.max_steps)
        tree = to_render_node(executor.execute(ast))
        if tree is None:
            raise ExecutionError("program produced no output")
        return tree

    def interpret(self, source: str) -> InterpretResult:
        """
        Run a program and report the outcome instead of raising.

        Only DSLError subclasses are converted into a failed result; other
        exceptions propagate.
        """
        start = time.perf_counter()
        result = InterpretResult(success=False)
        try:
            ast = self.parse(source)
            result.statement_count = statement_count(ast)
            tree = self._execute(ast)
        except SecurityError as exc:
            logger.warning("Rejected program: %s", exc)
            result.error = exc
        except DSLError as exc:
            logger.debug("Program failed: %s", exc)
            result.error = exc
        else:
            result.success = True
            result.tree = tree
            result.digest = tree.digest()
        result.execution_time_ms = (time.perf_counter() - start) * 1000
        return result
