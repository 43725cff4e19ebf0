"""
safedsl AST Executor

Tree-walking executor that runs a parsed program against a capability
context. Calls are resolved only through the capability table of the
receiver value; there is no name-based lookup on arbitrary objects.

Key classes:
- ASTExecutor: Executes one AST against one context
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Set, Tuple

from safedsl.errors import ExecutionError
from safedsl.governance.policy import DEFAULT_POLICY, SecurityPolicy
from safedsl.governance.values import stringify
from safedsl.runtime.environment import CapabilityProvider
from safedsl.runtime.state import RenderNode, Scope
from safedsl.syntax.ast import Block, Literal, MethodCall, NamedArg, Node, Symbol

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 10000

LITERAL_VALUE_TYPES = (str, int, float, bool, Symbol)


def to_render_node(value: Any) -> Optional[RenderNode]:
    """
    Convert a statement value into a render node.

    Strings, numbers, booleans and symbols become ``span`` text nodes and nil
    yields None. Providers are rendered through their ``render`` method.
    """
    if value is None:
        return None
    if isinstance(value, RenderNode):
        return value
    if isinstance(value, CapabilityProvider):
        return value.render()
    if isinstance(value, LITERAL_VALUE_TYPES):
        return RenderNode.text_node(stringify(value))
    raise ExecutionError(f"cannot render value of type {type(value).__name__}")


def _type_name(value: Any) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Symbol):
        return "symbol"
    return type(value).__name__


class ASTExecutor:
    """
    Executes an AST against a capability context.

    Every dispatch re-checks the method name against the policy, so ASTs
    built by hand get the same protection as parser output.
    """

    def __init__(self,
                 context: CapabilityProvider,
                 policy: Optional[SecurityPolicy] = None,
                 max_steps: int = DEFAULT_MAX_STEPS):
        if not isinstance(context, CapabilityProvider):
            raise TypeError("context must be a CapabilityProvider")
        self.context = context
        self.policy = policy or DEFAULT_POLICY
        self.max_steps = max_steps
        self.steps = 0
        self._vetted: Set[type] = set()

    def execute(self, node: Node) -> Any:
        """
        Execute a program and return its finalized value.

        Chainable values are rendered to RenderNode; a multi-statement
        top-level block yields a fragment node.
        """
        logger.debug("Executing %s against %s", type(node).__name__, type(self.context).__name__)
        value = self._evaluate(node, Scope())
        if isinstance(value, CapabilityProvider):
            value = value.render()
        logger.debug("Execution finished after %d call(s)", self.steps)
        return value

    # -- evaluation -------------------------------------------------------

    def _evaluate(self, node: Node, scope: Scope) -> Any:
        if isinstance(node, Literal):
            return node.evaluate()
        if isinstance(node, MethodCall):
            return self._evaluate_chain(node, scope)
        if isinstance(node, Block):
            return RenderNode.fragment(self._run_block(node, scope))
        raise ExecutionError(f"unknown node type {type(node).__name__}")

    def _evaluate_chain(self, node: MethodCall, scope: Scope) -> Any:
        links = node.chain()
        root = links[0].receiver
        value = self.context if root is None else self._evaluate(root, scope)
        for call in links:
            value = self._invoke(call, value, scope)
        return value

    def _invoke(self, call: MethodCall, receiver: Any, scope: Scope) -> Any:
        self.steps += 1
        if self.steps > self.max_steps:
            raise ExecutionError(
                f"execution exceeded {self.max_steps} steps",
                method_name=call.method,
                position=call.position,
            )

        self.policy.check_method(call.method, call.position)

        if not isinstance(receiver, CapabilityProvider):
            raise ExecutionError(
                f"'{call.method}' cannot be called on {_type_name(receiver)}",
                method_name=call.method,
                position=call.position,
            )

        capability = type(receiver).capability(call.method)
        if capability is None:
            raise ExecutionError(
                f"undefined operation '{call.method}' for {type(receiver).__name__}",
                method_name=call.method,
                position=call.position,
            )

        args, kwargs = self._arguments(call, scope)
        try:
            inspect.signature(capability.handler).bind(receiver, *args, **kwargs)
        except TypeError as exc:
            raise ExecutionError(
                f"wrong arguments for '{call.method}': {exc}",
                method_name=call.method,
                position=call.position,
            ) from exc

        result = capability.handler(receiver, *args, **kwargs)

        if call.block is not None:
            children = self._run_block(call.block, scope)
            result = self._merge(call, result, children)

        self._check_containment(call, result)
        return result

    def _arguments(self, call: MethodCall, scope: Scope) -> Tuple[List[Any], Dict[str, Any]]:
        args: List[Any] = []
        kwargs: Dict[str, Any] = {}
        for arg in call.args:
            value = self._evaluate(arg.value, scope)
            if isinstance(arg, NamedArg):
                kwargs[arg.key] = value
            else:
                args.append(value)
        return args, kwargs

    def _run_block(self, block: Block, scope: Scope) -> Tuple[RenderNode, ...]:
        inner = scope.child()
        for statement in block.statements:
            node = to_render_node(self._evaluate(statement, inner))
            if node is not None:
                inner.collect(node)
        return inner.result()

    def _merge(self, call: MethodCall, result: Any, children: Tuple[RenderNode, ...]) -> Any:
        if isinstance(result, RenderNode):
            return replace(result, children=result.children + children)
        if isinstance(result, CapabilityProvider):
            return result.with_children(children)
        raise ExecutionError(
            f"'{call.method}' does not accept a block",
            method_name=call.method,
            position=call.position,
        )

    def _check_containment(self, call: MethodCall, result: Any) -> None:
        if result is None or isinstance(result, LITERAL_VALUE_TYPES + (RenderNode,)):
            return
        if isinstance(result, CapabilityProvider):
            value_type = type(result)
            if value_type in self._vetted:
                return
            for name in value_type.capabilities:
                if not self.policy.is_method_allowed(name):
                    raise ExecutionError(
                        f"'{call.method}' returned a value exposing forbidden operation '{name}'",
                        method_name=call.method,
                        position=call.position,
                    )
            self._vetted.add(value_type)
            return
        raise ExecutionError(
            f"'{call.method}' returned an unsupported value of type {type(result).__name__}",
            method_name=call.method,
            position=call.position,
        )


def execute(ast: Node,
            context: CapabilityProvider,
            policy: Optional[SecurityPolicy] = None,
            max_steps: int = DEFAULT_MAX_STEPS) -> Any:
    """
    Execute an AST against a context.

    Raises:
        SecurityError: A method name refused by the policy
        ExecutionError: Unknown operation, bad arguments, step limit, or an
            error raised by the context itself
    """
    return ASTExecutor(context, policy=policy, max_steps=max_steps).execute(ast)
