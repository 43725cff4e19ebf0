"""Interpreter construction shared by the API routes."""

from safedsl.components import StandardContext
from safedsl.runtime.interpreter import Interpreter, InterpreterConfig

MAX_SOURCE_LENGTH = 65536


def build_interpreter() -> Interpreter:
    """Fresh interpreter per request; contexts are never shared."""
    return Interpreter(StandardContext, InterpreterConfig(max_source_length=MAX_SOURCE_LENGTH))
