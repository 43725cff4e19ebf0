"""Test fixtures for the safedsl test suite."""
import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from safedsl.components import StandardContext
from safedsl.runtime.interpreter import Interpreter, InterpreterConfig
from safedsl.syntax.parser import parse
from safedsl.syntax.tokenizer import tokenize


@pytest.fixture
def interpreter() -> Interpreter:
    """Interpreter over the standard context with default limits."""
    return Interpreter(StandardContext, InterpreterConfig())


@pytest.fixture
def render(interpreter):
    """Run a program and return its render tree as a dict."""
    def _render(source: str):
        return interpreter.run(source).to_dict()
    return _render


@pytest.fixture
def parse_source():
    """Tokenize and parse a program with the default policy."""
    def _parse(source: str, **kwargs):
        return parse(tokenize(source), **kwargs)
    return _parse


@pytest.fixture
def sample_program() -> str:
    """Small playground-style program."""
    return (
        'swift_ui do\n'
        '  vstack(spacing: 4, alignment: :leading) do\n'
        '    text("Welcome").font_size("xl").font_weight("bold")\n'
        '    hstack(justify: :between) {\n'
        '      button("Cancel").bg("gray-100")\n'
        '      button("Save").bg("blue-500").text_color("white")\n'
        '    }\n'
        '  end\n'
        'end\n'
    )
