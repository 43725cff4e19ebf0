"""Shared helpers for safedsl CLI commands."""

import json
import logging
import sys
from typing import Any, Dict, Optional

import click

from safedsl.errors import DSLError, SecurityError

EXIT_OK = 0
EXIT_DSL_ERROR = 1
EXIT_SECURITY = 2


def read_source(path: Optional[str], expression: Optional[str]) -> str:
    """Program text from ``-e`` or a file path ('-' reads stdin)."""
    if expression is not None and path is not None:
        raise click.UsageError("pass either FILE or --expression, not both")
    if expression is not None:
        return expression
    if path is None:
        raise click.UsageError("missing FILE or --expression")
    with click.open_file(path, "r", encoding="utf-8") as f:
        return f.read()


def configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def exit_code_for(error: DSLError) -> int:
    return EXIT_SECURITY if isinstance(error, SecurityError) else EXIT_DSL_ERROR


def fail(error: DSLError, json_output: bool, extra: Optional[Dict[str, Any]] = None) -> None:
    """Report a DSL error on stderr and exit with its code."""
    if json_output:
        output = dict(extra or {})
        output["error"] = error.to_dict()
        click.echo(json.dumps(output, indent=2), err=True)
    else:
        click.echo(f"✗ {error.kind}: {error}", err=True)
    sys.exit(exit_code_for(error))
