"""Validate command for safedsl CLI."""

import json

import click

from safedsl.cli.common import configure_logging, fail, read_source
from safedsl.components import StandardContext
from safedsl.errors import DSLError
from safedsl.runtime.interpreter import Interpreter, statement_count
from safedsl.syntax.ast import count_calls


@click.command()
@click.argument('file', required=False, type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.option('--expression', '-e', help='Program text to check instead of FILE')
@click.option('--json-output', '-j', 'json_output', is_flag=True, help='Output as JSON')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def validate_command(file, expression, json_output, verbose):
    """Tokenize and parse a program without executing it."""
    configure_logging(verbose)
    source = read_source(file, expression)

    try:
        ast = Interpreter(StandardContext).parse(source)
    except DSLError as e:
        fail(e, json_output, {"valid": False})

    output = {
        "valid": True,
        "statement_count": statement_count(ast),
        "call_count": count_calls(ast),
    }
    if json_output:
        click.echo(json.dumps(output, indent=2))
    else:
        click.echo("✓ Program is valid")
        click.echo(f"  Statements: {output['statement_count']}")
        click.echo(f"  Calls: {output['call_count']}")
