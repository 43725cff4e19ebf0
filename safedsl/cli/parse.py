"""Parse command for safedsl CLI."""

import json

import click

from safedsl.cli.common import configure_logging, fail, read_source
from safedsl.components import StandardContext
from safedsl.errors import DSLError
from safedsl.runtime.interpreter import Interpreter


@click.command()
@click.argument('file', required=False, type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.option('--expression', '-e', help='Program text to parse instead of FILE')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def parse_command(file, expression, verbose):
    """Print the AST of a program as JSON."""
    configure_logging(verbose)
    source = read_source(file, expression)

    try:
        ast = Interpreter(StandardContext).parse(source)
    except DSLError as e:
        fail(e, json_output=True)

    click.echo(json.dumps(ast.to_dict(), indent=2))
