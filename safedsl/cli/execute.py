"""Execute command for safedsl CLI."""

import json

import click

from safedsl.cli.common import configure_logging, fail, read_source
from safedsl.components import StandardContext
from safedsl.runtime.interpreter import Interpreter, InterpreterConfig


@click.command()
@click.argument('file', required=False, type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.option('--expression', '-e', help='Program text to run instead of FILE')
@click.option('--json-output', '-j', 'json_output', is_flag=True, help='Output as JSON')
@click.option('--max-steps', type=int, default=None, help='Maximum number of calls')
@click.option('--max-depth', type=int, default=None, help='Maximum nesting depth')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def execute_command(file, expression, json_output, max_steps, max_depth, verbose):
    """Run a DSL program and print the render tree."""
    configure_logging(verbose)
    source = read_source(file, expression)

    config = InterpreterConfig()
    if max_steps is not None:
        config.max_steps = max_steps
    if max_depth is not None:
        config.max_depth = max_depth

    interpreter = Interpreter(StandardContext, config)
    result = interpreter.interpret(source)

    if not result.success:
        fail(result.error, json_output, {
            "success": False,
            "execution_time_ms": result.execution_time_ms,
        })

    if json_output:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        click.echo("✓ Execution successful")
        click.echo(f"  Statements: {result.statement_count}")
        click.echo(f"  Nodes: {result.tree.count()}")
        click.echo(f"  Digest: {result.digest}")
        click.echo(f"  Execution time: {result.execution_time_ms:.2f}ms")
        click.echo(json.dumps(result.tree.to_dict(), indent=2))
