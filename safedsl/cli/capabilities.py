"""Capabilities command for safedsl CLI."""

import json

import click

from safedsl.components import StandardContext


@click.command()
@click.option('--json-output', '-j', 'json_output', is_flag=True, help='Output as JSON')
def capabilities_command(json_output):
    """List the operations of the standard context."""
    description = StandardContext.describe()
    if json_output:
        click.echo(json.dumps(description, indent=2))
        return

    click.echo(f"{description['context']} operations:")
    for op in description["operations"]:
        click.echo(f"  {op['signature']:<48} {op['summary']}")
    for type_name, ops in description["value_types"].items():
        click.echo(f"{type_name} modifiers:")
        for op in ops:
            click.echo(f"  {op['signature']:<48} {op['summary']}")
