"""safedsl CLI Package - run, check and inspect DSL programs"""

import click

from safedsl.cli.execute import execute_command
from safedsl.cli.validate import validate_command
from safedsl.cli.parse import parse_command
from safedsl.cli.capabilities import capabilities_command


@click.group()
@click.version_option(package_name="safedsl")
def main():
    """safedsl CLI - sandboxed SwiftUI-style DSL interpreter."""
    pass


main.add_command(execute_command, "execute")
main.add_command(validate_command, "validate")
main.add_command(parse_command, "parse")
main.add_command(capabilities_command, "capabilities")

__all__ = [
    "main",
    "execute_command",
    "validate_command",
    "parse_command",
    "capabilities_command",
]
