#!/usr/bin/env python3
"""
kafkabinding CLI - KafkaBinding injection without a cluster

Main entrypoint for the kafkabinding command-line tool.
"""

import typer
from rich.console import Console
from rich.table import Table

from cli.commands import inspect, render

app = typer.Typer(
    name="kafkabinding",
    help="Apply, remove and inspect KafkaBinding injection on workload manifests",
    add_completion=False,
)

console = Console()

app.command("apply")(render.apply_command)
app.command("remove")(render.remove_command)
app.command("env")(inspect.env_command)


@app.command()
def version():
    """Show version information."""
    from cli import __version__ as cli_version
    from kafkabinding import __version__ as engine_version

    table = Table(show_header=False, box=None)
    table.add_row("[bold]kafkabinding CLI[/bold]", f"v{cli_version}")
    table.add_row("Engine", f"v{engine_version}")

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
