"""
Inspect command: show what a binding projects into each container
"""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from kafkabinding.core import BindingSpecError, ENV_MECHANISMS, binding_env
from kafkabinding.core.inject import kerberos_volume_mount, projected_kerberos_files

from ._io import load_binding

console = Console()


def env_command(
    binding: Path = typer.Option(..., "--binding", "-b", help="KafkaBinding (or its spec) as JSON"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List the env entries and Kerberos mounts a binding adds to every container.

    Examples:
        kafkabinding env -b binding.json
        kafkabinding env -b binding.json --json
    """
    try:
        spec = load_binding(binding)
    except FileNotFoundError:
        console.print(f"[red]Error: File not found:[/red] {binding}")
        raise typer.Exit(2)
    except (json.JSONDecodeError, BindingSpecError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    rows = []
    for ev in binding_env(spec):
        if ev.value_from is not None:
            ref = ev.value_from.secret_key_ref
            source = f"secret {ref.name}/{ref.key}"
        else:
            source = ev.value
        rows.append({
            "name": ev.name,
            "mechanism": ENV_MECHANISMS[ev.name].value,
            "source": source,
        })
    mounts = [
        {"volume": m.name, "mountPath": m.mount_path}
        for m in (kerberos_volume_mount(k) for k in projected_kerberos_files(spec))
    ]

    if json_output:
        print(json.dumps({"env": rows, "volumeMounts": mounts}, indent=2))
        return

    table = Table(title="Binding env (per container)")
    table.add_column("Name", style="cyan")
    table.add_column("Mechanism", style="green")
    table.add_column("Value / Source", style="yellow")
    for row in rows:
        table.add_row(row["name"], row["mechanism"], row["source"])
    console.print(table)

    if mounts:
        mount_table = Table(title="Kerberos mounts")
        mount_table.add_column("Volume", style="cyan")
        mount_table.add_column("Mount path", style="yellow")
        for m in mounts:
            mount_table.add_row(m["volume"], m["mountPath"])
        console.print(mount_table)
