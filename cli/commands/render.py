"""
Render commands: apply, remove
"""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from kafkabinding.core import (
    BindingSpecError,
    UnsupportedWorkloadError,
    apply_binding,
    is_bound,
    pod_spec_of,
    remove_binding,
    workload_from_dict,
    workload_to_dict,
)

from ._io import load_binding, load_json, write_json

console = Console(stderr=True)


def apply_command(
    binding: Path = typer.Option(..., "--binding", "-b", help="KafkaBinding (or its spec) as JSON"),
    workload: Path = typer.Option(..., "--workload", "-w", help="Workload manifest as JSON"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write result here instead of stdout"),
):
    """
    Apply a binding to a workload manifest and print the result.

    Examples:
        kafkabinding apply -b binding.json -w deployment.json
        kubectl get deploy app -o json > d.json && kafkabinding apply -b b.json -w d.json -o d.json
    """
    try:
        spec = load_binding(binding)
        obj = workload_from_dict(load_json(workload))
        apply_binding(spec, pod_spec_of(obj))
    except FileNotFoundError as e:
        console.print(f"[red]Error: File not found:[/red] {e.filename}")
        raise typer.Exit(2)
    except (json.JSONDecodeError, BindingSpecError, UnsupportedWorkloadError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    write_json(workload_to_dict(obj), output)
    console.print(f"[green]Applied binding[/green] ({spec.bootstrap_servers_value})")


def remove_command(
    workload: Path = typer.Option(..., "--workload", "-w", help="Workload manifest as JSON"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write result here instead of stdout"),
):
    """
    Strip every binding-managed env entry, volume and mount from a workload.

    Examples:
        kafkabinding remove -w deployment.json
    """
    try:
        obj = workload_from_dict(load_json(workload))
        pod_spec = pod_spec_of(obj)
        was_bound = is_bound(pod_spec)
        remove_binding(pod_spec)
    except FileNotFoundError as e:
        console.print(f"[red]Error: File not found:[/red] {e.filename}")
        raise typer.Exit(2)
    except (json.JSONDecodeError, UnsupportedWorkloadError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    write_json(workload_to_dict(obj), output)
    if was_bound:
        console.print("[green]Removed binding[/green]")
    else:
        console.print("[yellow]Workload carried no binding env[/yellow]")
