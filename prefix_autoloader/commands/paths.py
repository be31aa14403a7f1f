"""Show the mapping tables built from the settings file."""

from __future__ import annotations

import sys

import click
from rich.table import Table

from ..console import console
from ..module_resolution import ConfigurationError
from ..settings import build_registry
from ..settings import load_settings


@click.command("paths")
@click.pass_context
def paths_cmd(ctx: click.Context):
    """List registered prefixes and explicit files."""
    try:
        registry = build_registry(load_settings(ctx.obj.get("config")))
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    console.print(f"[dim]Base root: {registry.base_root}[/dim]")

    prefixes = registry.prefixes()
    if prefixes:
        table = Table(title="Prefixes", show_header=True, header_style="bold cyan")
        table.add_column("Prefix", style="green")
        table.add_column("Directories (in search order)")
        for prefix in prefixes:
            table.add_row(prefix, "\n".join(str(d) for d in registry.directories_for(prefix)))
        console.print(table)
    else:
        console.print("[dim]No prefixes registered[/dim]")

    names = registry.explicit_names()
    if names:
        table = Table(title="Explicit files", show_header=True, header_style="bold cyan")
        table.add_column("Name", style="green")
        table.add_column("Files (in search order)")
        for name in names:
            table.add_row(name, "\n".join(str(f) for f in registry.files_for(name)))
        console.print(table)
