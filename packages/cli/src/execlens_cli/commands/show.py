"""show command — display the stored history entry for one action."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from execlens_core.identity import normalize
from execlens_store.errors import MalformedRecordError

console = Console()


@click.command("show")
@click.argument("label")
@click.argument("progress_message")
@click.option("--limit", default=50, show_default=True, help="Maximum number of files to list per side.")
@click.pass_context
def show_cmd(ctx, label: str, progress_message: str, limit: int):
    """Show the last recorded run of the action LABEL / PROGRESS_MESSAGE.

    The progress message is normalized the same way `explain` does, so
    "Building x.jar (3 source files)" finds history recorded under any
    source count.
    """
    store = ctx.obj["store"]
    try:
        identity = normalize(label, progress_message)
    except MalformedRecordError as e:
        raise click.UsageError(str(e))

    record = store.get(identity)
    if record is None:
        console.print(f"[yellow]No history for {escape(identity)}[/yellow]")
        return

    console.print(f"\n[bold]{escape(record.progress_message)}[/bold]")
    console.print(f"  Label:     {escape(record.identity_label)}")
    if record.mnemonic:
        console.print(f"  Mnemonic:  {escape(record.mnemonic)}")
    console.print(f"  Wall time: {record.wall_time_seconds:.2f}s")
    console.print(f"  Cache hit: {'yes' if record.cache_hit else 'no'}")

    for title, files, style in (("Inputs", record.inputs, "cyan"), ("Outputs", record.outputs, "magenta")):
        table = Table(title=f"{title} ({len(files)})", show_header=True, header_style=f"bold {style}")
        table.add_column("Path")
        table.add_column("Digest", width=16)
        for f in files[:limit]:
            table.add_row(escape(f.path), f.digest.hex()[:16])
        console.print(table)
        if len(files) > limit:
            console.print(f"  [dim]... {len(files) - limit} more[/dim]")
