"""``chartpack inspect ARCHIVE`` — list the entries of a chart archive.

Reads the gzip header (to show the informational marker) and walks the tar
entries in stored order without extracting anything.
"""

from __future__ import annotations

import tarfile
from datetime import datetime, timezone
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from chartpack.core.gzip_stream import read_gzip_header
from chartpack.errors import ArchiveFormatError

console = Console()


def inspect_cmd(
    archive: Path = typer.Argument(
        ...,
        help="Path to a chart archive (.tgz).",
    ),
) -> None:
    """List the entries of a chart archive in stored order."""
    if not archive.is_file():
        console.print(f"[bold red]Archive not found:[/bold red] {archive}")
        raise typer.Exit(code=1)

    try:
        header = read_gzip_header(archive)
        with tarfile.open(archive, "r:gz") as tf:
            members = tf.getmembers()
    except (ArchiveFormatError, tarfile.TarError, OSError) as exc:
        console.print(f"[bold red]Cannot read archive:[/bold red] {exc}")
        raise typer.Exit(code=1)

    marker = header.extra.decode("latin-1") if header.extra else "-"
    console.print()
    console.print(
        Panel(
            "\n".join([
                f"[bold]Archive:[/bold] {archive}",
                f"[bold]Label:[/bold]   {header.comment or '-'}",
                f"[bold]Marker:[/bold]  {marker}",
                f"[bold]Entries:[/bold] {len(members)}",
            ]),
            title="[bold]Chart Archive[/bold]",
            border_style="cyan",
            padding=(1, 2),
        )
    )

    table = Table(title="Entries")
    table.add_column("Path", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Mode", style="green")
    table.add_column("Modified")

    for m in members:
        modified = datetime.fromtimestamp(m.mtime, tz=timezone.utc)
        table.add_row(
            m.name,
            str(m.size),
            oct(m.mode),
            modified.strftime("%Y-%m-%d %H:%M:%S"),
        )

    console.print(table)
