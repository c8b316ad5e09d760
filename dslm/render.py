"""
Rendering functions for dslm output.

This module handles all pretty-printing and table formatting.
Services return data, this module makes it human-readable.
"""

from typing import List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from .domain.catalog import Catalog
from .domain.operation import SiteInfo, SwitchResult
from .domain.version import VersionEntry

console = Console()
err_console = Console(stderr=True)


def render_catalog(catalog: Catalog, entries: List[VersionEntry], title: Optional[str] = None) -> None:
    """
    Render catalog entries as a table, highest version last.

    Args:
        catalog: Catalog the entries come from (used to mark the latest)
        entries: Entries to show
        title: Optional table title
    """
    if not entries:
        console.print(f"[yellow]No {catalog.kind.value} entries found.[/yellow]")
        return

    latest = catalog.latest()

    table = Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("#", style="dim", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Version", style="green")
    table.add_column("Major", justify="right")
    table.add_column("Bucket", style="yellow")

    for index, entry in enumerate(entries, 1):
        name = entry.raw
        if latest is not None and entry.raw == latest.raw:
            name = f"[bold]{name}[/bold] (latest)"
        table.add_row(str(index), name, entry.version, entry.major, entry.bucket.value)

    console.print(table)


def render_site_info(info: SiteInfo) -> None:
    """Render what an installation is linked to."""
    table = Table(
        title=info.destination,
        box=box.ROUNDED,
        show_header=False
    )
    table.add_column("Key", style="bold")
    table.add_column("Value", style="cyan")

    table.add_row("Core", info.core or "-")
    table.add_row("Dist", info.dist or "-")
    for name, target in sorted(info.profiles.items()):
        table.add_row(f"Profile {name}", target)

    console.print(table)


def render_switch_result(result: SwitchResult) -> None:
    """Render a switch outcome: a one-line summary plus link counts."""
    if result.success:
        console.print(
            f"[green]✓[/green] {result.operation} → [bold]{result.version}[/bold] "
            f"in {result.destination}"
        )
        console.print(
            f"  Links removed: {len(result.links_removed)}, "
            f"created: {len(result.links_created)}, "
            f"directories created: {len(result.dirs_created)}"
        )
        return

    colour = "yellow" if result.cancelled else "red"
    err_console.print(f"[{colour}]✗ {result.operation}: {result.error}[/{colour}]")
