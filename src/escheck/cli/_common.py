"""Shared CLI helpers."""

from collections.abc import Iterable
from typing import Optional

from rich.console import Console
from rich.table import Table

from ..profiles import version_table

console = Console()


def split_list_option(values: Optional[Iterable[str]]) -> list[str]:
    """Flatten a repeatable comma-separated option (``--not a,b --not c``)."""
    items: list[str] = []
    for value in values or []:
        items.extend(part.strip() for part in value.split(",") if part.strip())
    return items


def print_versions() -> None:
    """Print supported version identifiers as a table."""
    table = Table(title="Supported ECMAScript versions")
    table.add_column("Level", justify="right", style="cyan")
    table.add_column("Identifiers", style="green")
    for spec in version_table():
        table.add_row(str(spec.level), ", ".join(spec.aliases))
    console.print(table)
