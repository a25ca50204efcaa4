"""CLI entry point."""

import typer

app = typer.Typer(
    name="escheck",
    help="ES-Check - verify JavaScript files match an ECMAScript version",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import the command to register it
from .check import check_command as _check_command  # noqa: F401, E402


def main() -> None:
    """Console script entry point."""
    app()
