"""Main check command."""

import json
from pathlib import Path
from typing import Any, List, Optional

import typer

from ..api import check_to_result
from ..logging_config import setup_logging
from ..report import exit_code
from . import app
from ._common import console, print_versions, split_list_option


@app.command()
def check_command(
    ecma_version: Optional[str] = typer.Argument(
        None,
        help=(
            "ecmaVersion to check files against. Can be: es3, es4, es5, es6/es2015, "
            "es7/es2016, es8/es2017, es9/es2018, es10/es2019, es11/es2020, es12/es2021, "
            "es13/es2022, es14/es2023, es15/es2024"
        ),
        show_default=False,
    ),
    files: Optional[List[str]] = typer.Argument(
        None,
        help="A glob of files to test the ECMAScript version against",
        show_default=False,
    ),
    module: bool = typer.Option(False, "--module", help="Use ES modules"),
    allow_hash_bang: bool = typer.Option(
        False,
        "--allow-hash-bang",
        help="If the code starts with #! treat it as a comment",
    ),
    not_: Optional[List[str]] = typer.Option(
        None,
        "--not",
        help="Folder or file names to skip (comma-separated, repeatable)",
    ),
    fail_fast: bool = typer.Option(
        False,
        "--fail-fast",
        help="Stop at the first failing file",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "-w",
        "--workers",
        help="Parallel workers (default: auto-detect)",
        min=1,
        max=32,
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Per-file evaluation budget in seconds",
        min=0.001,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (JSON, same keys as .escheckrc)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    debug: bool = typer.Option(False, "--debug", help="Debug mode"),
    list_versions: bool = typer.Option(
        False,
        "--list-versions",
        help="Show supported ECMAScript versions and exit",
    ),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
):
    """
    Check that JavaScript files only use syntax from one ECMAScript version.

    Prints a JSON result on stdout. Exits 1 when any file fails or no files
    were found, 0 otherwise (a run that could not start reports errNo 2).

    [bold cyan]Examples:[/bold cyan]

      escheck es5 'dist/**/*.js'

      escheck es6 './lib/*.mjs' --module

      escheck es2017 'bin/*.js' --allow-hash-bang --not vendor,fixtures
    """
    if version:
        from .. import __version__

        console.print(f"[bold cyan]ES-Check[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)

    if list_versions:
        print_versions()
        raise typer.Exit(0)

    logger = setup_logging(verbose=debug)

    result = check_to_result(
        files=files or None,
        ecma_version=ecma_version,
        module=module,
        allow_hash_bang=allow_hash_bang,
        skip_patterns=split_list_option(not_) or None,
        config_file=config,
        workers=workers,
        timeout_seconds=timeout,
        fail_fast=fail_fast or None,
    )

    if debug:
        for item in result["data"]:
            logger.info(_describe_error(item))

    print(json.dumps(result, indent=2, ensure_ascii=False))
    raise typer.Exit(exit_code(result))


def _describe_error(item: dict[str, Any]) -> str:
    location = item["location"]
    return (
        "ES-Check Error:\n"
        "----\n"
        f"· erroring file: {item['errorFile']}\n"
        f"· source file: {item['sourceFile']}\n"
        f"· location: {{ line: {location['line']}, column: {location['column']} }}\n"
        f"· code: {item['code']}\n"
        "----"
    )
