"""
Logging configuration for ES-Check.

Log output goes to stderr through rich; stdout is reserved for the JSON result.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "escheck"
FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_level(verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    return logging.DEBUG if verbose else logging.WARNING


def _console_handler(verbose: bool) -> logging.Handler:
    # Source excerpts may contain brackets, so rich markup stays off
    return RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_time=verbose,
        show_path=verbose,
    )


def _file_handler(log_file: str) -> logging.Handler:
    handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure logging for a command-line run.

    ``quiet`` wins over ``verbose``. Without either only warnings and
    errors are shown, so a normal run prints nothing but the JSON result.

    Args:
        verbose: Enable DEBUG level logging (``--debug``)
        quiet: Suppress all but ERROR level logging
        log_file: Optional file path to append logs to

    Returns:
        The ``escheck`` logger
    """
    level = _resolve_level(verbose, quiet)

    handlers = [_console_handler(verbose)]
    if log_file:
        handlers.append(_file_handler(log_file))

    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=handlers)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger below the ``escheck`` namespace.

    Args:
        name: Module name (e.g., 'escheck.runner'); bare names are prefixed

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger(LOGGER_NAME)
    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)
