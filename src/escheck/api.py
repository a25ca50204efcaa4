"""Public API for ES-Check.

Example:
    >>> from escheck import check
    >>>
    >>> report = check(["dist/**/*.js"], ecma_version="es5")
    >>> report.passed
    True
    >>>
    >>> # Machine-readable result, never raises
    >>> result = check_to_result(["dist/**/*.js"], ecma_version="es6", module=True)
    >>> result["errNo"]
    0
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any, Optional

from .config import build_configuration, load_config
from .exceptions import EsCheckError, NoFilesError
from .logging_config import get_logger
from .report import ERR_NO_FILES, ERR_UNEXPECTED, CheckReport, error_result, to_result
from .runner import CheckRunner

logger = get_logger(__name__)


def check(
    files: Optional[Sequence[str]] = None,
    ecma_version: Optional[str] = None,
    module: Optional[bool] = None,
    allow_hash_bang: Optional[bool] = None,
    skip_patterns: Optional[Sequence[str]] = None,
    config_file: Optional[Path] = None,
    cwd: Optional[Path] = None,
    **overrides,
) -> CheckReport:
    """Check files against an ECMAScript version.

    This is the main entry point for ES-Check. It orchestrates:
    1. Load settings (.escheckrc + environment + arguments)
    2. Resolve the version profile (fails before any file is read)
    3. Expand globs, drop skipped files
    4. Evaluate every file and collect diagnostics

    Args:
        files: Glob patterns (default: ``files`` from .escheckrc)
        ecma_version: Version identifier (default: config, else es5)
        module: Judge files with module grammar
        allow_hash_bang: Tolerate a leading ``#!`` line
        skip_patterns: Path substrings to exclude
        config_file: Optional explicit JSON config file
        cwd: Working directory (default: current directory)
        **overrides: Other settings (workers, timeout_seconds, fail_fast, ...)

    Returns:
        CheckReport with one diagnostic per failing file

    Raises:
        UnknownVersionError: If the version identifier is not supported
        NoFilesError: If no files remain to check
        EsCheckError: If configuration is invalid
    """
    settings = load_config(
        config_file=config_file,
        cwd=cwd,
        files=files,
        ecma_version=ecma_version,
        module=module or None,
        allow_hash_bang=allow_hash_bang or None,
        skip_patterns=skip_patterns,
        **overrides,
    )
    logger.debug(f"ES-Check: Going to check files using version {settings.ecma_version}")
    if settings.module:
        logger.debug("ES-Check: esmodule is set")
    if settings.allow_hash_bang:
        logger.debug("ES-Check: allowHashBang is set")

    configuration = build_configuration(settings, cwd=cwd)
    logger.debug("ES-Check start")

    report = CheckRunner().run(configuration)
    if not report.passed:
        logger.debug(
            f"ES-Check: there were {len(report.diagnostics)} ES version matching errors."
        )
    return report


def check_to_result(*args, **kwargs) -> dict[str, Any]:
    """Run check() and map the outcome onto the machine-readable result.

    Never raises for check failures: no files gives errNo 1, any other
    error gives errNo 2.
    """
    try:
        report = check(*args, **kwargs)
    except NoFilesError as e:
        return error_result(ERR_NO_FILES, str(e))
    except EsCheckError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        return error_result(ERR_UNEXPECTED, f"ES-Check Error: {e}")
    except Exception as e:
        logger.exception("Unexpected error during check")
        return error_result(ERR_UNEXPECTED, f"ES-Check Error: {e}")

    return to_result(report)
