"""Configuration loading and management for ES-Check.

Configuration sources are merged in priority order:
    1. Defaults (defined in CheckSettings)
    2. Project config (./.escheckrc, a JSON object)
    3. Explicit config file (if given)
    4. Environment variables (ESCHECK_* prefix)
    5. CLI / API overrides (passed as kwargs)

Files passed directly always win over the ``files`` list of a config file;
the config file only supplies defaults.

Example:
    >>> settings = load_config(ecma_version="es6", files=["dist/*.js"])
    >>> settings.ecma_version
    'es6'
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .discovery import expand_patterns
from .exceptions import EsCheckError, InvalidConfigError, NoFilesError
from .profiles import DEFAULT_VERSION, EcmaProfile, resolve_profile

# Type aliases for clarity
Verbosity = Literal["quiet", "normal", "verbose"]

CONFIG_FILE_NAME = ".escheckrc"

# Generous guard against pathological inputs, not a performance target
DEFAULT_TIMEOUT_SECONDS = 30.0

# .escheckrc key -> CheckSettings field
_RC_KEYS = {
    "files": "files",
    "ecmaVersion": "ecma_version",
    "module": "module",
    "allowHashBang": "allow_hash_bang",
    "not": "skip_patterns",
    "workers": "workers",
    "timeoutSeconds": "timeout_seconds",
    "failFast": "fail_fast",
}


@dataclass(frozen=True)
class CheckSettings:
    """Merged settings for one invocation.

    Attributes:
        ecma_version: Version identifier ("es5", "es2016", ...)
        files: Glob patterns of files to check, in order
        module: Judge files with module grammar
        allow_hash_bang: Tolerate a leading ``#!`` line
        skip_patterns: Substrings; matching paths are not checked
        workers: Parallel workers (None = auto-detect)
        timeout_seconds: Per-file evaluation budget
        fail_fast: Stop at the first failing file (in input order)
        verbosity: Logging verbosity level
    """

    ecma_version: str = DEFAULT_VERSION
    files: list[str] = field(default_factory=list)
    module: bool = False
    allow_hash_bang: bool = False
    skip_patterns: list[str] = field(default_factory=list)
    workers: Optional[int] = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    fail_fast: bool = False
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not isinstance(self.ecma_version, str) or not self.ecma_version.strip():
            raise InvalidConfigError("ecma_version", self.ecma_version, "must be a non-empty string")
        if not isinstance(self.files, list) or not all(isinstance(f, str) for f in self.files):
            raise InvalidConfigError("files", self.files, "must be a list of glob strings")
        if not isinstance(self.skip_patterns, list) or not all(
            isinstance(p, str) for p in self.skip_patterns
        ):
            raise InvalidConfigError("skip_patterns", self.skip_patterns, "must be a list of strings")
        if self.workers is not None and self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.timeout_seconds <= 0:
            raise InvalidConfigError("timeout_seconds", self.timeout_seconds, "must be positive")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "must be quiet, normal or verbose")


@dataclass(frozen=True)
class CheckConfiguration:
    """Everything a run needs, resolved once and then only read.

    Attributes:
        profile: Grammar configuration every file is judged against
        files: Candidate paths in input order (globs already expanded)
        skip_patterns: Substrings excluding paths from the run
        root: Directory relative paths are read from
        workers: Parallel workers (None = auto-detect)
        timeout_seconds: Per-file evaluation budget
        fail_fast: Stop at the first failing file
    """

    profile: EcmaProfile
    files: tuple[str, ...]
    skip_patterns: frozenset[str] = frozenset()
    root: Path = field(default_factory=Path.cwd)
    workers: Optional[int] = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    fail_fast: bool = False


def load_config(config_file: Optional[Path] = None, cwd: Optional[Path] = None, **overrides) -> CheckSettings:
    """Load settings with auto-discovery and merging.

    Args:
        config_file: Optional explicit JSON config file path
        cwd: Directory searched for ``.escheckrc`` (default: current directory)
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values and an empty ``files`` list mean "not given".

    Returns:
        Validated CheckSettings instance

    Raises:
        InvalidConfigError: If a config source holds an invalid value
        EsCheckError: If a config file is unreadable or not JSON
    """
    merged: dict[str, Any] = {}

    # 1. Project config
    project_config = (cwd or Path.cwd()) / CONFIG_FILE_NAME
    if project_config.exists():
        merged.update(_load_rc_file(project_config))

    # 2. Explicit config file
    if config_file is not None:
        if not config_file.exists():
            raise EsCheckError(f"Config file not found: {config_file}")
        merged.update(_load_rc_file(config_file))

    # 3. Environment variables (ESCHECK_* prefix)
    merged.update(_load_env_vars())

    # 4. CLI overrides (highest priority)
    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    for key, value in overrides.items():
        if value is None:
            continue
        if key in ("files", "skip_patterns") and not value:
            continue
        merged[key] = list(value) if key in ("files", "skip_patterns") else value

    try:
        return CheckSettings(**merged)
    except TypeError as e:
        # Unknown field
        raise EsCheckError(f"Invalid configuration: {e}")


def build_configuration(settings: CheckSettings, cwd: Optional[Path] = None) -> CheckConfiguration:
    """Resolve settings into a CheckConfiguration.

    The version is resolved before any file pattern is expanded, so an
    unknown version aborts the run without touching the file system.

    Raises:
        UnknownVersionError: If the version identifier is not supported
        NoFilesError: If no file patterns were supplied at all
    """
    profile = resolve_profile(settings.ecma_version, settings.module, settings.allow_hash_bang)

    if not settings.files:
        raise NoFilesError()

    root = cwd or Path.cwd()
    return CheckConfiguration(
        profile=profile,
        files=tuple(expand_patterns(settings.files, root)),
        skip_patterns=frozenset(settings.skip_patterns),
        root=root,
        workers=settings.workers,
        timeout_seconds=settings.timeout_seconds,
        fail_fast=settings.fail_fast,
    )


def _load_rc_file(path: Path) -> dict[str, Any]:
    """Load a JSON config file and map its keys to CheckSettings fields.

    Raises:
        EsCheckError: If the file cannot be read or is not a JSON object
        InvalidConfigError: If the file holds an unrecognized key
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise EsCheckError(f"Invalid config file '{path}': {e}")

    if not isinstance(data, dict):
        raise EsCheckError(f"Invalid config file '{path}': expected a JSON object")

    result: dict[str, Any] = {}
    for key, value in data.items():
        field_name = _RC_KEYS.get(key)
        if field_name is None:
            raise InvalidConfigError(key, value, f"unrecognized key in {path.name}")
        if field_name in ("files", "skip_patterns") and isinstance(value, str):
            value = [value]
        result[field_name] = value
    return result


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from ESCHECK_* environment variables.

    Supported environment variables:
        ESCHECK_ECMA_VERSION: str
        ESCHECK_MODULE: bool (true/false/1/0)
        ESCHECK_ALLOW_HASH_BANG: bool
        ESCHECK_WORKERS: int
        ESCHECK_TIMEOUT_SECONDS: float
        ESCHECK_FAIL_FAST: bool
        ESCHECK_VERBOSITY: quiet/normal/verbose

    Returns:
        Dict of field_name -> parsed_value for any ESCHECK_* vars found.
    """
    type_hints = get_type_hints(CheckSettings)

    result: dict[str, Any] = {}

    for field_name in CheckSettings.__dataclass_fields__:
        env_key = f"ESCHECK_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Handle Optional[X] which is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]

    # List fields (files, skip_patterns) only come from files or flags
    if origin is list or type_hint is list:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    # String (including Literal types like Verbosity)
    if type_hint is str or origin is Literal:
        return value

    return None
