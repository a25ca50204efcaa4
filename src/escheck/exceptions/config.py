"""Configuration exceptions: versions, settings, file selection.

All of these are fatal: they abort a run before any file is evaluated.
"""

from typing import Any, Iterable, List

from .base import EsCheckError


class ConfigurationError(EsCheckError):
    """Base class for configuration-related errors."""

    pass


class UnknownVersionError(ConfigurationError):
    """Raised when an ECMAScript version identifier is not in the registry."""

    def __init__(self, version: str, supported_versions: Iterable[str]):
        supported: List[str] = list(supported_versions)
        super().__init__(
            f"Unknown ecmaVersion: {version}",
            details={"version": str(version), "supported": ", ".join(supported)},
        )
        self.version = version
        self.supported_versions = supported


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class NoFilesError(ConfigurationError):
    """Raised when no files are left to check."""

    def __init__(self, reason: str = "No files were passed in please pass in a list of files to es-check!"):
        super().__init__(reason)
        self.reason = reason
