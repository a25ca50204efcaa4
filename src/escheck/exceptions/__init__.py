"""Exception hierarchy for ES-Check."""

from .analysis import (
    CheckError,
    EvaluationTimeoutError,
    FileReadError,
    GrammarUnavailableError,
)
from .base import EsCheckError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    NoFilesError,
    UnknownVersionError,
)

__all__ = [
    "EsCheckError",
    "CheckError",
    "FileReadError",
    "EvaluationTimeoutError",
    "GrammarUnavailableError",
    "ConfigurationError",
    "InvalidConfigError",
    "NoFilesError",
    "UnknownVersionError",
]
