"""Per-file check exceptions: reading, evaluating, grammar loading."""

from pathlib import Path
from typing import Union

from .base import EsCheckError


class CheckError(EsCheckError):
    """Base class for errors raised while checking a file."""

    pass


class FileReadError(CheckError):
    """Raised when a file cannot be accessed or read."""

    def __init__(self, filepath: Union[str, Path], reason: str):
        super().__init__(
            f"Cannot read file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class EvaluationTimeoutError(CheckError):
    """Raised when grammar evaluation of a file exceeds its time budget."""

    def __init__(self, filepath: Union[str, Path], timeout: float):
        super().__init__(
            f"Evaluation of {filepath} exceeded {timeout}s timeout",
            details={"filepath": str(filepath), "timeout": str(timeout)},
        )
        self.filepath = filepath
        self.timeout = timeout


class GrammarUnavailableError(CheckError):
    """Raised when the JavaScript grammar cannot be loaded."""

    def __init__(self, reason: str):
        super().__init__("JavaScript grammar unavailable", details={"reason": reason})
        self.reason = reason
