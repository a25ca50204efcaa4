"""Per-file outcomes, diagnostics and the final check report.

The machine-readable result shape produced by to_result() is a stable
contract for tooling:

    {
      "errNo": 0 | 1 | 2,
      "errMsg": str,
      "data": [{errorFile, sourceFile, location: {line, column}, code, stack, kind}]
    }
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .exceptions import CheckError
from .grammar.models import NonConformant

ERR_OK = 0
ERR_NO_FILES = 1
ERR_UNEXPECTED = 2

SUCCESS_MESSAGE = "ES-Check: there were no ES version matching errors!  🎉"


class OutcomeKind(str, Enum):
    """Tag of a single file's outcome."""

    PASSED = "passed"
    SYNTAX = "syntax"
    IO = "io"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class FileOutcome:
    """Result of checking one file: exactly one of the kinds above."""

    path: str
    kind: OutcomeKind
    fault: Optional[NonConformant] = None
    error: Optional[CheckError] = None

    @property
    def passed(self) -> bool:
        return self.kind is OutcomeKind.PASSED

    @classmethod
    def ok(cls, path: str) -> FileOutcome:
        return cls(path, OutcomeKind.PASSED)

    @classmethod
    def syntax(cls, path: str, fault: NonConformant) -> FileOutcome:
        return cls(path, OutcomeKind.SYNTAX, fault=fault)

    @classmethod
    def failed(cls, path: str, kind: OutcomeKind, error: CheckError) -> FileOutcome:
        return cls(path, kind, error=error)


@dataclass(frozen=True)
class FileDiagnostic:
    """One failing file.

    Attributes:
        path: File that failed
        source_path: Same as path; reserved for composed-source tracing
        line: 1-based line (None for read/timeout failures)
        column: 0-based character column (None for read/timeout failures)
        code: Literal offending excerpt
        raw_fault: Original fault description
        kind: syntax, io or timeout
    """

    path: str
    source_path: str
    line: Optional[int]
    column: Optional[int]
    code: str
    raw_fault: str
    kind: OutcomeKind = OutcomeKind.SYNTAX

    @classmethod
    def from_outcome(cls, outcome: FileOutcome) -> FileDiagnostic:
        if outcome.fault is not None:
            fault = outcome.fault
            return cls(
                path=outcome.path,
                source_path=outcome.path,
                line=fault.line,
                column=fault.column,
                code=fault.code,
                raw_fault=fault.message,
                kind=outcome.kind,
            )
        return cls(
            path=outcome.path,
            source_path=outcome.path,
            line=None,
            column=None,
            code="",
            raw_fault=str(outcome.error),
            kind=outcome.kind,
        )

    @property
    def stack(self) -> str:
        """Fault text prefixed with its error kind."""
        if self.kind is OutcomeKind.SYNTAX:
            return f"SyntaxError: {self.raw_fault}"
        if self.kind is OutcomeKind.TIMEOUT:
            return f"EvaluationTimeout: {self.raw_fault}"
        return f"IOError: {self.raw_fault}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "errorFile": self.path,
            "sourceFile": self.source_path,
            "location": {"line": self.line, "column": self.column},
            "code": self.code,
            "stack": self.stack,
            "kind": self.kind.value,
        }


@dataclass(frozen=True)
class CheckReport:
    """Terminal artifact of a run, owned entirely by the caller."""

    diagnostics: tuple[FileDiagnostic, ...]
    total_files_checked: int

    @property
    def passed(self) -> bool:
        return not self.diagnostics


def aggregate(outcomes: Iterable[FileOutcome]) -> CheckReport:
    """Collect outcomes into a report, keeping order and duplicates."""
    outcomes = list(outcomes)
    diagnostics = tuple(FileDiagnostic.from_outcome(o) for o in outcomes if not o.passed)
    return CheckReport(diagnostics=diagnostics, total_files_checked=len(outcomes))


def to_result(report: CheckReport) -> dict[str, Any]:
    """Machine-readable result for a completed run."""
    if report.passed:
        message = SUCCESS_MESSAGE
    else:
        message = f"ES-Check: there were {len(report.diagnostics)} ES version matching errors."
    return {
        "errNo": ERR_OK,
        "errMsg": message,
        "data": [d.to_dict() for d in report.diagnostics],
    }


def error_result(err_no: int, message: str) -> dict[str, Any]:
    """Machine-readable result for a run that aborted."""
    return {"errNo": err_no, "errMsg": message, "data": []}


def exit_code(result: dict[str, Any]) -> int:
    """Process exit status for a result dict.

    Non-zero only when a diagnostic exists or no files were resolved. An
    aborted run (errNo 2) reports through errMsg and exits 0.
    """
    if result["errNo"] == ERR_NO_FILES or result["data"]:
        return 1
    return 0
