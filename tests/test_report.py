"""Tests for outcomes, diagnostics and result mapping."""

import json

from escheck.exceptions import EvaluationTimeoutError, FileReadError
from escheck.grammar import NonConformant
from escheck.report import (
    ERR_NO_FILES,
    ERR_OK,
    ERR_UNEXPECTED,
    SUCCESS_MESSAGE,
    CheckReport,
    FileDiagnostic,
    FileOutcome,
    OutcomeKind,
    aggregate,
    error_result,
    exit_code,
    to_result,
)

FAULT = NonConformant(line=3, column=4, code="() => 1", message="'arrow function' is not supported by es5 (3:4)")


class TestAggregate:
    """Test aggregate."""

    def test_empty_diagnostics_pass(self):
        report = aggregate([FileOutcome.ok("a.js"), FileOutcome.ok("b.js")])
        assert report.passed
        assert report.total_files_checked == 2
        assert report.diagnostics == ()

    def test_keeps_order_and_duplicates(self):
        outcomes = [
            FileOutcome.syntax("b.js", FAULT),
            FileOutcome.ok("a.js"),
            FileOutcome.syntax("c.js", FAULT),
        ]
        report = aggregate(outcomes)
        assert [d.path for d in report.diagnostics] == ["b.js", "c.js"]
        assert not report.passed

    def test_io_and_timeout_tagged(self):
        outcomes = [
            FileOutcome.failed("a.js", OutcomeKind.IO, FileReadError("a.js", "denied")),
            FileOutcome.failed("b.js", OutcomeKind.TIMEOUT, EvaluationTimeoutError("b.js", 1.0)),
        ]
        kinds = [d.kind for d in aggregate(outcomes).diagnostics]
        assert kinds == [OutcomeKind.IO, OutcomeKind.TIMEOUT]


class TestFileDiagnostic:
    """Test FileDiagnostic conversion."""

    def test_from_syntax_outcome(self):
        diagnostic = FileDiagnostic.from_outcome(FileOutcome.syntax("a.js", FAULT))
        assert diagnostic.line == 3
        assert diagnostic.column == 4
        assert diagnostic.code == "() => 1"
        assert diagnostic.raw_fault == FAULT.message
        assert diagnostic.stack == f"SyntaxError: {FAULT.message}"

    def test_to_dict_shape(self):
        data = FileDiagnostic.from_outcome(FileOutcome.syntax("a.js", FAULT)).to_dict()
        assert data == {
            "errorFile": "a.js",
            "sourceFile": "a.js",
            "location": {"line": 3, "column": 4},
            "code": "() => 1",
            "stack": f"SyntaxError: {FAULT.message}",
            "kind": "syntax",
        }

    def test_io_has_no_location(self):
        outcome = FileOutcome.failed("a.js", OutcomeKind.IO, FileReadError("a.js", "denied"))
        data = FileDiagnostic.from_outcome(outcome).to_dict()
        assert data["location"] == {"line": None, "column": None}
        assert data["stack"].startswith("IOError: ")
        assert data["kind"] == "io"


class TestResults:
    """Test result dicts and exit codes."""

    def test_success(self):
        result = to_result(CheckReport(diagnostics=(), total_files_checked=1))
        assert result == {"errNo": ERR_OK, "errMsg": SUCCESS_MESSAGE, "data": []}
        assert exit_code(result) == 0

    def test_failures(self):
        result = to_result(aggregate([FileOutcome.syntax("a.js", FAULT)]))
        assert result["errNo"] == ERR_OK
        assert len(result["data"]) == 1
        assert exit_code(result) == 1

    def test_no_files(self):
        result = error_result(ERR_NO_FILES, "No files")
        assert result["data"] == []
        assert exit_code(result) == 1

    def test_unexpected_exits_zero(self):
        """An aborted run has no diagnostics and resolved no files."""
        result = error_result(ERR_UNEXPECTED, "ES-Check Error: boom")
        assert result["data"] == []
        assert exit_code(result) == 0

    def test_serialization_is_stable(self):
        """Equal reports serialize byte-identically."""
        first = to_result(aggregate([FileOutcome.syntax("a.js", FAULT)]))
        second = to_result(aggregate([FileOutcome.syntax("a.js", FAULT)]))
        assert json.dumps(first, indent=2) == json.dumps(second, indent=2)
