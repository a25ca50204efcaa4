"""CheckRunner: filters, reads, prepares and evaluates every file of a run.

Per-file work is independent, so files are checked on a thread pool.
Outcomes are stored by input position and reassembled in input order, never
in completion order.
"""

from __future__ import annotations

import concurrent.futures
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Optional

from .config import DEFAULT_TIMEOUT_SECONDS, CheckConfiguration
from .discovery import filter_skipped
from .exceptions import EvaluationTimeoutError, FileReadError, NoFilesError
from .grammar import ConformanceResult, NonConformant, evaluate, prepare_source
from .logging_config import get_logger
from .profiles import EcmaProfile
from .report import CheckReport, FileOutcome, OutcomeKind, aggregate

logger = get_logger(__name__)

# Default worker count: use CPU count, capped at 8 to avoid overwhelming I/O
_DEFAULT_WORKERS = min(os.cpu_count() or 4, 8)

Evaluator = Callable[[str, EcmaProfile], ConformanceResult]


def _run_with_timeout(func: Callable[[], ConformanceResult], timeout: float, path: str) -> ConformanceResult:
    """Run ``func`` with a time budget. Raises EvaluationTimeoutError if exceeded.

    A timed-out evaluation cannot be interrupted; its thread is abandoned
    and finishes in the background.
    """
    executor = ThreadPoolExecutor(max_workers=1)
    future = executor.submit(func)
    try:
        return future.result(timeout=timeout)
    except concurrent.futures.TimeoutError:
        raise EvaluationTimeoutError(path, timeout)
    finally:
        executor.shutdown(wait=False)


class CheckRunner:
    """Run a CheckConfiguration and produce a CheckReport.

    The runner holds no state between runs; one instance can serve any
    number of configurations.
    """

    def __init__(
        self,
        max_workers: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
        evaluator: Evaluator = evaluate,
    ) -> None:
        """
        Args:
            max_workers: Override the configuration's worker count
            timeout_seconds: Override the configuration's per-file budget
            evaluator: Grammar evaluator (injectable for tests)
        """
        self._max_workers = max_workers
        self._timeout_seconds = timeout_seconds
        self._evaluator = evaluator

    def run(self, config: CheckConfiguration) -> CheckReport:
        """Check every admitted file of ``config``.

        Raises:
            NoFilesError: If no file survives skip filtering
        """
        files = filter_skipped(config.files, config.skip_patterns)
        if not files:
            raise NoFilesError()

        workers = self._max_workers or config.workers or _DEFAULT_WORKERS
        timeout = self._timeout_seconds or config.timeout_seconds or DEFAULT_TIMEOUT_SECONDS
        logger.debug(
            f"Checking {len(files)} file(s) as {config.profile.name} "
            f"({config.profile.source_type}) with {workers} worker(s)"
        )

        def _check(path: str) -> FileOutcome:
            return self.check_file(path, config.profile, config.root, timeout)

        if workers == 1 or len(files) == 1:
            outcomes = self._run_sequential(files, _check, config.fail_fast)
        else:
            outcomes = self._run_parallel(files, _check, workers, config.fail_fast)

        return aggregate(outcomes)

    def check_file(
        self,
        path: str,
        profile: EcmaProfile,
        root: Optional[Path] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> FileOutcome:
        """Read, prepare and evaluate one file.

        Read failures and timeouts become outcomes of their own kind; any
        other exception propagates and aborts the run.
        """
        try:
            raw_text = _read_source(path, root)
        except FileReadError as e:
            logger.warning(str(e))
            return FileOutcome.failed(path, OutcomeKind.IO, e)

        prepared = prepare_source(raw_text, profile.allow_directive_prefix)

        try:
            result = _run_with_timeout(lambda: self._evaluator(prepared, profile), timeout, path)
        except EvaluationTimeoutError as e:
            logger.warning(str(e))
            return FileOutcome.failed(path, OutcomeKind.TIMEOUT, e)

        if isinstance(result, NonConformant):
            logger.debug(f"{path}: {result.message}")
            return FileOutcome.syntax(path, result)
        return FileOutcome.ok(path)

    @staticmethod
    def _run_sequential(
        files: list[str], check: Callable[[str], FileOutcome], fail_fast: bool
    ) -> list[FileOutcome]:
        outcomes = []
        for path in files:
            outcome = check(path)
            outcomes.append(outcome)
            if fail_fast and not outcome.passed:
                logger.debug(f"Fail-fast: stopping after {path}")
                break
        return outcomes

    @staticmethod
    def _run_parallel(
        files: list[str], check: Callable[[str], FileOutcome], workers: int, fail_fast: bool
    ) -> list[FileOutcome]:
        outcomes: list[FileOutcome] = []
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # Indexed by input position
            futures = [executor.submit(check, path) for path in files]
            for index, future in enumerate(futures):
                outcome = future.result()
                outcomes.append(outcome)
                if fail_fast and not outcome.passed:
                    logger.debug(f"Fail-fast: stopping after {files[index]}")
                    executor.shutdown(wait=True, cancel_futures=True)
                    break
        return outcomes


def _read_source(path: str, root: Optional[Path]) -> str:
    """Read a file as UTF-8 text.

    Raises:
        FileReadError: If the file is missing, unreadable or not UTF-8
    """
    filepath = (root / path) if root is not None else Path(path)
    try:
        return filepath.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(path, str(e)) from e
