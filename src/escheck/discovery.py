"""File discovery: glob expansion and skip-pattern filtering."""

from __future__ import annotations

import glob
from collections.abc import Iterable, Sequence
from pathlib import Path

from .logging_config import get_logger

logger = get_logger(__name__)


def expand_patterns(patterns: Sequence[str], root: Path) -> list[str]:
    """Expand glob patterns into an ordered, de-duplicated list of files.

    Matches keep pattern order; within one pattern they are sorted so runs
    are deterministic. Relative patterns are resolved against ``root`` and
    yield paths relative to it. Directories are skipped.

    Args:
        patterns: Glob patterns, ``**`` matches recursively
        root: Directory relative patterns are expanded in

    Returns:
        File paths in first-seen order
    """
    seen: set[str] = set()
    files: list[str] = []

    for pattern in patterns:
        matches = sorted(glob.glob(pattern, root_dir=str(root), recursive=True))
        matches = [m for m in matches if not (root / m).is_dir()]
        if not matches:
            logger.warning(f"Pattern matched no files: {pattern}")
            continue

        for match in matches:
            if match not in seen:
                seen.add(match)
                files.append(match)

    logger.debug(f"Expanded {len(patterns)} pattern(s) into {len(files)} file(s)")
    return files


def is_skipped(path: str, skip_patterns: Iterable[str]) -> bool:
    """Whether any skip pattern is a (case-sensitive) substring of ``path``."""
    return any(pattern in path for pattern in skip_patterns)


def filter_skipped(paths: Sequence[str], skip_patterns: Iterable[str]) -> list[str]:
    """Drop every path matched by a skip pattern, keeping input order.

    The surviving set does not depend on the order of ``skip_patterns``.
    """
    patterns = [p for p in skip_patterns if p]
    if not patterns:
        return list(paths)

    kept = []
    for path in paths:
        if is_skipped(path, patterns):
            logger.debug(f"Skipping {path}")
            continue
        kept.append(path)
    return kept
