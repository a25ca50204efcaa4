"""Conformance results produced by the grammar evaluator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Conformant:
    """The source parsed without any fault under the profile."""

    @property
    def conformant(self) -> bool:
        return True


@dataclass(frozen=True)
class NonConformant:
    """First syntax fault of a source under a profile.

    Attributes:
        line: 1-based line of the fault
        column: 0-based character column within that line
        code: Literal source excerpt at the fault
        message: Full fault description, ending in "(line:column)"
        required_level: Grammar level that would admit the construct, when
            the fault is a version gate rather than a structural error
    """

    line: int
    column: int
    code: str
    message: str
    required_level: Optional[int] = None

    @property
    def conformant(self) -> bool:
        return False


ConformanceResult = Union[Conformant, NonConformant]

CONFORMANT = Conformant()
