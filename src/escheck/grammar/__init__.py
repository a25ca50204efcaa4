"""Grammar conformance: source preparation, feature gating, evaluation."""

from .evaluator import evaluate
from .models import CONFORMANT, Conformant, ConformanceResult, NonConformant
from .preprocess import has_directive_prefix, prepare_source

__all__ = [
    "evaluate",
    "prepare_source",
    "has_directive_prefix",
    "Conformant",
    "NonConformant",
    "ConformanceResult",
    "CONFORMANT",
]
