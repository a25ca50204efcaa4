"""
ES-Check - ECMAScript version conformance checking

Verifies that a set of JavaScript files only uses syntax available in a
declared ECMAScript version, and reports the first non-conforming location
of every failing file.
"""

__version__ = "0.3.0"
__author__ = "Naman Agarwal"

from .api import check, check_to_result
from .profiles import EcmaProfile, resolve_profile
from .report import CheckReport, FileDiagnostic

__all__ = [
    "check",  # Main entry point
    "check_to_result",  # Machine-readable result dict
    "resolve_profile",
    "EcmaProfile",
    "CheckReport",
    "FileDiagnostic",
]
