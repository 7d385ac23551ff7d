"""Diagnostic system for expander errors.

Provides structured error diagnostics with codes, hints and severities.
Inspired by Rust compiler diagnostics.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode
from .errors import EvaluationError, ExpanderError, FormatError
from .templates import ErrorTemplate

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "ErrorTemplate",
    "EvaluationError",
    "ExpanderError",
    "FormatError",
]
