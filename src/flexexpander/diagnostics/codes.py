"""Diagnostic codes and data structures.

Defines error codes and structured diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Evaluation errors (expression and script failures)
        2000-2999: Formatting errors (directives and value rendering)
        3000-3999: Structural limits (nesting depth)
    """

    # Evaluation errors (1000-1999)
    EXPRESSION_INVALID = 1001
    PROPERTY_NOT_FOUND = 1002
    NULL_DEREFERENCE = 1003
    INDEX_OUT_OF_RANGE = 1004
    PROPERTY_ACCESS_DENIED = 1005
    PROPERTY_ACCESS_FAILED = 1006
    SCRIPT_FAILED = 1007
    SCRIPT_REJECTED = 1008
    EVALUATOR_FAILED = 1009

    # Formatting errors (2000-2999)
    DIRECTIVE_NOT_FOUND = 2001
    DIRECTIVE_FAILED = 2002
    ARGUMENT_REQUIRED = 2003
    TYPE_MISMATCH = 2004
    CURRENCY_CODE_INVALID = 2005
    FORMATTING_FAILED = 2006

    # Structural limits (3000-3999)
    MAX_DEPTH_EXCEEDED = 3001


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Inspired by Rust compiler diagnostics.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        hint: Suggestion for fixing the error
        expression: Expression text that was being evaluated (if any)
        directive_name: Directive that failed (format errors)
        expected_type: Expected value type (format errors)
        received_type: Actual value type received (format errors)
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    hint: str | None = None
    expression: str | None = None
    directive_name: str | None = None
    expected_type: str | None = None
    received_type: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like Rust compiler.

        Example output:
            error[PROPERTY_NOT_FOUND]: Property 'name' not found
              = expression: user.name
              = help: Check that the context provides 'name'

        Returns:
            Formatted error message
        """
        parts = [f"{self.severity}[{self.code.name}]: {self.message}"]

        if self.expression is not None:
            parts.append(f"  = expression: {self.expression}")

        if self.directive_name:
            parts.append(f"  = directive: {self.directive_name}")

        if self.expected_type:
            parts.append(f"  = expected: {self.expected_type}")

        if self.received_type:
            parts.append(f"  = received: {self.received_type}")

        if self.hint:
            parts.append(f"  = help: {self.hint}")

        return "\n".join(parts)
