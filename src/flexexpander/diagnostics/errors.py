"""Expander exception hierarchy with structured diagnostics.

All exceptions optionally carry Diagnostic objects for rich error information.
None of these escape expand(): the resolver collects them per placeholder.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic


class ExpanderError(Exception):
    """Base exception for all expander errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize ExpanderError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class EvaluationError(ExpanderError):
    """Expression or script could not be evaluated.

    Examples:
    - Unknown property in the context
    - None dereference ("nullVar.name")
    - Exception raised by a property getter or script
    - Construct rejected by the script sandbox

    Fallback: the placeholder renders as an empty string.
    """


class FormatError(ExpanderError):
    """Format directive could not be applied.

    Examples:
    - Unknown directive name
    - Non-numeric value passed to ?currency()
    - Unknown currency code

    Fallback: the placeholder renders as an empty string.
    """
