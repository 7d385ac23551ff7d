"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    This keeps messages testable and consistently formatted, and documents
    every error case in one place.
    """

    @staticmethod
    def expression_invalid(expression: str, reason: str) -> Diagnostic:
        """Expression text could not be tokenized.

        Args:
            expression: The offending expression text
            reason: Why tokenizing failed

        Returns:
            Diagnostic for EXPRESSION_INVALID
        """
        msg = f"Invalid expression: {reason}"
        return Diagnostic(
            code=DiagnosticCode.EXPRESSION_INVALID,
            message=msg,
            hint="Use dotted or bracketed paths such as 'order.items[0]'",
            expression=expression,
        )

    @staticmethod
    def property_not_found(name: str, expression: str) -> Diagnostic:
        """Property, key or attribute missing from the context.

        Args:
            name: The property that was not found
            expression: Full expression being evaluated

        Returns:
            Diagnostic for PROPERTY_NOT_FOUND
        """
        msg = f"Property '{name}' not found"
        return Diagnostic(
            code=DiagnosticCode.PROPERTY_NOT_FOUND,
            message=msg,
            hint=f"Check that the context provides '{name}'",
            expression=expression,
        )

    @staticmethod
    def null_dereference(name: str, expression: str) -> Diagnostic:
        """Navigation attempted through a None value.

        Args:
            name: The property requested from None
            expression: Full expression being evaluated

        Returns:
            Diagnostic for NULL_DEREFERENCE
        """
        msg = f"Cannot read '{name}' of null"
        return Diagnostic(
            code=DiagnosticCode.NULL_DEREFERENCE,
            message=msg,
            expression=expression,
        )

    @staticmethod
    def index_out_of_range(index: int, expression: str) -> Diagnostic:
        """Sequence index outside of bounds.

        Args:
            index: The requested index
            expression: Full expression being evaluated

        Returns:
            Diagnostic for INDEX_OUT_OF_RANGE
        """
        msg = f"Index {index} out of range"
        return Diagnostic(
            code=DiagnosticCode.INDEX_OUT_OF_RANGE,
            message=msg,
            expression=expression,
        )

    @staticmethod
    def property_access_denied(name: str, expression: str) -> Diagnostic:
        """Private or dunder attribute requested.

        Args:
            name: The rejected attribute name
            expression: Full expression being evaluated

        Returns:
            Diagnostic for PROPERTY_ACCESS_DENIED
        """
        msg = f"Access to private attribute '{name}' is not allowed"
        return Diagnostic(
            code=DiagnosticCode.PROPERTY_ACCESS_DENIED,
            message=msg,
            hint="Only public attributes can be read from templates",
            expression=expression,
        )

    @staticmethod
    def property_access_failed(name: str, error_msg: str, expression: str) -> Diagnostic:
        """Reading a property raised an exception.

        Args:
            name: The property being read
            error_msg: Message of the underlying exception
            expression: Full expression being evaluated

        Returns:
            Diagnostic for PROPERTY_ACCESS_FAILED
        """
        msg = f"Reading '{name}' failed: {error_msg}"
        return Diagnostic(
            code=DiagnosticCode.PROPERTY_ACCESS_FAILED,
            message=msg,
            expression=expression,
        )

    @staticmethod
    def script_failed(script: str, error_msg: str) -> Diagnostic:
        """Script evaluation failed.

        Args:
            script: Script source
            error_msg: Message of the underlying exception

        Returns:
            Diagnostic for SCRIPT_FAILED
        """
        msg = f"Script evaluation failed: {error_msg}"
        return Diagnostic(
            code=DiagnosticCode.SCRIPT_FAILED,
            message=msg,
            expression=script,
        )

    @staticmethod
    def script_rejected(script: str, error_msg: str) -> Diagnostic:
        """Script touched something the sandbox forbids.

        Args:
            script: Script source
            error_msg: Message of the sandbox violation

        Returns:
            Diagnostic for SCRIPT_REJECTED
        """
        msg = f"Script rejected by sandbox: {error_msg}"
        return Diagnostic(
            code=DiagnosticCode.SCRIPT_REJECTED,
            message=msg,
            hint="Scripts may only read values from the context",
            expression=script,
        )

    @staticmethod
    def evaluator_failed(expression: str, error_type: str, error_msg: str) -> Diagnostic:
        """A third-party evaluator raised instead of returning a failure.

        Args:
            expression: Expression handed to the evaluator
            error_type: Exception class name
            error_msg: Exception message

        Returns:
            Diagnostic for EVALUATOR_FAILED
        """
        msg = f"Evaluator raised {error_type}: {error_msg}"
        return Diagnostic(
            code=DiagnosticCode.EVALUATOR_FAILED,
            message=msg,
            expression=expression,
        )

    @staticmethod
    def directive_not_found(name: str) -> Diagnostic:
        """Directive not registered.

        Args:
            name: Directive name used in the template

        Returns:
            Diagnostic for DIRECTIVE_NOT_FOUND
        """
        msg = f"Directive '{name}' not found"
        return Diagnostic(
            code=DiagnosticCode.DIRECTIVE_NOT_FOUND,
            message=msg,
            hint="Built-in directives: currency. Check spelling.",
            directive_name=name,
            severity="warning",
        )

    @staticmethod
    def directive_failed(name: str, error_msg: str) -> Diagnostic:
        """Directive raised an unexpected exception.

        Args:
            name: Directive name
            error_msg: Message of the underlying exception

        Returns:
            Diagnostic for DIRECTIVE_FAILED
        """
        msg = f"Directive '{name}' failed: {error_msg}"
        return Diagnostic(
            code=DiagnosticCode.DIRECTIVE_FAILED,
            message=msg,
            directive_name=name,
            severity="warning",
        )

    @staticmethod
    def argument_required(name: str, argument_name: str) -> Diagnostic:
        """Directive called without a required argument.

        Args:
            name: Directive name
            argument_name: Missing argument

        Returns:
            Diagnostic for ARGUMENT_REQUIRED
        """
        msg = f"Directive '{name}' requires argument '{argument_name}'"
        return Diagnostic(
            code=DiagnosticCode.ARGUMENT_REQUIRED,
            message=msg,
            hint=f"Write it as ?{name}({argument_name})",
            directive_name=name,
            severity="warning",
        )

    @staticmethod
    def type_mismatch(name: str, expected_type: str, received_type: str) -> Diagnostic:
        """Directive received a value of the wrong type.

        Args:
            name: Directive name
            expected_type: Expected type description
            received_type: Actual type name

        Returns:
            Diagnostic for TYPE_MISMATCH
        """
        msg = f"Type mismatch in ?{name}(): expected {expected_type}, got {received_type}"
        return Diagnostic(
            code=DiagnosticCode.TYPE_MISMATCH,
            message=msg,
            directive_name=name,
            expected_type=expected_type,
            received_type=received_type,
            severity="warning",
        )

    @staticmethod
    def currency_code_invalid(code: str) -> Diagnostic:
        """Unknown ISO 4217 currency code.

        Args:
            code: The rejected currency code

        Returns:
            Diagnostic for CURRENCY_CODE_INVALID
        """
        msg = f"Unknown currency code '{code}'"
        return Diagnostic(
            code=DiagnosticCode.CURRENCY_CODE_INVALID,
            message=msg,
            hint="Use an ISO 4217 code such as USD or EUR",
            directive_name="currency",
            severity="warning",
        )

    @staticmethod
    def formatting_failed(value_repr: str, error_msg: str) -> Diagnostic:
        """Locale-aware formatting of a value failed.

        Args:
            value_repr: repr() of the value
            error_msg: Message of the underlying exception

        Returns:
            Diagnostic for FORMATTING_FAILED
        """
        msg = f"Formatting {value_repr} failed: {error_msg}"
        return Diagnostic(
            code=DiagnosticCode.FORMATTING_FAILED,
            message=msg,
            severity="warning",
        )

    @staticmethod
    def max_depth_exceeded(max_depth: int) -> Diagnostic:
        """Placeholder nesting exceeds the depth limit.

        Args:
            max_depth: Configured depth limit

        Returns:
            Diagnostic for MAX_DEPTH_EXCEEDED
        """
        msg = f"Maximum nesting depth ({max_depth}) exceeded"
        return Diagnostic(
            code=DiagnosticCode.MAX_DEPTH_EXCEEDED,
            message=msg,
            hint="Reduce placeholder nesting",
        )
