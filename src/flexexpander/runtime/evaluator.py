"""Expression evaluation capability.

The resolver depends only on the Evaluator protocol: hand it the expanded
expression text and the context, get an EvaluationResult back. Failures
travel as values (EvaluationResult.failure) instead of exceptions.

Bundled implementations:
    - PropertyPathEvaluator: literals and dotted/bracketed property paths
    - JinjaScriptEvaluator: Jinja2 expressions in a sandboxed environment
    - ExpressionEvaluator: routes "prefix:" expressions to script evaluators
      and everything else to the property-path evaluator

Python 3.13+. Uses Jinja2 for scripting.
"""

from __future__ import annotations

import functools
import logging
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol, runtime_checkable

from jinja2 import StrictUndefined, TemplateError, Undefined
from jinja2.exceptions import SecurityError
from jinja2.sandbox import SandboxedEnvironment

from flexexpander.constants import DEFAULT_SCRIPT_PREFIX, MAX_SCRIPT_CACHE_SIZE
from flexexpander.diagnostics import Diagnostic, ErrorTemplate, EvaluationError

__all__ = [
    "EvaluationResult",
    "Evaluator",
    "ExpressionEvaluator",
    "JinjaScriptEvaluator",
    "PropertyPathEvaluator",
    "ScriptEvaluator",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EvaluationResult:
    """Outcome of evaluating one expression.

    Attributes:
        value: Resolved value (None when the expression denotes null)
        error: Failure description; None on success
    """

    value: object = None
    error: EvaluationError | None = None

    @property
    def ok(self) -> bool:
        """True when evaluation succeeded."""
        return self.error is None

    @classmethod
    def success(cls, value: object) -> EvaluationResult:
        """Successful evaluation yielding value."""
        return cls(value=value)

    @classmethod
    def failure(cls, error: EvaluationError | Diagnostic) -> EvaluationResult:
        """Failed evaluation.

        Args:
            error: EvaluationError, or a Diagnostic to wrap in one
        """
        if isinstance(error, Diagnostic):
            error = EvaluationError(error)
        return cls(error=error)


@runtime_checkable
class Evaluator(Protocol):
    """Resolves placeholder expression text against a context."""

    def resolve(self, expression: str, context: Mapping[str, object]) -> EvaluationResult:
        """Evaluate expression against context."""
        ...


@runtime_checkable
class ScriptEvaluator(Protocol):
    """Executes a script body (expression text after its "prefix:" marker)."""

    def execute(self, script: str, bindings: Mapping[str, object]) -> EvaluationResult:
        """Evaluate script with the context as variable bindings."""
        ...


# ============================================================================
# PROPERTY PATHS
# ============================================================================

_INTEGER = re.compile(r"[+-]?\d+")
_DECIMAL = re.compile(r"[+-]?(?:\d+\.\d*|\.\d+)")
_ROOT = re.compile(r"\s*([A-Za-z_$][\w$]*)")
_SEGMENT = re.compile(
    r"""\s*(?:
        \.\s*(?P<attr>[A-Za-z_$][\w$]*)
      | \[\s*(?P<index>[+-]?\d+)\s*\]
      | \[\s*'(?P<skey>[^']*)'\s*\]
      | \[\s*"(?P<dkey>[^"]*)"\s*\]
    )""",
    re.VERBOSE,
)
_KEYWORDS: dict[str, object] = {"null": None, "true": True, "false": False}

type _Segment = str | int


class PropertyPathEvaluator:
    """Evaluates literals and property paths.

    Supported expressions:
        - Literals: null, true, false, 42, -1.5, 'text', "text"
        - Paths: name, order.customer.name, items[0], prices['EUR']

    Navigation:
        - Mapping: key lookup (string or integer key)
        - Sequence (not str): integer index, negative counts from the end
        - Other objects: getattr for ".name", __getitem__ for "[...]"

    Failures: missing key or attribute, index out of range, None in the
    middle of a path, an exception raised while reading a property, and
    attribute names starting with "_".

    Example:
        >>> evaluator = PropertyPathEvaluator()
        >>> evaluator.resolve("order.items[1]", {"order": {"items": ["a", "b"]}}).value
        'b'
        >>> evaluator.resolve("missing", {}).ok
        False
    """

    __slots__ = ()

    def resolve(self, expression: str, context: Mapping[str, object]) -> EvaluationResult:
        """Evaluate expression against context."""
        text = expression.strip()
        if not text:
            return EvaluationResult.success(None)

        literal = self._parse_literal(text)
        if literal is not _NOT_LITERAL:
            return EvaluationResult.success(literal)

        parsed = self._parse_path(text)
        if isinstance(parsed, Diagnostic):
            return EvaluationResult.failure(parsed)
        root, segments = parsed

        if root not in context:
            return EvaluationResult.failure(ErrorTemplate.property_not_found(root, text))
        current = context[root]
        for segment in segments:
            if current is None:
                return EvaluationResult.failure(ErrorTemplate.null_dereference(str(segment), text))
            step = self._step(current, segment, text)
            if isinstance(step, Diagnostic):
                return EvaluationResult.failure(step)
            current = step.value
        return EvaluationResult.success(current)

    @staticmethod
    def _parse_literal(text: str) -> object:
        if text in _KEYWORDS:
            return _KEYWORDS[text]
        if _INTEGER.fullmatch(text):
            return int(text)
        if _DECIMAL.fullmatch(text):
            return Decimal(text)
        if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"":
            return text[1:-1]
        return _NOT_LITERAL

    @staticmethod
    def _parse_path(text: str) -> tuple[str, list[_Segment]] | Diagnostic:
        root_match = _ROOT.match(text)
        if root_match is None:
            return ErrorTemplate.expression_invalid(text, "expected a property name")
        root = root_match.group(1)
        segments: list[_Segment] = []
        pos = root_match.end()
        while pos < len(text):
            match = _SEGMENT.match(text, pos)
            if match is None:
                if text[pos:].isspace():
                    break
                reason = f"unexpected '{text[pos:]}'"
                return ErrorTemplate.expression_invalid(text, reason)
            if match.group("attr") is not None:
                segments.append(match.group("attr"))
            elif match.group("index") is not None:
                segments.append(int(match.group("index")))
            elif match.group("skey") is not None:
                segments.append(match.group("skey"))
            else:
                segments.append(match.group("dkey"))
            pos = match.end()
        return root, segments

    @staticmethod
    def _step(current: object, segment: _Segment, expression: str) -> EvaluationResult | Diagnostic:
        """Navigate one segment from current."""
        name = str(segment)
        match current:
            case Mapping():
                if segment in current:
                    return EvaluationResult.success(current[segment])
                return ErrorTemplate.property_not_found(name, expression)
            case Sequence() if not isinstance(current, str) and isinstance(segment, int):
                try:
                    return EvaluationResult.success(current[segment])
                except IndexError:
                    return ErrorTemplate.index_out_of_range(segment, expression)
            case _:
                pass

        if isinstance(segment, int):
            try:
                return EvaluationResult.success(current[segment])  # type: ignore[index]
            except IndexError:
                return ErrorTemplate.index_out_of_range(segment, expression)
            except (KeyError, TypeError):
                return ErrorTemplate.property_not_found(name, expression)

        if segment.startswith("_"):
            return ErrorTemplate.property_access_denied(segment, expression)
        try:
            return EvaluationResult.success(getattr(current, segment))
        except AttributeError:
            return ErrorTemplate.property_not_found(segment, expression)
        except Exception as e:  # noqa: BLE001 - property getters are user code
            return ErrorTemplate.property_access_failed(segment, str(e), expression)


_NOT_LITERAL = object()


# ============================================================================
# SCRIPTS
# ============================================================================


class JinjaScriptEvaluator:
    """Evaluates Jinja2 expressions against the context.

    Expressions run in a SandboxedEnvironment with StrictUndefined: reading
    an unknown name fails instead of rendering empty, and reaching for
    interpreter internals (__class__, __globals__, ...) is rejected.
    Compiled expressions are memoized per evaluator.

    Example:
        >>> evaluator = JinjaScriptEvaluator()
        >>> evaluator.execute("price * qty", {"price": 3, "qty": 4}).value
        12
        >>> evaluator.execute("{'k': 1}['k']", {}).value
        1
    """

    __slots__ = ("_compile", "_environment")

    def __init__(
        self,
        *,
        environment: SandboxedEnvironment | None = None,
        cache_size: int = MAX_SCRIPT_CACHE_SIZE,
    ) -> None:
        """Initialize script evaluator.

        Args:
            environment: Sandbox to evaluate in (default: a fresh
                SandboxedEnvironment with StrictUndefined)
            cache_size: Maximum memoized compiled expressions
        """
        self._environment = environment or SandboxedEnvironment(undefined=StrictUndefined)
        self._compile: Callable[[str], Callable[..., object]] = functools.lru_cache(
            maxsize=cache_size
        )(self._compile_expression)

    @property
    def environment(self) -> SandboxedEnvironment:
        """Sandbox scripts are evaluated in."""
        return self._environment

    def _compile_expression(self, script: str) -> Callable[..., object]:
        return self._environment.compile_expression(script, undefined_to_none=False)

    def execute(self, script: str, bindings: Mapping[str, object]) -> EvaluationResult:
        """Evaluate script with bindings as template variables."""
        source = script.strip()
        try:
            value = self._compile(source)(bindings)
            if isinstance(value, Undefined):
                # StrictUndefined raises its UndefinedError or SecurityError here
                str(value)
                value = None
        except SecurityError as e:
            logger.debug("Sandbox rejected script %r: %s", source, e)
            return EvaluationResult.failure(ErrorTemplate.script_rejected(source, str(e)))
        except TemplateError as e:
            return EvaluationResult.failure(ErrorTemplate.script_failed(source, str(e)))
        except MemoryError:
            raise
        except Exception as e:  # noqa: BLE001 - scripts run arbitrary property getters
            return EvaluationResult.failure(ErrorTemplate.script_failed(source, str(e)))
        return EvaluationResult.success(value)


class ExpressionEvaluator:
    """Default evaluator: routes scripts by prefix, paths to PropertyPathEvaluator.

    An expression whose text (after leading whitespace) starts with a
    registered prefix such as "jinja:" is handed, minus the prefix, to that
    script evaluator with the context as bindings.

    Example:
        >>> evaluator = ExpressionEvaluator()
        >>> evaluator.resolve("jinja: a + b", {"a": 1, "b": 2}).value
        3
        >>> evaluator.resolve("user.name", {"user": {"name": "Ada"}}).value
        'Ada'
    """

    __slots__ = ("_path_evaluator", "_script_evaluators")

    def __init__(
        self,
        *,
        path_evaluator: Evaluator | None = None,
        script_evaluators: Mapping[str, ScriptEvaluator] | None = None,
    ) -> None:
        """Initialize routing evaluator.

        Args:
            path_evaluator: Evaluator for non-script expressions
                (default: PropertyPathEvaluator())
            script_evaluators: Prefix to script evaluator mapping
                (default: {"jinja:": JinjaScriptEvaluator()})
        """
        self._path_evaluator = path_evaluator or PropertyPathEvaluator()
        if script_evaluators is None:
            script_evaluators = {DEFAULT_SCRIPT_PREFIX: JinjaScriptEvaluator()}
        self._script_evaluators = dict(script_evaluators)

    @property
    def script_prefixes(self) -> tuple[str, ...]:
        """Registered script markers, for TemplateParser(script_prefixes=...)."""
        return tuple(self._script_evaluators)

    def resolve(self, expression: str, context: Mapping[str, object]) -> EvaluationResult:
        """Evaluate expression against context."""
        stripped = expression.lstrip()
        for prefix, script_evaluator in self._script_evaluators.items():
            if stripped.startswith(prefix):
                return script_evaluator.execute(stripped[len(prefix) :], context)
        return self._path_evaluator.resolve(expression, context)
