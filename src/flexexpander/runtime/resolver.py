"""Template resolver: renders compiled templates against a context.

Walks CompiledTemplate nodes left to right. Placeholder expressions are
expanded first (so "${a${b}c}" resolves b before evaluating "aXc"), then
handed to the Evaluator. Failures never abort the render: the placeholder
contributes an empty string, the error is logged and collected.

Python 3.13+. Indirect dependency: Babel (via LocaleContext).

Thread Safety:
    Expansion state is passed explicitly via ExpansionContext, making the
    resolver fully reentrant. Each expand call creates its own context.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import tzinfo

from babel import Locale

from flexexpander.constants import MAX_DEPTH
from flexexpander.core import DepthGuard, DepthLimitExceededError
from flexexpander.diagnostics import (
    ErrorTemplate,
    EvaluationError,
    ExpanderError,
    FormatError,
)
from flexexpander.syntax import CompiledTemplate, Constant, FormatDirective, Placeholder

from .directives import DirectiveRegistry
from .evaluator import Evaluator
from .locale_context import LocaleContext
from .locale_resolution import resolve_locale, resolve_time_zone

__all__ = ["ExpansionContext", "ExpansionResult", "TemplateResolver"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExpansionResult:
    """Outcome of one expand call.

    Attributes:
        text: Rendered string (never None)
        value: Typed value for single-placeholder templates, else None
        errors: Failures collected during expansion (already logged)
    """

    text: str
    value: object = None
    errors: tuple[ExpanderError, ...] = ()

    def __str__(self) -> str:
        return self.text


@dataclass(slots=True)
class ExpansionContext:
    """Explicit state for one expansion.

    Attributes:
        context: Caller-owned evaluation context (read only)
        locale: Locale selected for this expansion
        time_zone: Time zone selected for this expansion
        errors: Collected failures
        guard: Nesting depth guard
    """

    context: Mapping[str, object]
    locale: LocaleContext
    time_zone: tzinfo
    errors: list[ExpanderError] = field(default_factory=list)
    guard: DepthGuard = field(default_factory=DepthGuard)

    def record(self, error: ExpanderError) -> None:
        """Collect a failure."""
        self.errors.append(error)


def _describe(error: ExpanderError) -> str:
    return str(error.diagnostic) if error.diagnostic is not None else str(error)


class TemplateResolver:
    """Expands compiled templates.

    Collects errors instead of raising them: expand() always returns an
    ExpansionResult. Only MemoryError escapes.

    Example:
        >>> from flexexpander.syntax import parse
        >>> from flexexpander.locale_utils import parse_time_zone
        >>> from flexexpander.runtime.directives import get_shared_directives
        >>> from flexexpander.runtime.evaluator import ExpressionEvaluator
        >>> resolver = TemplateResolver(
        ...     evaluator=ExpressionEvaluator(),
        ...     directives=get_shared_directives(),
        ...     default_locale="en_US",
        ...     default_time_zone=parse_time_zone("UTC"),
        ... )
        >>> resolver.expand(parse("Hello ${name}"), {"name": "World"}).text
        'Hello World'
    """

    __slots__ = ("default_locale", "default_time_zone", "directives", "evaluator", "max_depth")

    def __init__(
        self,
        *,
        evaluator: Evaluator,
        directives: DirectiveRegistry,
        default_locale: str | Locale,
        default_time_zone: tzinfo,
        max_depth: int = MAX_DEPTH,
    ) -> None:
        """Initialize resolver.

        Args:
            evaluator: Expression evaluator
            directives: Format directive registry
            default_locale: Locale used when neither argument nor context has one
            default_time_zone: Time zone used when neither argument nor context has one
            max_depth: Maximum placeholder nesting during expansion
        """
        self.evaluator = evaluator
        self.directives = directives
        self.default_locale = default_locale
        self.default_time_zone = default_time_zone
        self.max_depth = max_depth

    def expand(
        self,
        template: CompiledTemplate,
        context: Mapping[str, object] | None,
        time_zone: str | tzinfo | None = None,
        locale: str | Locale | None = None,
    ) -> ExpansionResult:
        """Expand template against context.

        Args:
            template: Compiled template
            context: Evaluation context. None returns the raw text unchanged
                without evaluating anything.
            time_zone: Explicit time zone (overrides the context)
            locale: Explicit locale (overrides the context)

        Returns:
            ExpansionResult. value is set only when the whole template is a
            single placeholder without directive that resolved to non-None.
        """
        if context is None:
            return ExpansionResult(text=template.original)

        state = ExpansionContext(
            context=context,
            locale=resolve_locale(locale, context, self.default_locale),
            time_zone=resolve_time_zone(time_zone, context, self.default_time_zone),
            guard=DepthGuard(max_depth=self.max_depth),
        )

        if template.is_single_placeholder and Placeholder.guard(node := template.nodes[0]):
            value = self._resolve_value(node, state)
            text = self._to_text(value, state)
            return ExpansionResult(text=text, value=value, errors=tuple(state.errors))

        text = self._render(template, state)
        return ExpansionResult(text=text, errors=tuple(state.errors))

    def _render(self, template: CompiledTemplate, state: ExpansionContext) -> str:
        """Render template by walking nodes."""
        parts: list[str] = []
        for node in template.nodes:
            match node:
                case Constant():
                    parts.append(node.text)
                case Placeholder():
                    parts.append(self._render_placeholder(node, state))
        return "".join(parts)

    def _render_placeholder(self, node: Placeholder, state: ExpansionContext) -> str:
        value = self._resolve_value(node, state)
        if node.directive is None:
            return self._to_text(value, state)
        return self._apply_directive(node.directive, value, state)

    @staticmethod
    def _to_text(value: object, state: ExpansionContext) -> str:
        """Default string form of value; "" when its conversion raises."""
        try:
            return state.locale.format_value(value, state.time_zone)
        except MemoryError:
            raise
        except Exception as e:  # noqa: BLE001 - __str__ of context values is user code
            error = FormatError(ErrorTemplate.formatting_failed(type(value).__name__, str(e)))
            logger.warning("Failed to render %s: %s", type(value).__name__, _describe(error))
            state.record(error)
            return ""

    def _resolve_value(self, node: Placeholder, state: ExpansionContext) -> object:
        """Expand the expression sub-template, then evaluate it.

        Returns:
            Resolved value, or None on failure
        """
        try:
            with state.guard:
                expression = self._render(node.expression, state)
        except DepthLimitExceededError as e:
            logger.warning("Placeholder nesting too deep: %s", _describe(e))
            state.record(e)
            return None

        if node.quoted:
            return expression
        if not expression.strip():
            return None
        return self._evaluate(expression, state)

    def _evaluate(self, expression: str, state: ExpansionContext) -> object:
        """Call the evaluator with failure isolation."""
        try:
            result = self.evaluator.resolve(expression, state.context)
        except MemoryError:
            raise
        except Exception as e:  # noqa: BLE001 - evaluators are third-party code
            error = EvaluationError(
                ErrorTemplate.evaluator_failed(expression, type(e).__name__, str(e))
            )
            logger.warning("Evaluator raised for '%s': %s", expression, _describe(error))
            state.record(error)
            return None

        if result.error is not None:
            logger.warning("Failed to evaluate '%s': %s", expression, _describe(result.error))
            state.record(result.error)
            return None
        return result.value

    def _apply_directive(
        self, directive: FormatDirective, value: object, state: ExpansionContext
    ) -> str:
        args = tuple(self._render(arg, state).strip() for arg in directive.args)
        if value is None:
            return ""
        try:
            return self.directives.call(
                directive.name, value, args, state.locale, state.time_zone
            )
        except FormatError as e:
            logger.warning("Directive '%s' failed: %s", directive.name, _describe(e))
            state.record(e)
            return ""
