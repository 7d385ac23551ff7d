"""FlexibleStringExpander - Main API for template expansion.

Python 3.13+. External dependencies: Babel (CLDR locale data), Jinja2
(scripted expressions).
"""

import logging
from collections.abc import Mapping
from datetime import tzinfo
from threading import Lock

from babel import Locale

from flexexpander.constants import MAX_DEPTH
from flexexpander.locale_utils import get_system_locale, get_system_time_zone, parse_time_zone
from flexexpander.syntax import CompiledTemplate

from .cache import TemplateCache, get_shared_cache
from .directives import DirectiveRegistry, get_shared_directives
from .evaluator import Evaluator, ExpressionEvaluator
from .resolver import ExpansionResult, TemplateResolver

__all__ = ["FlexibleStringExpander", "compile_template", "expand_string"]

logger = logging.getLogger(__name__)

# Lazily created evaluator shared by expanders that do not inject one
_shared_evaluator: ExpressionEvaluator | None = None
_shared_evaluator_lock = Lock()


def _get_shared_evaluator() -> ExpressionEvaluator:
    global _shared_evaluator  # noqa: PLW0603
    if _shared_evaluator is None:
        with _shared_evaluator_lock:
            if _shared_evaluator is None:
                _shared_evaluator = ExpressionEvaluator()
    return _shared_evaluator


class FlexibleStringExpander:
    """A raw template string compiled once and expanded many times.

    Examples:
        >>> expander = FlexibleStringExpander("Hello ${user.name}!")
        >>> expander.expand_string({"user": {"name": "Ada"}})
        'Hello Ada!'

        >>> from decimal import Decimal
        >>> amount = FlexibleStringExpander("${amount}")
        >>> result = amount.expand({"amount": Decimal("1234567.89")}, locale="en_US")
        >>> result.value
        Decimal('1234567.89')
        >>> result.text
        '1,234,567.89'

        >>> price = FlexibleStringExpander("${amount?currency(${code})}")
        >>> price.expand_string({"amount": Decimal("1234567.89"), "code": "USD"}, locale="en_US")
        '$1,234,567.89'

    Scripts:
        Expressions prefixed with "jinja:" are Jinja2 expressions evaluated
        in a sandbox. When injecting an evaluator with other script
        prefixes, also inject a TemplateCache whose TemplateParser knows
        them, so that braces inside script bodies are balanced correctly.

    Thread Safety:
        Instances are immutable after construction and safe to share.
    """

    __slots__ = ("_resolver", "_template")

    def __init__(
        self,
        raw: str | None,
        *,
        use_cache: bool = True,
        cache: TemplateCache | None = None,
        evaluator: Evaluator | None = None,
        directives: DirectiveRegistry | None = None,
        locale: str | Locale | None = None,
        time_zone: str | tzinfo | None = None,
        max_depth: int = MAX_DEPTH,
    ) -> None:
        """Compile raw and configure expansion defaults.

        Args:
            raw: Raw template text (None behaves like "")
            use_cache: Share the compiled form through the cache (default: True)
            cache: Template cache (default: process-wide shared cache)
            evaluator: Expression evaluator (default: shared ExpressionEvaluator)
            directives: Directive registry (default: frozen built-in registry)
            locale: Default locale when the context names none
                (default: system locale)
            time_zone: Default time zone when the context names none
                (default: system time zone)
            max_depth: Maximum placeholder nesting during expansion
        """
        cache = cache if cache is not None else get_shared_cache()
        self._template = cache.get_compiled(raw, use_cache=use_cache)
        self._resolver = TemplateResolver(
            evaluator=evaluator if evaluator is not None else _get_shared_evaluator(),
            directives=directives if directives is not None else get_shared_directives(),
            default_locale=locale if locale is not None else get_system_locale(),
            default_time_zone=self._default_time_zone(time_zone),
            max_depth=max_depth,
        )

    @staticmethod
    def _default_time_zone(time_zone: str | tzinfo | None) -> tzinfo:
        if time_zone is None:
            return get_system_time_zone()
        if isinstance(time_zone, tzinfo):
            return time_zone
        try:
            return parse_time_zone(time_zone)
        except (LookupError, ValueError):
            logger.warning("Unknown default time zone '%s'; using system time zone", time_zone)
            return get_system_time_zone()

    @property
    def template(self) -> CompiledTemplate:
        """Compiled form of the raw text."""
        return self._template

    @property
    def original(self) -> str:
        """Raw template text ("" for None)."""
        return self._template.original

    def is_empty(self) -> bool:
        """True for a None or empty raw string."""
        return self._template.is_empty()

    def expand(
        self,
        context: Mapping[str, object] | None,
        time_zone: str | tzinfo | None = None,
        locale: str | Locale | None = None,
    ) -> ExpansionResult:
        """Expand against context.

        Args:
            context: Evaluation context. None returns the raw text unchanged.
            time_zone: Explicit time zone (overrides context and defaults)
            locale: Explicit locale (overrides context and defaults)

        Returns:
            ExpansionResult with the rendered text, the typed value of a
            single-placeholder template, and collected errors
        """
        return self._resolver.expand(self._template, context, time_zone, locale)

    def expand_string(
        self,
        context: Mapping[str, object] | None,
        time_zone: str | tzinfo | None = None,
        locale: str | Locale | None = None,
    ) -> str:
        """Expand against context and return only the rendered text."""
        return self.expand(context, time_zone, locale).text

    def __str__(self) -> str:
        return self._template.original

    def __repr__(self) -> str:
        return f"FlexibleStringExpander({self._template.original!r})"


def compile_template(raw: str | None, use_cache: bool = True) -> CompiledTemplate:
    """Compile raw through the shared cache.

    Example:
        >>> compile_template("${a}") is compile_template("${a}")
        True
    """
    return get_shared_cache().get_compiled(raw, use_cache=use_cache)


def expand_string(
    raw: str | None,
    context: Mapping[str, object] | None,
    time_zone: str | tzinfo | None = None,
    locale: str | Locale | None = None,
) -> str:
    """Expand raw against context in one call.

    Example:
        >>> expand_string("Hello ${var}${noSuchPath}", {"var": "World"})
        'Hello World'
    """
    return FlexibleStringExpander(raw).expand_string(context, time_zone, locale)
