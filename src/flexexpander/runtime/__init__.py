"""Expansion runtime package.

Provides template caching, expression evaluation, format directives,
locale handling and the FlexibleStringExpander API.
Depends on syntax package for compiling.

Python 3.13+.
"""

from .cache import TemplateCache, get_shared_cache
from .cache_config import CacheConfig
from .directives import (
    DirectiveRegistry,
    create_default_directives,
    currency_directive,
    get_shared_directives,
)
from .evaluator import (
    EvaluationResult,
    Evaluator,
    ExpressionEvaluator,
    JinjaScriptEvaluator,
    PropertyPathEvaluator,
    ScriptEvaluator,
)
from .expander import FlexibleStringExpander, compile_template, expand_string
from .locale_context import LocaleContext
from .locale_resolution import resolve_locale, resolve_time_zone
from .resolver import ExpansionContext, ExpansionResult, TemplateResolver

__all__ = [
    "CacheConfig",
    "DirectiveRegistry",
    "EvaluationResult",
    "Evaluator",
    "ExpansionContext",
    "ExpansionResult",
    "ExpressionEvaluator",
    "FlexibleStringExpander",
    "JinjaScriptEvaluator",
    "LocaleContext",
    "PropertyPathEvaluator",
    "ScriptEvaluator",
    "TemplateCache",
    "TemplateResolver",
    "compile_template",
    "create_default_directives",
    "currency_directive",
    "expand_string",
    "get_shared_cache",
    "get_shared_directives",
    "resolve_locale",
    "resolve_time_zone",
]
