"""Hypothesis strategies for flexexpander property-based testing.

Usage:
    from tests.strategies import grammar_text, template_chaos_source
    from tests.strategies.templates import amounts, contexts
"""

from .templates import (
    GRAMMAR_CHARS,
    PLAIN_CHARS,
    amounts,
    context_values,
    contexts,
    grammar_text,
    identifiers,
    nested_placeholder_source,
    plain_text,
    template_chaos_source,
)

__all__ = [
    "GRAMMAR_CHARS",
    "PLAIN_CHARS",
    "amounts",
    "context_values",
    "contexts",
    "grammar_text",
    "identifiers",
    "nested_placeholder_source",
    "plain_text",
    "template_chaos_source",
]
