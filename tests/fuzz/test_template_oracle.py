"""Oracle and state machine fuzzing for template compilation and expansion.

Differential tests compare FlexibleStringExpander against a naive reference
renderer on templates built from plain text and "${name}" placeholders, for
which the expected output is plain concatenation. The cache state machine
compares TemplateCache against a simple LRU model.

Run with:
    pytest -m fuzz tests/fuzz/test_template_oracle.py -v

Python 3.13+.
"""

from __future__ import annotations

from collections import OrderedDict
from datetime import UTC

import pytest
from hypothesis import event, given
from hypothesis import strategies as st
from hypothesis.stateful import RuleBasedStateMachine, initialize, invariant, rule

from flexexpander import FlexibleStringExpander, parse_template, serialize_template
from flexexpander.runtime.cache import TemplateCache
from flexexpander.runtime.cache_config import CacheConfig
from tests.strategies import (
    contexts,
    grammar_text,
    identifiers,
    nested_placeholder_source,
    plain_text,
    template_chaos_source,
)

# Mark entire module as fuzz tests (excluded from normal test runs)
pytestmark = pytest.mark.fuzz

type Segment = tuple[str, str]


def _render_reference(segments: list[Segment], context: dict[str, str]) -> str:
    """Naive renderer: text verbatim, names looked up, missing names empty."""
    parts = []
    for kind, value in segments:
        parts.append(context.get(value, "") if kind == "name" else value)
    return "".join(parts)


def _source_of(segments: list[Segment]) -> str:
    return "".join(f"${{{value}}}" if kind == "name" else value for kind, value in segments)


segments_strategy = st.lists(
    st.one_of(
        st.tuples(st.just("text"), plain_text),
        st.tuples(st.just("name"), identifiers),
    ),
    max_size=8,
)


def _expander(source: str) -> FlexibleStringExpander:
    return FlexibleStringExpander(source, cache=TemplateCache(), locale="en_US", time_zone=UTC)


class TestDifferentialExpansion:
    """Expansion agrees with the reference renderer."""

    @given(
        segments=segments_strategy,
        values=st.dictionaries(identifiers, plain_text, max_size=6),
    )
    def test_matches_reference(self, segments: list[Segment], values: dict[str, str]) -> None:
        """Plain text plus string placeholders render by concatenation."""
        names = [value for kind, value in segments if kind == "name"]
        event(f"placeholders={min(len(names), 3)}")
        source = _source_of(segments)
        context = {name: values.get(name, name.upper()) for name in names[::2]}

        result = _expander(source).expand(context)

        assert result.text == _render_reference(segments, context)
        missing = {name for name in names if name not in context}
        event(f"missing={bool(missing)}")
        if not missing:
            assert result.errors == ()


class TestExpansionRobustness:
    """Expansion never raises on malformed input."""

    @given(source=template_chaos_source(), context=contexts)
    def test_chaos_never_raises(self, source: str, context: dict[str, object]) -> None:
        """Malformed templates always expand to a string."""
        result = _expander(source).expand(context)
        assert isinstance(result.text, str)

    @given(source=grammar_text, context=contexts)
    def test_arbitrary_text_never_raises(self, source: str, context: dict[str, object]) -> None:
        """Delimiter-dense text always expands and round-trips."""
        assert isinstance(_expander(source).expand_string(context), str)
        assert serialize_template(parse_template(source)) == source

    @given(source=grammar_text)
    def test_none_context_returns_original(self, source: str) -> None:
        """A None context renders the raw text unchanged."""
        assert _expander(source).expand_string(None) == source

    @given(source=nested_placeholder_source(max_depth=20))
    def test_nested_missing_names_render_empty(self, source: str) -> None:
        """Every level fails against an empty context and renders empty."""
        assert parse_template(source).is_single_placeholder
        result = _expander(source).expand({})
        assert result.text == ""
        assert len(result.errors) == source.count("${")


# ============================================================================
# CACHE STATE MACHINE
# ============================================================================


class TemplateCacheStateMachine(RuleBasedStateMachine):
    """TemplateCache behaves like a bounded LRU mapping.

    Invariants:
    - Cached keys and their recency order match the model
    - Size never exceeds maxsize
    """

    def __init__(self) -> None:
        super().__init__()
        self.cache = TemplateCache(config=CacheConfig(size=4))
        self.model: OrderedDict[str, object] = OrderedDict()

    @initialize()
    def reset(self) -> None:
        """Start from an empty cache."""
        self.cache.clear()
        self.model.clear()

    @rule(name=st.sampled_from(["a", "b", "c", "d", "e", "f"]))
    def compile(self, name: str) -> None:
        """Compile a template and mirror the LRU bookkeeping."""
        raw = f"${{{name}}}"
        compiled = self.cache.get_compiled(raw)
        if raw in self.model:
            assert compiled is self.model[raw]
            self.model.move_to_end(raw)
        else:
            if len(self.model) >= 4:
                self.model.popitem(last=False)
            self.model[raw] = compiled

    @rule()
    def clear(self) -> None:
        """Clearing empties both."""
        self.cache.clear()
        self.model.clear()

    @invariant()
    def same_contents(self) -> None:
        """Cache membership matches the model."""
        assert len(self.cache) == len(self.model)
        for raw in self.model:
            assert raw in self.cache
        assert len(self.cache) <= self.cache.maxsize


TestTemplateCacheStateMachine = TemplateCacheStateMachine.TestCase
