"""Serializer tests for programmatically built templates."""

from flexexpander.syntax import (
    EMPTY_TEMPLATE,
    CompiledTemplate,
    Constant,
    FormatDirective,
    Placeholder,
    parse,
    serialize,
)


def _text(text: str) -> CompiledTemplate:
    return CompiledTemplate(original=text, nodes=(Constant(text),))


class TestSerializeNodes:
    """Each node kind serializes to its raw syntax."""

    def test_empty(self) -> None:
        """Empty template serializes to an empty string."""
        assert serialize(EMPTY_TEMPLATE) == ""

    def test_placeholder(self) -> None:
        """Placeholder wraps its expression in ${...}."""
        template = CompiledTemplate(
            original="", nodes=(Constant("Hi "), Placeholder(_text("name")))
        )
        assert serialize(template) == "Hi ${name}"

    def test_quoted_placeholder(self) -> None:
        """Quoted placeholders get their quotes back."""
        node = Placeholder(_text("literal"), quoted=True)
        assert serialize(CompiledTemplate(original="", nodes=(node,))) == "${'literal'}"

    def test_directive_arguments(self) -> None:
        """Directive arguments are joined with commas."""
        directive = FormatDirective(name="fmt", args=(_text("a"), _text("b")))
        node = Placeholder(_text("x"), directive=directive)
        assert serialize(CompiledTemplate(original="", nodes=(node,))) == "${x?fmt(a,b)}"

    def test_directive_without_arguments(self) -> None:
        """No arguments serializes as empty parentheses."""
        node = Placeholder(EMPTY_TEMPLATE, directive=FormatDirective(name="currency"))
        assert serialize(CompiledTemplate(original="", nodes=(node,))) == "${?currency()}"

    def test_built_template_compiles_back_to_same_nodes(self) -> None:
        """Serializing then compiling a built template recovers its nodes."""
        inner = parse("${code}")
        node = Placeholder(
            _text("amount"), directive=FormatDirective(name="currency", args=(inner,))
        )
        built = CompiledTemplate(original="", nodes=(Constant("Total: "), node))
        source = serialize(built)
        assert source == "Total: ${amount?currency(${code})}"
        assert parse(source).nodes == built.nodes
