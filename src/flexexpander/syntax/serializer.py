"""Serialize compiled templates back to raw template syntax.

Compilation is information preserving, so serialize(parse(s)) == s for any
string. Useful for:
- Property-based testing (roundtrip: parse -> serialize)
- Building templates programmatically from nodes

Python 3.13+.
"""

from flexexpander.constants import (
    ARGUMENT_SEPARATOR,
    CLOSE_BRACKET,
    DIRECTIVE_MARKER,
    OPEN_BRACKET,
    QUOTE_CHAR,
)

from .ast import CompiledTemplate, Constant, FormatDirective, Node, Placeholder

__all__ = ["serialize"]


def serialize(template: CompiledTemplate) -> str:
    """Rebuild raw template text from nodes.

    Args:
        template: Compiled template (or a programmatically built one)

    Returns:
        Raw template source

    Example:
        >>> from flexexpander.syntax import parse
        >>> serialize(parse("a${b?currency(${c})}\\\\${d"))
        'a${b?currency(${c})}\\\\${d'
    """
    return "".join(_serialize_node(node) for node in template.nodes)


def _serialize_node(node: Node) -> str:
    match node:
        case Constant():
            return node.text
        case Placeholder():
            expression = serialize(node.expression)
            if node.quoted:
                expression = f"{QUOTE_CHAR}{expression}{QUOTE_CHAR}"
            directive = _serialize_directive(node.directive) if node.directive else ""
            return f"{OPEN_BRACKET}{expression}{directive}{CLOSE_BRACKET}"


def _serialize_directive(directive: FormatDirective) -> str:
    args = ARGUMENT_SEPARATOR.join(serialize(arg) for arg in directive.args)
    return f"{DIRECTIVE_MARKER}{directive.name}({args})"
