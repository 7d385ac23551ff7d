"""Template syntax package.

Provides the lenient compiler, compiled template node types and the
serializer. Separate from runtime so templates can be inspected and
rewritten without an evaluation context.

Python 3.13+.
"""

from .ast import CompiledTemplate, Constant, FormatDirective, Node, Placeholder
from .parser import EMPTY_TEMPLATE, TemplateParser
from .serializer import serialize

__all__ = [
    "EMPTY_TEMPLATE",
    "CompiledTemplate",
    "Constant",
    "FormatDirective",
    "Node",
    "Placeholder",
    "TemplateParser",
    "parse",
    "serialize",
]


def parse(source: str | None) -> CompiledTemplate:
    """Compile template source without caching.

    Convenience function for TemplateParser().parse().

    Args:
        source: Raw template text (None compiles to an empty template)

    Returns:
        CompiledTemplate

    Example:
        >>> from flexexpander.syntax import parse
        >>> parse("Hello ${name}").nodes[0].text
        'Hello '
    """
    parser = TemplateParser()
    return parser.parse(source)
