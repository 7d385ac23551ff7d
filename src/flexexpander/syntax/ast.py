"""Compiled template node definitions.

A CompiledTemplate is an ordered, immutable tuple of nodes. Placeholder
expressions and directive arguments are themselves CompiledTemplates, so
"${a${b}c}" nests to arbitrary depth without any cyclic references.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from typing import TypeIs

__all__ = [
    "CompiledTemplate",
    "Constant",
    "FormatDirective",
    "Node",
    "Placeholder",
]


@dataclass(frozen=True, slots=True)
class Constant:
    """Literal text, emitted verbatim.

    Also holds escaped ("\\${...}") and unterminated ("${abc") spans exactly
    as they appeared in the raw string.
    """

    text: str

    @staticmethod
    def guard(node: object) -> TypeIs["Constant"]:
        """Type guard for Constant."""
        return isinstance(node, Constant)


@dataclass(frozen=True, slots=True)
class FormatDirective:
    """Named post-processing step attached to a placeholder.

    Example:
        ${amount?currency(${code})}
            name: "currency"
            args: (CompiledTemplate("${code}"),)
    """

    name: str
    args: tuple["CompiledTemplate", ...] = ()


@dataclass(frozen=True, slots=True)
class Placeholder:
    """Expression to resolve against the context at expansion time.

    Attributes:
        expression: Expression source as a nested template
        directive: Optional format directive ("?currency(USD)")
        quoted: True for the verbatim form "${'text ${nested}'}". The
            expanded interior is used as literal text and never evaluated.
    """

    expression: "CompiledTemplate"
    directive: FormatDirective | None = None
    quoted: bool = False

    @staticmethod
    def guard(node: object) -> TypeIs["Placeholder"]:
        """Type guard for Placeholder."""
        return isinstance(node, Placeholder)


type Node = Constant | Placeholder


@dataclass(frozen=True, slots=True)
class CompiledTemplate:
    """Immutable result of compiling a raw template string.

    Safe to share between threads and expansions. Structural equality
    holds between independent compilations of the same raw string.

    Attributes:
        original: Raw source text ("" for a None source)
        nodes: Ordered template nodes
    """

    original: str
    nodes: tuple[Node, ...]

    def is_empty(self) -> bool:
        """True when the template has no content at all."""
        return not self.nodes

    @property
    def is_single_placeholder(self) -> bool:
        """True when the whole template is one placeholder without a directive.

        Only such templates hand back the typed value of their expression.
        """
        if len(self.nodes) != 1:
            return False
        node = self.nodes[0]
        return isinstance(node, Placeholder) and node.directive is None

    def __str__(self) -> str:
        return self.original
