"""Lenient template compiler.

Turns a raw string into a CompiledTemplate with a single left-to-right scan
and an explicit brace-depth counter. The grammar never fails: malformed
nesting, escapes and directives degrade to literal text, so every input has
a valid compiled form that serializes back to the exact original string.

Grammar (informal):
    template     := (text | escaped | placeholder)*
    escaped      := "\\" "${" balanced "}"
    placeholder  := "${" body "}"
    body         := "'" template "'"
                  | SCRIPT_PREFIX balanced
                  | template ("?" NAME "(" args ")")?
    args         := template ("," template)*

Python 3.13+.
"""

import logging
import re
from collections.abc import Iterable

from flexexpander.constants import (
    ARGUMENT_SEPARATOR,
    CLOSE_BRACKET,
    DEFAULT_SCRIPT_PREFIX,
    DIRECTIVE_MARKER,
    ESCAPE_CHAR,
    MAX_DEPTH,
    OPEN_BRACKET,
    QUOTE_CHAR,
)
from flexexpander.core import DepthGuard, DepthLimitExceededError

from .ast import CompiledTemplate, Constant, FormatDirective, Node, Placeholder

__all__ = ["EMPTY_TEMPLATE", "TemplateParser"]

logger = logging.getLogger(__name__)

EMPTY_TEMPLATE = CompiledTemplate(original="", nodes=())

# Directive name directly followed by its opening parenthesis: "currency("
_DIRECTIVE_NAME = re.compile(r"([A-Za-z_][A-Za-z0-9_]*)\(")

_OPEN_LEN = len(OPEN_BRACKET)


class TemplateParser:
    """Compiles raw template strings into CompiledTemplate trees.

    Stateless between calls; one instance can be shared across threads.

    Args:
        script_prefixes: Expression markers whose bodies are scripts. Inside
            a script body bare "{" also opens a brace level, so scripts may
            contain balanced blocks, and no directive is recognized.
        max_depth: Maximum placeholder nesting. Deeper placeholders are kept
            as literal text.

    Example:
        >>> parser = TemplateParser()
        >>> template = parser.parse("Hello ${user.name}!")
        >>> [type(node).__name__ for node in template.nodes]
        ['Constant', 'Placeholder', 'Constant']
    """

    __slots__ = ("_max_depth", "_script_prefixes")

    def __init__(
        self,
        *,
        script_prefixes: Iterable[str] = (DEFAULT_SCRIPT_PREFIX,),
        max_depth: int = MAX_DEPTH,
    ) -> None:
        self._script_prefixes = tuple(script_prefixes)
        self._max_depth = max_depth

    @property
    def script_prefixes(self) -> tuple[str, ...]:
        """Registered script markers."""
        return self._script_prefixes

    def parse(self, source: str | None) -> CompiledTemplate:
        """Compile source text.

        Args:
            source: Raw template text. None compiles to an empty template.

        Returns:
            CompiledTemplate whose nodes serialize back to source
        """
        if not source:
            return EMPTY_TEMPLATE
        guard = DepthGuard(max_depth=self._max_depth)
        return self._compile(source, 0, len(source), guard)

    def _compile(self, source: str, start: int, end: int, guard: DepthGuard) -> CompiledTemplate:
        """Compile source[start:end]."""
        nodes: list[Node] = []
        literal: list[str] = []
        pos = start

        while pos < end:
            open_idx = source.find(OPEN_BRACKET, pos, end)
            if open_idx == -1:
                literal.append(source[pos:end])
                break

            close_idx = self._find_close(source, open_idx, end)
            if close_idx == -1:
                # Unterminated: the rest of the span is literal text
                literal.append(source[pos:end])
                break

            if open_idx > start and source[open_idx - 1] == ESCAPE_CHAR:
                literal.append(source[pos : close_idx + 1])
                pos = close_idx + 1
                continue

            placeholder = self._parse_placeholder(source, open_idx + _OPEN_LEN, close_idx, guard)
            if placeholder is None:
                literal.append(source[pos : close_idx + 1])
            else:
                literal.append(source[pos:open_idx])
                self._flush(literal, nodes)
                nodes.append(placeholder)
            pos = close_idx + 1

        self._flush(literal, nodes)
        return CompiledTemplate(original=source[start:end], nodes=tuple(nodes))

    @staticmethod
    def _flush(literal: list[str], nodes: list[Node]) -> None:
        """Move buffered literal text into a single Constant node."""
        text = "".join(literal)
        literal.clear()
        if text:
            nodes.append(Constant(text))

    def _is_script(self, source: str, start: int, end: int) -> bool:
        """Check whether the placeholder body at start begins with a script prefix."""
        while start < end and source[start].isspace():
            start += 1
        return any(source.startswith(prefix, start, end) for prefix in self._script_prefixes)

    def _find_close(self, source: str, open_idx: int, end: int) -> int:
        """Find the "}" matching the "${" at open_idx.

        Returns:
            Index of the closing bracket, or -1 if the span is unterminated
        """
        body_start = open_idx + _OPEN_LEN
        script = self._is_script(source, body_start, end)
        depth = 1
        i = body_start
        while i < end:
            if source.startswith(OPEN_BRACKET, i, end):
                depth += 1
                i += _OPEN_LEN
                continue
            char = source[i]
            if char == "{" and script:
                depth += 1
            elif char == CLOSE_BRACKET:
                depth -= 1
                if depth == 0:
                    return i
            i += 1
        return -1

    def _parse_placeholder(
        self, source: str, start: int, end: int, guard: DepthGuard
    ) -> Placeholder | None:
        """Build a Placeholder from the body source[start:end].

        Returns:
            Placeholder, or None when the body must stay literal text
            (malformed directive or nesting too deep)
        """
        try:
            with guard:
                return self._build_placeholder(source, start, end, guard)
        except DepthLimitExceededError:
            logger.debug("Placeholder at offset %d nested too deep; kept as text", start)
            return None

    def _build_placeholder(
        self, source: str, start: int, end: int, guard: DepthGuard
    ) -> Placeholder | None:
        if self._is_quoted(source, start, end):
            return Placeholder(self._compile(source, start + 1, end - 1, guard), quoted=True)

        if self._is_script(source, start, end):
            return Placeholder(self._compile(source, start, end, guard))

        directive: FormatDirective | None = None
        expression_end = end
        found = self._find_directive(source, start, end)
        if found is not None:
            marker_idx, paren_idx, name = found
            if end - 1 <= paren_idx or source[end - 1] != ")":
                return None
            args = tuple(
                self._compile(source, arg_start, arg_end, guard)
                for arg_start, arg_end in self._split_args(source, paren_idx + 1, end - 1)
            )
            directive = FormatDirective(name=name, args=args)
            expression_end = marker_idx

        if self._is_quoted(source, start, expression_end):
            expression = self._compile(source, start + 1, expression_end - 1, guard)
            return Placeholder(expression, directive=directive, quoted=True)
        return Placeholder(self._compile(source, start, expression_end, guard), directive=directive)

    @staticmethod
    def _is_quoted(source: str, start: int, end: int) -> bool:
        return end - start >= 2 and source[start] == QUOTE_CHAR and source[end - 1] == QUOTE_CHAR

    @staticmethod
    def _find_directive(source: str, start: int, end: int) -> tuple[int, int, str] | None:
        """Locate the first top-level "?name(" in source[start:end].

        Returns:
            (marker index, "(" index, directive name) or None
        """
        depth = 0
        i = start
        while i < end:
            if source.startswith(OPEN_BRACKET, i, end):
                depth += 1
                i += _OPEN_LEN
                continue
            char = source[i]
            if char == CLOSE_BRACKET and depth:
                depth -= 1
            elif char == DIRECTIVE_MARKER and depth == 0:
                match = _DIRECTIVE_NAME.match(source, i + 1, end)
                if match is not None:
                    return i, match.end() - 1, match.group(1)
            i += 1
        return None

    @staticmethod
    def _split_args(source: str, start: int, end: int) -> list[tuple[int, int]]:
        """Split source[start:end] at top-level commas.

        An empty span means no arguments at all.
        """
        if start == end:
            return []
        spans: list[tuple[int, int]] = []
        depth = 0
        arg_start = start
        i = start
        while i < end:
            if source.startswith(OPEN_BRACKET, i, end):
                depth += 1
                i += _OPEN_LEN
                continue
            char = source[i]
            if char == CLOSE_BRACKET and depth:
                depth -= 1
            elif char == ARGUMENT_SEPARATOR and depth == 0:
                spans.append((arg_start, i))
                arg_start = i + 1
            i += 1
        spans.append((arg_start, end))
        return spans
