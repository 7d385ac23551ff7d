"""Format directive registry and built-in directives.

A directive post-processes the value of a placeholder:

    ${amount?currency(${currencyCode})}

Directive callables receive the resolved value, the expanded argument
strings, the LocaleContext and the time zone chosen for this expansion, and
return the rendered text. They raise FormatError when the value or
arguments are unusable.

Python 3.13+. Uses Babel for currency validation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from datetime import tzinfo
from decimal import Decimal, InvalidOperation
from threading import Lock

from babel import numbers as babel_numbers

from flexexpander.diagnostics import ErrorTemplate, FormatError

from .locale_context import LocaleContext

__all__ = [
    "Directive",
    "DirectiveRegistry",
    "create_default_directives",
    "currency_directive",
    "get_shared_directives",
]

logger = logging.getLogger(__name__)

type Directive = Callable[[object, Sequence[str], LocaleContext, tzinfo], str]


class DirectiveRegistry:
    """Maps directive names to directive callables.

    Supports dict-like introspection (iteration, len, "in").

    Example:
        >>> registry = DirectiveRegistry()
        >>> registry.register("upper", lambda value, args, locale, tz: str(value).upper())
        >>> "upper" in registry
        True
        >>> registry.freeze()
        >>> registry.frozen
        True
    """

    __slots__ = ("_directives", "_frozen")

    def __init__(self) -> None:
        """Initialize empty directive registry."""
        self._directives: dict[str, Directive] = {}
        self._frozen = False

    def register(self, name: str, directive: Directive) -> None:
        """Register a directive under name, replacing any previous one.

        Raises:
            TypeError: If the registry is frozen
        """
        if self._frozen:
            msg = "Cannot register directives on a frozen registry; use copy()"
            raise TypeError(msg)
        self._directives[name] = directive

    def get(self, name: str) -> Directive | None:
        """Return the directive registered under name, or None."""
        return self._directives.get(name)

    def call(
        self,
        name: str,
        value: object,
        args: Sequence[str],
        locale: LocaleContext,
        time_zone: tzinfo,
    ) -> str:
        """Apply a directive.

        Raises:
            FormatError: If the directive is unknown, rejects its input, or
                raises any other exception (MemoryError propagates)
        """
        directive = self._directives.get(name)
        if directive is None:
            raise FormatError(ErrorTemplate.directive_not_found(name))
        try:
            return directive(value, args, locale, time_zone)
        except FormatError:
            raise
        except MemoryError:
            raise
        except Exception as e:  # noqa: BLE001 - directives are third-party code
            raise FormatError(ErrorTemplate.directive_failed(name, str(e))) from e

    def freeze(self) -> None:
        """Reject further registrations."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        """True once freeze() has been called."""
        return self._frozen

    def copy(self) -> DirectiveRegistry:
        """Return an unfrozen copy with the same directives."""
        clone = DirectiveRegistry()
        clone._directives = dict(self._directives)
        return clone

    def __iter__(self) -> Iterator[str]:
        return iter(self._directives)

    def __len__(self) -> int:
        return len(self._directives)

    def __contains__(self, name: object) -> bool:
        return name in self._directives

    def __repr__(self) -> str:
        return f"DirectiveRegistry(directives={sorted(self._directives)!r}, frozen={self._frozen})"


def _to_amount(value: object) -> int | float | Decimal:
    """Coerce a directive value to a number Babel can format."""
    # bool is an int subclass but not an amount
    if isinstance(value, bool):
        raise FormatError(ErrorTemplate.type_mismatch("currency", "number", "bool"))
    if isinstance(value, (int, float, Decimal)):
        return value
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except InvalidOperation:
            pass
    raise FormatError(ErrorTemplate.type_mismatch("currency", "number", type(value).__name__))


def currency_directive(
    value: object, args: Sequence[str], locale: LocaleContext, time_zone: tzinfo
) -> str:
    """Format value as a monetary amount: ${amount?currency(USD)}.

    The first argument is an ISO 4217 currency code (case-insensitive).
    Decimal places follow the currency (JPY: 0, BHD: 3, most others: 2) and
    symbol placement follows the locale.

    Raises:
        FormatError: Missing or unknown currency code, or a value that is
            not a number or numeric string
    """
    if not args or not args[0]:
        raise FormatError(ErrorTemplate.argument_required("currency", "code"))
    code = args[0].upper()
    if not babel_numbers.is_currency(code):
        raise FormatError(ErrorTemplate.currency_code_invalid(args[0]))
    return locale.format_currency(_to_amount(value), code)


def create_default_directives() -> DirectiveRegistry:
    """Create a new, unfrozen registry holding the built-in directives.

    Built-ins: currency
    """
    registry = DirectiveRegistry()
    registry.register("currency", currency_directive)
    return registry


# Lazily created frozen default registry
_SHARED_DIRECTIVES: DirectiveRegistry | None = None
_SHARED_DIRECTIVES_LOCK = Lock()


def get_shared_directives() -> DirectiveRegistry:
    """Get a shared, frozen DirectiveRegistry with the built-in directives.

    Calling register() on the returned registry raises TypeError; use
    copy() or create_default_directives() to add custom directives.
    """
    global _SHARED_DIRECTIVES  # noqa: PLW0603
    if _SHARED_DIRECTIVES is None:
        with _SHARED_DIRECTIVES_LOCK:
            if _SHARED_DIRECTIVES is None:
                registry = create_default_directives()
                registry.freeze()
                logger.debug("Created shared directive registry: %s", list(registry))
                _SHARED_DIRECTIVES = registry
    return _SHARED_DIRECTIVES
