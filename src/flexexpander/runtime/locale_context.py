"""Locale context for thread-safe, per-expansion formatting.

This module provides locale-aware formatting without global state mutation.
Uses Babel for CLDR-compliant number, date, and currency formatting.

Architecture:
    - LocaleContext: Immutable locale configuration container
    - Formatters use Babel (thread-safe, CLDR-based)
    - No dependency on Python's locale module (avoids global state)
    - Instances are cached per normalized locale code (LRU)

Python 3.13+. Uses Babel for i18n.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date, datetime, time, tzinfo
from decimal import Decimal, InvalidOperation
from threading import RLock
from typing import ClassVar

from babel import Locale, UnknownLocaleError
from babel import dates as babel_dates
from babel import numbers as babel_numbers

from flexexpander.constants import FALLBACK_LOCALE, MAX_LOCALE_CACHE_SIZE
from flexexpander.diagnostics import ErrorTemplate, FormatError
from flexexpander.locale_utils import locale_code_of

__all__ = ["LocaleContext"]

logger = logging.getLogger(__name__)

# Default string form of temporal values
_DATETIME_PATTERN = "yyyy-MM-dd HH:mm:ss.SSS"
_DATE_PATTERN = "yyyy-MM-dd"
_TIME_PATTERN = "HH:mm:ss"


@dataclass(frozen=True, slots=True)
class LocaleContext:
    """Immutable locale configuration for formatting operations.

    Use LocaleContext.create() factory to construct instances with proper
    validation. Direct construction via __init__ bypasses validation.

    Examples:
        >>> ctx = LocaleContext.create('en-US')
        >>> ctx.format_number(1234.5)
        '1,234.5'

        >>> ctx = LocaleContext.create('de-DE')
        >>> ctx.format_number(1234.5)
        '1.234,5'

        >>> # Invalid locales fall back to en_US with warning logged
        >>> ctx = LocaleContext.create('invalid-locale')
        >>> ctx.locale_code  # Original code preserved
        'invalid-locale'
        >>> ctx.is_fallback
        True

    Thread Safety:
        LocaleContext is immutable and thread-safe. Cache operations are
        protected by RLock.
    """

    _cache: ClassVar[OrderedDict[str, "LocaleContext"]] = OrderedDict()
    _cache_lock: ClassVar[RLock] = RLock()

    locale_code: str
    _babel_locale: Locale
    is_fallback: bool = False

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the locale context cache."""
        with cls._cache_lock:
            cls._cache.clear()

    @classmethod
    def cache_size(cls) -> int:
        """Get current number of cached LocaleContext instances."""
        with cls._cache_lock:
            return len(cls._cache)

    @classmethod
    def create(cls, locale: "str | Locale") -> "LocaleContext":
        """Create LocaleContext with graceful fallback for invalid locales.

        For unknown or invalid locales, logs a warning and falls back to
        en_US. This method always succeeds.

        Args:
            locale: Locale code (e.g., 'en-US', 'en_US') or Babel Locale

        Returns:
            LocaleContext instance. For unknown/invalid locales, uses en_US
            rules while preserving the original locale code for debugging.
        """
        if isinstance(locale, Locale):
            cache_key = locale_code = str(locale)
        else:
            locale_code = locale
            cache_key = locale_code_of(locale)

        with cls._cache_lock:
            if cache_key in cls._cache:
                cls._cache.move_to_end(cache_key)
                return cls._cache[cache_key]

        used_fallback = False
        if isinstance(locale, Locale):
            babel_locale = locale
        else:
            try:
                babel_locale = Locale.parse(cache_key)
            except UnknownLocaleError as e:
                logger.warning(
                    "Unknown locale '%s': %s. Falling back to %s", locale_code, e, FALLBACK_LOCALE
                )
                babel_locale = Locale.parse(FALLBACK_LOCALE)
                used_fallback = True
            except (ValueError, TypeError) as e:
                logger.warning(
                    "Invalid locale format '%s': %s. Falling back to %s",
                    locale_code,
                    e,
                    FALLBACK_LOCALE,
                )
                babel_locale = Locale.parse(FALLBACK_LOCALE)
                used_fallback = True

        ctx = cls(locale_code=locale_code, _babel_locale=babel_locale, is_fallback=used_fallback)

        # Double-check: another thread may have inserted meanwhile
        with cls._cache_lock:
            if cache_key in cls._cache:
                return cls._cache[cache_key]
            if len(cls._cache) >= MAX_LOCALE_CACHE_SIZE:
                cls._cache.popitem(last=False)
            cls._cache[cache_key] = ctx
            return ctx

    @property
    def babel_locale(self) -> Locale:
        """Pre-validated Babel Locale object for this context."""
        return self._babel_locale

    def format_number(self, value: int | float | Decimal) -> str:
        """Format number with the locale's decimal pattern.

        Uses the CLDR standard decimal pattern (grouping, up to three
        fraction digits).

        Examples:
            >>> LocaleContext.create('en-US').format_number(Decimal("1234567.89"))
            '1,234,567.89'
            >>> LocaleContext.create('de-DE').format_number(1234.5)
            '1.234,5'

        Raises:
            FormatError: If Babel cannot format the value
        """
        try:
            return str(babel_numbers.format_decimal(value, locale=self.babel_locale))
        except (ValueError, TypeError, InvalidOperation, AttributeError, KeyError) as e:
            raise FormatError(ErrorTemplate.formatting_failed(repr(value), str(e))) from e

    def format_currency(self, value: int | float | Decimal, currency: str) -> str:
        """Format a monetary amount with locale-specific rules.

        Currency-specific decimal places come from CLDR (JPY: 0, BHD: 3,
        most others: 2).

        Examples:
            >>> LocaleContext.create('en-US').format_currency(Decimal("1234567.89"), 'USD')
            '$1,234,567.89'
            >>> LocaleContext.create('ja-JP').format_currency(12345, 'JPY')
            '￥12,345'

        Raises:
            FormatError: If Babel cannot format the value
        """
        try:
            return str(
                babel_numbers.format_currency(
                    value,
                    currency,
                    locale=self.babel_locale,
                    currency_digits=True,
                    format_type="standard",
                )
            )
        except (ValueError, TypeError, InvalidOperation, AttributeError, KeyError) as e:
            raise FormatError(ErrorTemplate.formatting_failed(repr(value), str(e))) from e

    def format_datetime(self, value: datetime | date | time, time_zone: tzinfo) -> str:
        """Render a temporal value in its default string form.

        datetime values are converted to time_zone (naive values are taken
        as UTC) and rendered as "yyyy-MM-dd HH:mm:ss.SSS"; dates render as
        "yyyy-MM-dd" and times as "HH:mm:ss".

        Raises:
            FormatError: If Babel cannot format the value
        """
        try:
            match value:
                case datetime():
                    return str(
                        babel_dates.format_datetime(
                            value,
                            format=_DATETIME_PATTERN,
                            tzinfo=time_zone,
                            locale=self.babel_locale,
                        )
                    )
                case date():
                    return str(
                        babel_dates.format_date(
                            value, format=_DATE_PATTERN, locale=self.babel_locale
                        )
                    )
                case _:
                    return str(
                        babel_dates.format_time(
                            value, format=_TIME_PATTERN, locale=self.babel_locale
                        )
                    )
        except (ValueError, OverflowError, AttributeError, KeyError) as e:
            raise FormatError(ErrorTemplate.formatting_failed(repr(value), str(e))) from e

    def format_value(self, value: object, time_zone: tzinfo) -> str:
        """Render a resolved value in its natural string form.

        - str: returned as-is
        - None: empty string
        - bool: "true"/"false"
        - int/float/Decimal: locale decimal format
        - datetime/date/time: see format_datetime()
        - anything else: str(value)

        Never raises for formatter failures: falls back to str(value).
        """
        if isinstance(value, str):
            return value
        if value is None:
            return ""
        # Check bool BEFORE int (bool is subclass of int in Python)
        if isinstance(value, bool):
            return "true" if value else "false"
        try:
            if isinstance(value, (int, float, Decimal)):
                return self.format_number(value)
            if isinstance(value, (datetime, date, time)):
                return self.format_datetime(value, time_zone)
        except FormatError as e:
            logger.warning("Falling back to str() for %s: %s", type(value).__name__, e)
        return str(value)
