"""Locale and time zone utilities.

Centralizes locale format normalization and process default detection.
Provides canonical locale handling to ensure consistent cache keys and lookups.

Python 3.13+.
"""

from __future__ import annotations

import functools
import logging
import os
from datetime import tzinfo

from babel import Locale
from babel.dates import LOCALTZ, get_timezone

from flexexpander.constants import FALLBACK_LOCALE, FALLBACK_TIME_ZONE

__all__ = [
    "get_system_locale",
    "get_system_time_zone",
    "locale_code_of",
    "normalize_locale",
    "parse_time_zone",
]

logger = logging.getLogger(__name__)


def normalize_locale(locale_code: str) -> str:
    """Convert BCP-47 locale code to POSIX format for Babel.

    BCP-47 uses hyphens (en-US), while Babel/POSIX uses underscores (en_US).
    Encoding suffixes such as ".UTF-8" are dropped.

    Args:
        locale_code: BCP-47 or POSIX locale code (e.g., "en-US", "pt_BR.UTF-8")

    Returns:
        POSIX-formatted locale code (e.g., "en_US", "pt_BR")

    Example:
        >>> normalize_locale("en-US")
        'en_US'
        >>> normalize_locale("de_DE.UTF-8")
        'de_DE'
        >>> normalize_locale("en")  # Already normalized
        'en'
    """
    return locale_code.strip().split(".")[0].replace("-", "_")


def locale_code_of(locale: str | Locale) -> str:
    """Return the POSIX locale code for a locale code or Babel Locale.

    Example:
        >>> locale_code_of(Locale("fr", "CA"))
        'fr_CA'
        >>> locale_code_of("fr-CA")
        'fr_CA'
    """
    if isinstance(locale, Locale):
        return str(locale)
    return normalize_locale(locale)


@functools.lru_cache(maxsize=128)
def parse_time_zone(name: str) -> tzinfo:
    """Look up a time zone by IANA name.

    Cached: time zone objects are immutable and lookups hit the zoneinfo
    database.

    Args:
        name: IANA time zone name (e.g., "America/Los_Angeles", "UTC")

    Returns:
        tzinfo instance

    Raises:
        LookupError: If the name is unknown
    """
    return get_timezone(name.strip())


def get_system_locale() -> str:
    """Detect system locale from OS and environment variables.

    Detection order:
    1. Python locale.getlocale() (OS-level locale)
    2. LC_ALL environment variable (overrides all)
    3. LC_MESSAGES environment variable (for message catalogs)
    4. LANG environment variable (default locale)
    5. en_US

    Normalizes the result to POSIX format for Babel compatibility.
    Filters out "C" and "POSIX" pseudo-locales.

    Returns:
        Detected locale code in POSIX format.
    """
    import locale as locale_module  # noqa: PLC0415

    try:
        system_locale, _ = locale_module.getlocale()
        if system_locale and system_locale not in ("C", "POSIX"):
            return normalize_locale(system_locale)
    except (ValueError, AttributeError):
        pass

    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(var)
        if value and normalize_locale(value) not in ("C", "POSIX", ""):
            return normalize_locale(value)

    return FALLBACK_LOCALE


def get_system_time_zone() -> tzinfo:
    """Detect the process time zone.

    Detection order:
    1. TZ environment variable (IANA name)
    2. Babel's LOCALTZ (derived from the OS configuration)
    3. UTC

    Returns:
        tzinfo instance
    """
    name = os.environ.get("TZ")
    if name:
        try:
            return parse_time_zone(name.lstrip(":"))
        except LookupError:
            logger.warning("Unknown time zone in TZ environment variable: '%s'", name)

    if LOCALTZ is not None:
        return LOCALTZ
    return parse_time_zone(FALLBACK_TIME_ZONE)
