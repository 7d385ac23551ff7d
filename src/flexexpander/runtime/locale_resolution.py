"""Per-expansion locale and time zone selection.

Each expand call picks its locale and time zone from the first defined
source, in order:

1. the explicit argument
2. the reserved context key ("locale" / "timeZone")
3. the signed-in user's last choice
   (context["autoUserLogin"]["lastLocale"] / ["lastTimeZone"])
4. the process default

Python 3.13+.
"""

import logging
from collections.abc import Mapping
from datetime import tzinfo

from babel import Locale

from flexexpander.constants import (
    CONTEXT_LOCALE_KEY,
    CONTEXT_TIME_ZONE_KEY,
    CONTEXT_USER_LOGIN_KEY,
    USER_LOGIN_LOCALE_KEY,
    USER_LOGIN_TIME_ZONE_KEY,
)
from flexexpander.locale_utils import parse_time_zone

from .locale_context import LocaleContext

__all__ = ["resolve_locale", "resolve_time_zone"]

logger = logging.getLogger(__name__)

type LocaleLike = str | Locale
type TimeZoneLike = str | tzinfo


def _first_defined(
    explicit: object, context: Mapping[str, object] | None, key: str, login_key: str
) -> object:
    """Return the first non-None candidate from the lookup chain (excluding default)."""
    if explicit is not None:
        return explicit
    if context is None:
        return None
    value = context.get(key)
    if value is not None:
        return value
    user_login = context.get(CONTEXT_USER_LOGIN_KEY)
    if isinstance(user_login, Mapping):
        return user_login.get(login_key)
    return None


def resolve_locale(
    locale: LocaleLike | None,
    context: Mapping[str, object] | None,
    default: LocaleLike,
) -> LocaleContext:
    """Select the locale for one expansion.

    Args:
        locale: Explicit locale (highest priority)
        context: Evaluation context
        default: Process default locale

    Returns:
        LocaleContext. Unknown locale codes fall back to en_US rules with a
        warning logged by LocaleContext.create().

    Example:
        >>> resolve_locale(None, {"locale": "de_DE"}, "en_US").locale_code
        'de_DE'
        >>> ctx = {"autoUserLogin": {"lastLocale": "fr_FR"}}
        >>> resolve_locale(None, ctx, "en_US").locale_code
        'fr_FR'
    """
    candidate = _first_defined(locale, context, CONTEXT_LOCALE_KEY, USER_LOGIN_LOCALE_KEY)
    if isinstance(candidate, (str, Locale)) and str(candidate).strip():
        return LocaleContext.create(candidate)
    if candidate is not None:
        logger.warning("Ignoring unsupported locale value %r", candidate)
    return LocaleContext.create(default)


def resolve_time_zone(
    time_zone: TimeZoneLike | None,
    context: Mapping[str, object] | None,
    default: tzinfo,
) -> tzinfo:
    """Select the time zone for one expansion.

    Args:
        time_zone: Explicit time zone (highest priority)
        context: Evaluation context
        default: Process default time zone

    Returns:
        tzinfo. Unknown names fall back to default with a warning.
    """
    candidate = _first_defined(
        time_zone, context, CONTEXT_TIME_ZONE_KEY, USER_LOGIN_TIME_ZONE_KEY
    )
    match candidate:
        case None:
            return default
        case tzinfo():
            return candidate
        case str() if candidate.strip():
            try:
                return parse_time_zone(candidate)
            except (LookupError, ValueError):
                logger.warning("Unknown time zone '%s'; using %s", candidate, default)
                return default
        case _:
            logger.warning("Ignoring unsupported time zone value %r", candidate)
            return default
