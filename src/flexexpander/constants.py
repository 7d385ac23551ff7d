"""Shared constants for flexexpander.

This module provides centralized configuration constants used across
syntax and runtime packages. Placing constants here avoids circular
imports and provides a single source of truth.

Constants are grouped by domain:
- Delimiters: Placeholder grammar tokens
- Depth limits: Recursion protection for parsing and expansion
- Cache limits: Memory bounds for caching subsystems
- Context keys: Reserved evaluation context entries

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Delimiters
    "OPEN_BRACKET",
    "CLOSE_BRACKET",
    "ESCAPE_CHAR",
    "QUOTE_CHAR",
    "DIRECTIVE_MARKER",
    "ARGUMENT_SEPARATOR",
    "DEFAULT_SCRIPT_PREFIX",
    # Depth limits
    "MAX_DEPTH",
    # Cache limits
    "DEFAULT_CACHE_SIZE",
    "MAX_LOCALE_CACHE_SIZE",
    "MAX_SCRIPT_CACHE_SIZE",
    # Context keys
    "CONTEXT_LOCALE_KEY",
    "CONTEXT_TIME_ZONE_KEY",
    "CONTEXT_USER_LOGIN_KEY",
    "USER_LOGIN_LOCALE_KEY",
    "USER_LOGIN_TIME_ZONE_KEY",
    # Defaults
    "FALLBACK_LOCALE",
    "FALLBACK_TIME_ZONE",
]

# ============================================================================
# DELIMITERS
# ============================================================================

# Placeholder introducer and terminator: "${expression}"
OPEN_BRACKET: str = "${"
CLOSE_BRACKET: str = "}"

# A backslash directly before "${" suppresses placeholder recognition.
ESCAPE_CHAR: str = "\\"

# "${'literal ${nested}'}" renders its interior without evaluating it.
QUOTE_CHAR: str = "'"

# "${value?currency(USD)}" attaches a format directive to a placeholder.
DIRECTIVE_MARKER: str = "?"
ARGUMENT_SEPARATOR: str = ","

# Expressions starting with this marker are routed to the script evaluator.
DEFAULT_SCRIPT_PREFIX: str = "jinja:"

# ============================================================================
# DEPTH LIMITS
# ============================================================================

# Maximum placeholder nesting depth for parsing and expansion.
# Nesting is bounded by input length; this limit only guards against
# pathological inputs such as "${" * 10_000. Placeholders nested deeper
# than this are kept as literal text.
MAX_DEPTH: int = 100

# ============================================================================
# CACHE LIMITS
# ============================================================================

# Default maximum number of compiled templates kept by TemplateCache.
DEFAULT_CACHE_SIZE: int = 10_000

# Maximum number of LocaleContext instances kept alive.
MAX_LOCALE_CACHE_SIZE: int = 128

# Maximum number of compiled script expressions memoized per evaluator.
MAX_SCRIPT_CACHE_SIZE: int = 512

# ============================================================================
# CONTEXT KEYS
# ============================================================================

# Reserved keys read from the evaluation context for locale/time zone fallback.
CONTEXT_LOCALE_KEY: str = "locale"
CONTEXT_TIME_ZONE_KEY: str = "timeZone"
CONTEXT_USER_LOGIN_KEY: str = "autoUserLogin"
USER_LOGIN_LOCALE_KEY: str = "lastLocale"
USER_LOGIN_TIME_ZONE_KEY: str = "lastTimeZone"

# ============================================================================
# DEFAULTS
# ============================================================================

# Used when neither the caller nor the environment supplies a usable value.
FALLBACK_LOCALE: str = "en_US"
FALLBACK_TIME_ZONE: str = "UTC"
