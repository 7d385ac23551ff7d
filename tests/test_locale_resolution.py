"""Locale context, locale/time zone fallback chain and system detection tests."""

import locale as locale_module
import logging
from datetime import UTC, date, datetime, time, tzinfo
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest
from babel import Locale

from flexexpander.locale_utils import (
    get_system_locale,
    get_system_time_zone,
    locale_code_of,
    normalize_locale,
    parse_time_zone,
)
from flexexpander.runtime.locale_context import LocaleContext
from flexexpander.runtime.locale_resolution import resolve_locale, resolve_time_zone

LOS_ANGELES = ZoneInfo("America/Los_Angeles")


class TestNormalizeLocale:
    """Locale code normalization."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("en-US", "en_US"),
            ("en_US", "en_US"),
            ("de_DE.UTF-8", "de_DE"),
            (" fr ", "fr"),
        ],
    )
    def test_normalize(self, raw: str, expected: str) -> None:
        """Hyphens become underscores and encodings are dropped."""
        assert normalize_locale(raw) == expected

    def test_locale_code_of_babel_locale(self) -> None:
        """Babel Locale objects give their POSIX code."""
        assert locale_code_of(Locale("fr", "CA")) == "fr_CA"


class TestParseTimeZone:
    """IANA time zone lookup."""

    def test_known(self) -> None:
        """Known names return tzinfo."""
        assert isinstance(parse_time_zone("America/Los_Angeles"), tzinfo)

    def test_unknown(self) -> None:
        """Unknown names raise LookupError."""
        with pytest.raises(LookupError):
            parse_time_zone("Mars/Olympus_Mons")


class TestSystemDefaults:
    """Process default detection."""

    def test_time_zone_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """TZ selects the time zone."""
        monkeypatch.setenv("TZ", "America/Los_Angeles")
        assert get_system_time_zone().utcoffset(datetime(2024, 1, 1)) == LOS_ANGELES.utcoffset(
            datetime(2024, 1, 1)
        )

    def test_bad_tz_env_falls_back(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        """An unknown TZ is logged and ignored."""
        monkeypatch.setenv("TZ", "Nowhere/Special")
        with caplog.at_level(logging.WARNING):
            assert isinstance(get_system_time_zone(), tzinfo)
        assert "Nowhere/Special" in caplog.text

    def test_system_locale_is_posix(self) -> None:
        """Detected locales never contain hyphens or encodings."""
        detected = get_system_locale()
        assert "-" not in detected
        assert "." not in detected

    def test_system_locale_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Pseudo-locales are skipped and LANG is normalized."""
        monkeypatch.setattr(locale_module, "getlocale", lambda: (None, None))
        monkeypatch.setenv("LC_ALL", "C.UTF-8")
        monkeypatch.delenv("LC_MESSAGES", raising=False)
        monkeypatch.setenv("LANG", "de_DE.UTF-8")
        assert get_system_locale() == "de_DE"

    def test_system_locale_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """en_US when nothing is configured."""
        monkeypatch.setattr(locale_module, "getlocale", lambda: ("C", None))
        for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
            monkeypatch.delenv(var, raising=False)
        assert get_system_locale() == "en_US"


class TestLocaleContext:
    """LocaleContext creation and formatting."""

    def test_create_is_cached(self) -> None:
        """Equivalent codes share one instance."""
        assert LocaleContext.create("en-US") is LocaleContext.create("en_US")
        assert LocaleContext.cache_size() == 1

    def test_unknown_locale_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        """Unknown locales use en_US rules and keep their code."""
        with caplog.at_level(logging.WARNING):
            ctx = LocaleContext.create("xx_YY")
        assert ctx.is_fallback
        assert ctx.locale_code == "xx_YY"
        assert str(ctx.babel_locale) == "en_US"
        assert "xx_YY" in caplog.text

    def test_babel_locale_input(self) -> None:
        """Babel Locale objects are accepted."""
        ctx = LocaleContext.create(Locale("de", "DE"))
        assert not ctx.is_fallback
        assert ctx.format_number(1234.5) == "1.234,5"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("text", "text"),
            (None, ""),
            (True, "true"),
            (False, "false"),
            (1234567, "1,234,567"),
            (Decimal("1234567.89"), "1,234,567.89"),
            (0.5, "0.5"),
            (date(2024, 2, 29), "2024-02-29"),
            (time(13, 5, 9), "13:05:09"),
            ([1, 2], "[1, 2]"),
        ],
    )
    def test_format_value(self, value: object, expected: str) -> None:
        """Default string forms."""
        assert LocaleContext.create("en_US").format_value(value, UTC) == expected

    def test_format_aware_datetime(self) -> None:
        """Aware datetimes convert to the time zone."""
        value = datetime(1970, 1, 15, 6, 56, 7, 890000, tzinfo=UTC)
        text = LocaleContext.create("en_US").format_value(value, LOS_ANGELES)
        assert text == "1970-01-14 22:56:07.890"

    def test_format_naive_datetime_as_utc(self) -> None:
        """Naive datetimes are taken as UTC."""
        value = datetime(2024, 7, 1, 12, 0, 0)
        text = LocaleContext.create("en_US").format_value(value, LOS_ANGELES)
        assert text == "2024-07-01 05:00:00.000"

    def test_format_currency(self) -> None:
        """Currency formatting follows CLDR."""
        ctx = LocaleContext.create("en_US")
        assert ctx.format_currency(Decimal("1234567.89"), "USD") == "$1,234,567.89"


class TestResolveLocale:
    """Locale fallback chain."""

    def test_explicit_wins(self) -> None:
        """Explicit argument first."""
        ctx = resolve_locale("fr_FR", {"locale": "de_DE"}, "en_US")
        assert ctx.locale_code == "fr_FR"

    def test_context_key(self) -> None:
        """context["locale"] second."""
        context = {"locale": "de_DE", "autoUserLogin": {"lastLocale": "fr_FR"}}
        assert resolve_locale(None, context, "en_US").locale_code == "de_DE"

    def test_user_login(self) -> None:
        """autoUserLogin.lastLocale third."""
        context = {"autoUserLogin": {"lastLocale": "fr_FR"}}
        assert resolve_locale(None, context, "en_US").locale_code == "fr_FR"

    def test_default(self) -> None:
        """Process default last."""
        assert resolve_locale(None, {}, "ja_JP").locale_code == "ja_JP"
        assert resolve_locale(None, None, "ja_JP").locale_code == "ja_JP"

    def test_babel_locale_in_context(self) -> None:
        """Babel Locale values are accepted from the context."""
        ctx = resolve_locale(None, {"locale": Locale("de", "DE")}, "en_US")
        assert ctx.locale_code == "de_DE"

    def test_unsupported_value_falls_to_default(self, caplog: pytest.LogCaptureFixture) -> None:
        """Non-locale values are ignored with a warning."""
        with caplog.at_level(logging.WARNING):
            ctx = resolve_locale(None, {"locale": 42}, "en_US")
        assert ctx.locale_code == "en_US"
        assert "42" in caplog.text

    def test_user_login_not_a_mapping(self) -> None:
        """A non-mapping autoUserLogin is skipped."""
        assert resolve_locale(None, {"autoUserLogin": "x"}, "en_US").locale_code == "en_US"


class TestResolveTimeZone:
    """Time zone fallback chain."""

    def test_explicit_wins(self) -> None:
        """Explicit argument first; tzinfo objects pass through."""
        assert resolve_time_zone(LOS_ANGELES, {"timeZone": "Asia/Tokyo"}, UTC) is LOS_ANGELES

    def test_context_key(self) -> None:
        """context["timeZone"] second."""
        context = {"timeZone": "Asia/Tokyo", "autoUserLogin": {"lastTimeZone": "Europe/Paris"}}
        assert str(resolve_time_zone(None, context, UTC)) == "Asia/Tokyo"

    def test_user_login(self) -> None:
        """autoUserLogin.lastTimeZone third."""
        context = {"autoUserLogin": {"lastTimeZone": "Europe/Paris"}}
        assert str(resolve_time_zone(None, context, UTC)) == "Europe/Paris"

    def test_default(self) -> None:
        """Process default last."""
        assert resolve_time_zone(None, {}, LOS_ANGELES) is LOS_ANGELES

    def test_unknown_name_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        """Unknown names log and use the default."""
        with caplog.at_level(logging.WARNING):
            assert resolve_time_zone("Nowhere/Special", {}, UTC) is UTC
        assert "Nowhere/Special" in caplog.text

    def test_unsupported_value(self) -> None:
        """Non-time-zone values use the default."""
        assert resolve_time_zone(None, {"timeZone": 3}, UTC) is UTC
