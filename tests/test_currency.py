"""
Tests for the CurrencyService

Locale is always passed explicitly, so nothing here depends on the
machine's language settings.
"""

from decimal import Decimal

import pytest

from finance_tracker.services.currency import (
    EXCHANGE_RATES,
    CurrencyService,
    primary_language,
)


LOCALES = ["en", "es", "ja", "ar"]


class TestRateTable:
    """Tests for the fixed exchange-rate table."""

    def test_usd_rate_is_exactly_one(self):
        assert EXCHANGE_RATES["USD"] == 1.0
        assert CurrencyService().rates["USD"] == Decimal(1)

    def test_all_rates_positive(self):
        for code, rate in EXCHANGE_RATES.items():
            assert rate > 0, code

    def test_rate_table_is_read_only(self):
        service = CurrencyService()
        with pytest.raises(TypeError):
            service.rates["EUR"] = Decimal("0.9")

    def test_supported_codes(self):
        assert CurrencyService().supported_codes() == ["JPY", "MXN", "SAR", "USD"]

    def test_rejects_table_without_unit_usd(self):
        with pytest.raises(ValueError):
            CurrencyService(rates={"USD": Decimal("2"), "JPY": Decimal("150")})

    def test_rejects_zero_rate(self):
        with pytest.raises(ValueError):
            CurrencyService(rates={"USD": Decimal("1"), "MXN": Decimal("0")})


class TestLocaleMapping:
    """Tests for language tag -> currency resolution."""

    @pytest.mark.parametrize(
        "locale,expected",
        [
            ("en", "USD"),
            ("es", "MXN"),
            ("ja", "JPY"),
            ("ar", "SAR"),
            ("fr", "USD"),
            ("de", "USD"),
            ("es-MX", "MXN"),
            ("ja_JP", "JPY"),
            ("AR", "SAR"),
        ],
    )
    def test_currency_code_for_locale(self, locale, expected):
        assert CurrencyService().current_currency_code(locale) == expected

    def test_default_locale_used_when_none_passed(self):
        assert CurrencyService(locale="ja").current_currency_code() == "JPY"

    def test_explicit_locale_overrides_default(self):
        assert CurrencyService(locale="ja").current_currency_code("es") == "MXN"

    def test_primary_language(self):
        assert primary_language("es-MX") == "es"
        assert primary_language(" ja_JP ") == "ja"
        assert primary_language("") == "en"
        assert primary_language(None) == "en"

    @pytest.mark.parametrize(
        "locale,symbol",
        [("en", "$"), ("es", "$"), ("ja", "¥"), ("ar", "﷼"), ("it", "$")],
    )
    def test_currency_symbol(self, locale, symbol):
        assert CurrencyService().currency_symbol(locale) == symbol


class TestConversion:
    """Tests for USD <-> display currency conversion."""

    @pytest.mark.parametrize("locale", LOCALES)
    @pytest.mark.parametrize("amount", ["0", "0.01", "100", "1000000"])
    def test_round_trip_from_usd(self, locale, amount):
        service = CurrencyService()
        original = Decimal(amount)
        back = service.convert_to_usd(service.convert_from_usd(original, locale), locale)
        assert abs(back - original) < Decimal("0.01")

    @pytest.mark.parametrize("locale", LOCALES)
    def test_round_trip_from_local(self, locale):
        service = CurrencyService()
        original = Decimal("100")
        back = service.convert_from_usd(service.convert_to_usd(original, locale), locale)
        assert abs(back - original) < Decimal("0.01")

    def test_convert_from_usd(self):
        service = CurrencyService()
        assert service.convert_from_usd(Decimal("10"), "es") == Decimal("170")
        assert service.convert_from_usd(Decimal("10"), "ar") == Decimal("37.5")
        assert service.convert_from_usd(Decimal("10"), "en") == Decimal("10")

    def test_accepts_int_and_float(self):
        service = CurrencyService()
        assert service.convert_from_usd(2, "ja") == Decimal("300")
        assert service.convert_from_usd(0.1, "es") == Decimal("1.7")

    def test_unknown_code_fails_open(self):
        # JPY is missing from this table, so Japanese converts at 1.0
        service = CurrencyService(locale="ja", rates={"USD": Decimal("1.0")})
        assert service.current_currency_code() == "JPY"
        assert service.rate_for("JPY") == Decimal("1.0")
        assert service.convert_from_usd(Decimal("10")) == Decimal("10")
        assert service.convert_to_usd(Decimal("10")) == Decimal("10")
        assert service.get_exchange_rate_info() == "1 USD = 1 USD"


class TestFormatting:
    """Tests for display formatting."""

    @pytest.mark.parametrize("locale", LOCALES)
    @pytest.mark.parametrize("amount", ["0", "-50", "999999.99"])
    def test_format_not_empty(self, locale, amount):
        assert CurrencyService().format(Decimal(amount), locale)

    def test_format_usd(self):
        service = CurrencyService()
        assert service.format(Decimal("1234.5"), "en") == "$1,234.50"
        assert service.format(Decimal("0"), "en") == "$0.00"
        assert service.format(Decimal("999999.99"), "en") == "$999,999.99"

    def test_format_negative(self):
        assert CurrencyService().format(Decimal("-50"), "en") == "-$50.00"

    def test_format_jpy_has_no_fraction_digits(self):
        service = CurrencyService()
        assert service.format(Decimal("1000"), "ja") == "¥1,000"
        assert service.format(Decimal("1234.56"), "ja") == "¥1,235"
        assert service.fraction_digits("ja") == 0

    def test_format_mxn_is_disambiguated(self):
        assert CurrencyService().format(Decimal("170"), "es") == "MX$170.00"

    def test_format_sar(self):
        assert CurrencyService().format(Decimal("37.5"), "ar") == "﷼37.50"

    def test_format_rounds_half_up(self):
        assert CurrencyService().format(Decimal("0.005"), "en") == "$0.01"

    def test_format_large_amounts(self):
        service = CurrencyService()
        assert service.format(Decimal("1e30"), "en") == "$1,000,000,000,000,000,000,000,000,000,000.00"
        assert service.format(Decimal("-1e30"), "ja") == "-¥1,000,000,000,000,000,000,000,000,000,000"
        assert service.format(Decimal("12345678901234567890123456789.125"), "es") == (
            "MX$12,345,678,901,234,567,890,123,456,789.13"
        )

    def test_format_falls_back_for_non_finite(self):
        service = CurrencyService()
        assert service.format(Decimal("Infinity"), "en") == "$Infinity"
        assert service.format(Decimal("NaN"), "ja") == "¥NaN"

    def test_format_usd_amount_converts_first(self):
        assert CurrencyService().format_usd_amount(Decimal("10"), "ja") == "¥1,500"


class TestExchangeRateInfo:
    """Tests for the human-readable rate line."""

    @pytest.mark.parametrize(
        "locale,expected",
        [
            ("en", "1 USD = 1 USD"),
            ("es", "1 USD = 17 MXN"),
            ("ja", "1 USD = 150 JPY"),
            ("ar", "1 USD = 3.75 SAR"),
        ],
    )
    def test_exchange_rate_info(self, locale, expected):
        assert CurrencyService().get_exchange_rate_info(locale) == expected


class TestJapaneseScenario:
    """End-to-end check for a Japanese-locale user."""

    def test_japanese_locale(self):
        service = CurrencyService(locale="ja")

        assert service.current_currency_code() == "JPY"
        assert service.currency_symbol() == "¥"

        formatted = service.format(Decimal("1000"))
        assert "." not in formatted

        assert service.convert_from_usd(Decimal("10")) == Decimal("1500")
        assert service.convert_to_usd(Decimal("1500")) == Decimal("10")
