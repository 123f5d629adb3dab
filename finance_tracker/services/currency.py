"""
Currency Service

Single source of truth for:
1. Resolving the display currency from a locale tag
2. Converting between USD (storage) and the display currency
3. Formatting amounts for display

DESIGN DECISION: Exchange rates are a fixed table, not a live feed.
Rates are approximate and never refreshed.

DESIGN DECISION: Unknown currency codes fail OPEN. A code missing from the
rate table converts at 1.0 and displays with "$". Nothing in this module
raises for finite amounts.

The locale is an explicit argument. The service holds a default language
tag (from settings) and every operation accepts an override, so results
never depend on ambient platform state.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from types import MappingProxyType
from typing import Mapping, Optional, Union

import structlog


logger = structlog.get_logger(__name__)

Amount = Union[Decimal, int, float, str]

BASE_CURRENCY = "USD"

# Rate per 1 USD (approximate)
EXCHANGE_RATES: Mapping[str, Decimal] = MappingProxyType({
    "USD": Decimal("1.0"),
    "MXN": Decimal("17.0"),
    "JPY": Decimal("150.0"),
    "SAR": Decimal("3.75"),
})

# Primary language subtag -> display currency
LANGUAGE_CURRENCIES: Mapping[str, str] = MappingProxyType({
    "es": "MXN",
    "ja": "JPY",
    "ar": "SAR",
})

CURRENCY_SYMBOLS: Mapping[str, str] = MappingProxyType({
    "USD": "$",
    "MXN": "$",
    "JPY": "¥",
    "SAR": "﷼",
})

# Glyphs used by format(); MXN is disambiguated from USD here
FORMAT_SYMBOLS: Mapping[str, str] = MappingProxyType({
    "USD": "$",
    "MXN": "MX$",
    "JPY": "¥",
    "SAR": "﷼",
})

DEFAULT_SYMBOL = "$"
DEFAULT_LANGUAGE = "en"
ZERO_DECIMAL_CURRENCIES = frozenset({"JPY"})


def primary_language(locale: Optional[str]) -> str:
    """
    Reduce a locale tag to its primary language subtag.

    "es-MX" -> "es", "ja_JP" -> "ja", "" -> "en"
    """
    if not locale:
        return DEFAULT_LANGUAGE
    tag = locale.strip().replace("_", "-").split("-", 1)[0].lower()
    return tag or DEFAULT_LANGUAGE


def _to_decimal(amount: Amount) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, float):
        # Go through str so 0.1 stays 0.1
        return Decimal(str(amount))
    return Decimal(amount)


class CurrencyService:
    """
    Converts and formats amounts for a display locale.

    Construct once at application start and pass it to consumers.
    Tests construct their own instance with whatever locale they need.
    """

    def __init__(
        self,
        locale: str = DEFAULT_LANGUAGE,
        rates: Optional[Mapping[str, Decimal]] = None,
    ):
        """
        Args:
            locale: Default language tag for calls that don't pass one
            rates: Rate table override (rate per 1 USD). Must map USD to
                   exactly 1 and every rate must be positive.
        """
        table = {code: _to_decimal(rate) for code, rate in (rates or EXCHANGE_RATES).items()}

        if table.get(BASE_CURRENCY) != Decimal(1):
            raise ValueError("Exchange rate table must map USD to exactly 1.0")
        for code, rate in table.items():
            if not rate.is_finite() or rate <= 0:
                raise ValueError(f"Exchange rate for {code} must be positive, got {rate}")

        self._locale = locale
        self._rates: Mapping[str, Decimal] = MappingProxyType(table)

    @property
    def locale(self) -> str:
        return self._locale

    @property
    def rates(self) -> Mapping[str, Decimal]:
        """Read-only view of the rate table."""
        return self._rates

    def supported_codes(self) -> list[str]:
        return sorted(self._rates)

    def rate_for(self, code: str) -> Decimal:
        """Rate per 1 USD for a code. Unknown codes fail open to 1.0."""
        rate = self._rates.get(code)
        if rate is None:
            logger.debug("exchange_rate_missing", currency=code, fallback="1.0")
            return Decimal("1.0")
        return rate

    # -------------------------------------------------------------------------
    # Locale resolution
    # -------------------------------------------------------------------------

    def current_currency_code(self, locale: Optional[str] = None) -> str:
        """Display currency for a locale: es->MXN, ja->JPY, ar->SAR, else USD."""
        language = primary_language(locale if locale is not None else self._locale)
        return LANGUAGE_CURRENCIES.get(language, BASE_CURRENCY)

    def currency_symbol(self, locale: Optional[str] = None) -> str:
        return CURRENCY_SYMBOLS.get(self.current_currency_code(locale), DEFAULT_SYMBOL)

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def convert_from_usd(self, amount_usd: Amount, locale: Optional[str] = None) -> Decimal:
        """USD -> display currency."""
        rate = self.rate_for(self.current_currency_code(locale))
        return _to_decimal(amount_usd) * rate

    def convert_to_usd(self, amount_local: Amount, locale: Optional[str] = None) -> Decimal:
        """
        Display currency -> USD (for saving).

        Rates are validated positive at construction, so no zero check here.
        """
        rate = self.rate_for(self.current_currency_code(locale))
        return _to_decimal(amount_local) / rate

    # -------------------------------------------------------------------------
    # Formatting
    # -------------------------------------------------------------------------

    def fraction_digits(self, locale: Optional[str] = None) -> int:
        return 0 if self.current_currency_code(locale) in ZERO_DECIMAL_CURRENCIES else 2

    def format(self, amount: Amount, locale: Optional[str] = None) -> str:
        """
        Format an amount already expressed in the display currency.

        "$1,234.50", "-$50.00", "¥1,500", "MX$170.00", "﷼37.50".
        Falls back to "{symbol}{amount}" if the amount cannot be rendered.
        """
        code = self.current_currency_code(locale)
        glyph = FORMAT_SYMBOLS.get(code, DEFAULT_SYMBOL)
        digits = self.fraction_digits(locale)

        try:
            value = _to_decimal(amount)
            if not value.is_finite():
                raise InvalidOperation(f"cannot format non-finite amount {value}")
            quantum = Decimal(1).scaleb(-digits)
            with localcontext() as ctx:
                # Room for every integer digit plus the fraction
                ctx.prec = max(ctx.prec, value.adjusted() + digits + 2)
                rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)
                sign = "-" if rounded < 0 else ""
                return f"{sign}{glyph}{abs(rounded):,.{digits}f}"
        except (InvalidOperation, ValueError, TypeError) as e:
            logger.warning("currency_format_failed", amount=str(amount), currency=code, error=str(e))
            return f"{self.currency_symbol(locale)}{amount}"

    def format_usd_amount(self, amount_usd: Amount, locale: Optional[str] = None) -> str:
        """Convert a stored USD amount and format it for display."""
        try:
            local = self.convert_from_usd(amount_usd, locale)
        except (InvalidOperation, ValueError, TypeError):
            local = amount_usd
        return self.format(local, locale)

    def get_exchange_rate_info(self, locale: Optional[str] = None) -> str:
        """
        Human-readable rate, e.g. "1 USD = 17 MXN" or "1 USD = 3.75 SAR".

        Rates of 10 or more are shown without decimals.
        """
        code = self.current_currency_code(locale)
        rate = self.rate_for(code)
        if rate == 1:
            return "1 USD = 1 USD"
        shown = f"{rate:.0f}" if rate >= 10 else f"{rate:.2f}"
        return f"1 USD = {shown} {code}"
