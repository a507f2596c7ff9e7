"""
Currency configuration and amount conversion.

Amounts are stored as integers in the database. The conversion multiplies
by 10^decimal_places, so CNY 136.78 is stored as 13678 and KRW 1000 as 1000.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Union

from ledgerstore.app.core.exceptions import UnknownCurrencyError

Amount = Union[int, float, Decimal, str]

DEFAULT_CURRENCY = "CNY"

FLAG_BASE_URL = "https://purecatamphetamine.github.io/country-flag-icons"


@dataclass(frozen=True)
class CurrencyConfig:
    """
    Static description of one supported currency.

    Attributes:
        code: ISO 4217 currency code
        symbol: Display symbol
        name: ISO 4217 currency name
        decimal_places: Minor units (the multiplier is 10^decimal_places)
        country_code: ISO 3166-1 alpha-2 code used for the flag
    """
    code: str
    symbol: str
    name: str
    decimal_places: int
    country_code: str

    @property
    def multiplier(self) -> int:
        return 10 ** self.decimal_places


CURRENCIES: Dict[str, CurrencyConfig] = {
    config.code: config
    for config in (
        CurrencyConfig("CNY", "¥", "Yuan Renminbi", 2, "CN"),
        CurrencyConfig("USD", "$", "US Dollar", 2, "US"),
        CurrencyConfig("EUR", "€", "Euro", 2, "EU"),
        CurrencyConfig("GBP", "£", "Pound Sterling", 2, "GB"),
        CurrencyConfig("JPY", "¥", "Yen", 0, "JP"),
        CurrencyConfig("KRW", "₩", "Won", 0, "KR"),
        CurrencyConfig("HKD", "HK$", "Hong Kong Dollar", 2, "HK"),
        CurrencyConfig("TWD", "NT$", "New Taiwan Dollar", 2, "TW"),
        CurrencyConfig("SGD", "S$", "Singapore Dollar", 2, "SG"),
        CurrencyConfig("AUD", "A$", "Australian Dollar", 2, "AU"),
        CurrencyConfig("CAD", "C$", "Canadian Dollar", 2, "CA"),
        CurrencyConfig("CHF", "Fr", "Swiss Franc", 2, "CH"),
        CurrencyConfig("INR", "₹", "Indian Rupee", 2, "IN"),
        CurrencyConfig("RUB", "₽", "Russian Ruble", 2, "RU"),
        CurrencyConfig("BRL", "R$", "Brazilian Real", 2, "BR"),
        CurrencyConfig("MXN", "Mex$", "Mexican Peso", 2, "MX"),
        CurrencyConfig("THB", "฿", "Baht", 2, "TH"),
        CurrencyConfig("MYR", "RM", "Malaysian Ringgit", 2, "MY"),
        CurrencyConfig("VND", "₫", "Dong", 0, "VN"),
        CurrencyConfig("PHP", "₱", "Philippine Peso", 2, "PH"),
    )
}


def get_currency(code: str) -> Optional[CurrencyConfig]:
    """Get currency configuration by code, or None if unknown."""
    return CURRENCIES.get(code)


def require_currency(code: str) -> CurrencyConfig:
    """
    Get currency configuration by code.

    Raises:
        UnknownCurrencyError: If the code is not registered
    """
    currency = CURRENCIES.get(code)
    if currency is None:
        raise UnknownCurrencyError(code)
    return currency


def get_currency_multiplier(code: str) -> int:
    """
    Get the storage multiplier for a currency.

    100 for CNY/USD (2 decimal places), 1 for KRW (0 decimal places).
    """
    return require_currency(code).multiplier


def _as_decimal(amount: Amount) -> Decimal:
    # str() gives the shortest repr of a float, so 10.005 becomes Decimal("10.005")
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))


def to_storage_amount(amount: Amount, code: str) -> int:
    """
    Convert a display amount to the integer stored in the database.

    Rounds half away from zero: 10.005 CNY -> 1001, 10.004 CNY -> 1000.

    Args:
        amount: The amount as displayed (e.g., 136.78)
        code: The currency code (e.g., 'CNY')

    Returns:
        The integer value for database storage (e.g., 13678)
    """
    currency = require_currency(code)
    scaled = _as_decimal(amount).scaleb(currency.decimal_places)
    return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def to_display_amount(storage_amount: int, code: str) -> Decimal:
    """
    Convert a stored integer amount back to its display value.

    Args:
        storage_amount: The integer value from database (e.g., 13678)
        code: The currency code (e.g., 'CNY')

    Returns:
        The exact display amount (e.g., Decimal('136.78')). The float
        136.78 is inexact, so ``Decimal('136.78') == 136.78`` is False; compare
        against a Decimal, or convert with float() first.
    """
    currency = require_currency(code)
    return Decimal(int(storage_amount)).scaleb(-currency.decimal_places)


def format_currency(amount: Amount, code: str) -> str:
    """
    Format a display amount with its currency symbol.

    '¥136.78' for CNY, '₩1000' for KRW (no decimal point).
    """
    currency = require_currency(code)
    exponent = Decimal(1).scaleb(-currency.decimal_places)
    fixed = _as_decimal(amount).quantize(exponent, rounding=ROUND_HALF_UP)
    return f"{currency.symbol}{fixed:f}"


def get_available_currency_codes() -> List[str]:
    """Get list of all available currency codes."""
    return list(CURRENCIES)


def get_currency_country_code(code: str) -> Optional[str]:
    """Get the country code used for a currency's flag, or None if unknown."""
    currency = CURRENCIES.get(code)
    return currency.country_code if currency else None


def has_currency_flag(code: str) -> bool:
    """Check if a flag icon is available for a currency."""
    return get_currency_country_code(code) is not None


def get_currency_flag_url(code: str, size: str = "3x2") -> Optional[str]:
    """
    Get the flag icon URL for a currency.

    Args:
        code: The ISO 4217 currency code
        size: The aspect ratio size ('3x2' or '1x1')

    Returns:
        The URL to the flag SVG, or None if not available
    """
    if size not in ("3x2", "1x1"):
        raise ValueError(f"Unsupported flag size: {size}")

    country_code = get_currency_country_code(code)
    if country_code is None:
        return None
    return f"{FLAG_BASE_URL}/{size}/{country_code}.svg"
