"""Currency pair catalogue and pip conventions.

JPY 建てペアは 0.01 = 1 pip、それ以外は 0.0001 = 1 pip.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_CURRENCY_PAIR = "USD/JPY"

JPY_PIPS_MULTIPLIER = 100
STANDARD_PIPS_MULTIPLIER = 10_000


@dataclass(frozen=True)
class CurrencyPair:
    code: str  # "USD/JPY"
    base: str
    quote: str

    @property
    def is_jpy_quote(self) -> bool:
        return self.quote == "JPY"


CURRENCY_PAIRS: list[CurrencyPair] = [
    CurrencyPair("USD/JPY", "USD", "JPY"),
    CurrencyPair("EUR/JPY", "EUR", "JPY"),
    CurrencyPair("GBP/JPY", "GBP", "JPY"),
    CurrencyPair("AUD/JPY", "AUD", "JPY"),
    CurrencyPair("EUR/USD", "EUR", "USD"),
    CurrencyPair("GBP/USD", "GBP", "USD"),
    CurrencyPair("AUD/USD", "AUD", "USD"),
]


def parse_pair(symbol: str | None) -> CurrencyPair:
    """Parse "USD/JPY", "USDJPY" or "usd_jpy" into a CurrencyPair.

    Empty symbols fall back to USD/JPY. Symbols that are not six letters
    keep their text as code and use the last three letters as quote.
    """
    if not symbol or not symbol.strip():
        symbol = DEFAULT_CURRENCY_PAIR
    letters = "".join(ch for ch in symbol.upper() if ch.isalpha())
    if len(letters) == 6:
        base, quote = letters[:3], letters[3:]
        return CurrencyPair(f"{base}/{quote}", base, quote)
    return CurrencyPair(symbol.strip(), letters[:-3], letters[-3:])


def pip_multiplier(symbol: str | None) -> int:
    """Price units → pips multiplier (100 for JPY quote, else 10000)."""
    if parse_pair(symbol).is_jpy_quote:
        return JPY_PIPS_MULTIPLIER
    return STANDARD_PIPS_MULTIPLIER


def pip_size(symbol: str | None) -> float:
    """Price increment of one pip."""
    return 1 / pip_multiplier(symbol)


def price_decimals(symbol: str | None) -> int:
    """Quote precision used for display (3 for JPY pairs, 5 otherwise)."""
    return 3 if parse_pair(symbol).is_jpy_quote else 5
