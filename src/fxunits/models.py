"""Shared data models for currency pairs, rates and the currency catalog.

Rates keep the number they were built with; arithmetic goes through
Rate.as_decimal() so that money is never computed in float.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, IntEnum

from fxunits.codes import is_currency_code
from fxunits.exceptions import InvalidCurrencyCode, InvalidRate


class AssetClass(str, Enum):
    """Catalog group a currency-like unit belongs to."""

    CASH = "cash"
    BOND = "bond"
    COMMODITY = "commodity"


class ConversionMode(IntEnum):
    """Rate-resolution strategy used by the conversion engine."""

    DIRECT = 1  # rate(source, target)
    INVERSE = -1  # 1 / rate(target, source)
    CHAINED = 2  # rate(source, v) * rate(v, target)
    INVERSE_CHAINED = -2  # 1 / (rate(target, v) * rate(v, source))


@dataclass(frozen=True)
class CurrencyInfo:
    """Catalog record describing one currency unit."""

    code: str
    name: str
    asset_class: AssetClass = AssetClass.CASH

    def __post_init__(self) -> None:
        if not is_currency_code(self.code):
            raise InvalidCurrencyCode(f"Invalid currency code: {self.code!r}")


@dataclass(frozen=True)
class CurrencyPair:
    """Ordered (base, quote) pair of currency codes.

    The rate attached to a pair states how many units of quote buy one
    unit of base. Ordering matters: (EUR, USD) != (USD, EUR).
    """

    base: str
    quote: str

    def __post_init__(self) -> None:
        for code in (self.base, self.quote):
            if not is_currency_code(code):
                raise InvalidCurrencyCode(f"Invalid currency code: {code!r}")

    def inverted(self) -> "CurrencyPair":
        return CurrencyPair(self.quote, self.base)

    def __str__(self) -> str:
        return f"{self.base}/{self.quote}"


@dataclass(frozen=True)
class Rate:
    """Strictly positive exchange rate (quote units per one base unit).

    Integers, floats and Decimals are all accepted and stored unchanged.
    """

    value: int | float | Decimal

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float, Decimal)):
            raise InvalidRate(f"Rate must be a number, got {self.value!r}")
        if isinstance(self.value, Decimal) and self.value.is_nan():
            raise InvalidRate(f"Rate must be positive, got {self.value}")
        # Written as "not > 0" so float NaN is rejected too
        if not self.value > 0:
            raise InvalidRate(f"Rate must be positive, got {self.value}")

    def as_decimal(self) -> Decimal:
        """Return the rate as a Decimal (floats via their shortest repr)."""
        if isinstance(self.value, Decimal):
            return self.value
        if isinstance(self.value, int):
            return Decimal(self.value)
        return Decimal(str(self.value))
