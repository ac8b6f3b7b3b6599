"""Currency as a physical dimension for pint quantities.

Each currency is registered as its own dimension with a reference unit,
so "1 EUR" is a typed quantity that pint will never silently turn into
USD. Crossing currencies goes through ``convert`` and an ExchangeMarket
holding the rates of one snapshot.
"""

from fxunits.codes import is_currency_code
from fxunits.conversion import convert, resolve_rate, uconvert
from fxunits.exceptions import (
    CurrencyRegistrationError,
    FxUnitsError,
    InvalidCurrencyCode,
    InvalidMode,
    InvalidRate,
    NotACurrency,
    RateUnavailable,
    SnapshotError,
)
from fxunits.market import ExchangeMarket, generate_exchange_market
from fxunits.models import AssetClass, ConversionMode, CurrencyInfo, CurrencyPair, Rate
from fxunits.units import CurrencyUnitRegistry, get_registry

__all__ = [
    "AssetClass",
    "ConversionMode",
    "CurrencyInfo",
    "CurrencyPair",
    "CurrencyRegistrationError",
    "CurrencyUnitRegistry",
    "ExchangeMarket",
    "FxUnitsError",
    "InvalidCurrencyCode",
    "InvalidMode",
    "InvalidRate",
    "NotACurrency",
    "Rate",
    "RateUnavailable",
    "SnapshotError",
    "convert",
    "generate_exchange_market",
    "get_registry",
    "is_currency_code",
    "resolve_rate",
    "uconvert",
]
