"""Custom exceptions for the currency units library.

Every error raised by fxunits derives from FxUnitsError so callers can
catch the whole family at once.
"""


class FxUnitsError(Exception):
    """Base exception for all fxunits errors."""


class InvalidCurrencyCode(FxUnitsError):
    """Raised when a string is not a well-formed alphabetic currency code."""


class InvalidRate(FxUnitsError):
    """Raised when an exchange rate is not a strictly positive number."""


class NotACurrency(FxUnitsError):
    """Raised when a unit taking part in a conversion is not a registered currency."""


class RateUnavailable(FxUnitsError):
    """Raised when the market holds no rate or chain for the requested conversion."""


class InvalidMode(FxUnitsError):
    """Raised when a conversion mode is not one of 1, -1, 2, -2."""


class CurrencyRegistrationError(FxUnitsError):
    """Raised when a currency dimension or unit cannot be registered."""


class SnapshotError(FxUnitsError):
    """Raised when a rate snapshot is missing, unreadable or malformed."""
