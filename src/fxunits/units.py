"""Currency dimensions and units on top of a pint unit registry.

Every currency gets its own base dimension ``[<CODE>_currency]`` and a
reference unit ``<CODE>`` of scale 1. Because each currency is a separate
dimension, pint refuses to convert EUR into USD on its own; crossing
currencies is only possible through fxunits.conversion and an explicit
ExchangeMarket, since rates change over time.

The process-wide registry is created and populated exactly once by
get_registry(). Registration must complete before any conversion runs;
after that the registry is only read.
"""

import threading
from collections.abc import Iterable
from decimal import Decimal
from typing import Any

import pint

from fxunits.catalog import iter_catalog
from fxunits.codes import is_currency_code
from fxunits.config import RegistrySettings
from fxunits.exceptions import CurrencyRegistrationError, InvalidCurrencyCode, NotACurrency
from fxunits.logging import get_logger
from fxunits.models import AssetClass, CurrencyInfo

logger = get_logger(__name__)

CURRENCY_DIMENSION_SUFFIX = "_currency"


def currency_dimension(code: str) -> str:
    """Return the pint dimension name for a currency code, e.g. ``[EUR_currency]``."""
    return f"[{code}{CURRENCY_DIMENSION_SUFFIX}]"


def code_from_dimension(name: str) -> str | None:
    """Extract the currency code from a dimension name.

    Returns None when the name is not a currency dimension.
    """
    stripped = name.strip("[]")
    if not stripped.endswith(CURRENCY_DIMENSION_SUFFIX):
        return None
    code = stripped[: -len(CURRENCY_DIMENSION_SUFFIX)]
    return code if is_currency_code(code) else None


class CurrencyUnitRegistry:
    """A pint UnitRegistry extended with one dimension per currency.

    Quantities use Decimal for non-integer magnitudes so that money
    never passes through float arithmetic.

    Args:
        ureg: Existing pint registry to extend. A fresh registry with
            pint's default definitions is created when omitted.
    """

    def __init__(self, ureg: pint.UnitRegistry | None = None) -> None:
        self._ureg = ureg if ureg is not None else pint.UnitRegistry(non_int_type=Decimal)
        self._currencies: dict[str, CurrencyInfo] = {}
        self._lock = threading.Lock()

    @property
    def ureg(self) -> pint.UnitRegistry:
        return self._ureg

    @property
    def Quantity(self) -> type:  # noqa: N802 - mirrors pint's attribute name
        return self._ureg.Quantity

    def register(
        self,
        code: str,
        name: str = "",
        asset_class: AssetClass = AssetClass.CASH,
    ) -> CurrencyInfo:
        """Define the dimension and reference unit for one currency.

        Registering the same code again is a no-op returning the first
        record.

        Args:
            code: Currency code, also used as the unit symbol.
            name: Human-readable display name.
            asset_class: Catalog group of the unit.

        Returns:
            The stored catalog record.

        Raises:
            InvalidCurrencyCode: If the code is malformed.
            CurrencyRegistrationError: If the code is already taken by a
                non-currency unit of the underlying registry.
        """
        if not is_currency_code(code):
            raise InvalidCurrencyCode(f"Cannot register invalid currency code: {code!r}")

        with self._lock:
            existing = self._currencies.get(code)
            if existing is not None:
                return existing
            if code in self._ureg:
                raise CurrencyRegistrationError(
                    f"Cannot register currency {code}: the name is already a unit"
                )

            self._ureg.define(f"{code} = {currency_dimension(code)}")
            info = CurrencyInfo(code, name or code, asset_class)
            self._currencies[code] = info
            return info

    def register_all(self, entries: Iterable[CurrencyInfo]) -> int:
        """Register every catalog entry, returning how many were added.

        Codes clashing with an existing unit are logged and skipped;
        malformed codes abort the whole run.
        """
        added = 0
        for entry in entries:
            if entry.code in self._currencies:
                continue
            try:
                self.register(entry.code, entry.name, entry.asset_class)
            except CurrencyRegistrationError as exc:
                logger.warning("currency_registration_skipped", code=entry.code, reason=str(exc))
                continue
            added += 1
        logger.info("currency_units_registered", added=added, total=len(self._currencies))
        return added

    def is_currency(self, code: str) -> bool:
        return code in self._currencies

    def currencies(self) -> list[CurrencyInfo]:
        """Return registered currencies sorted by code."""
        return [self._currencies[code] for code in sorted(self._currencies)]

    def info(self, code: str) -> CurrencyInfo:
        try:
            return self._currencies[code]
        except KeyError:
            raise NotACurrency(f"{code!r} is not a registered currency") from None

    def unit(self, code: str) -> pint.Unit:
        """Return the reference unit of a registered currency."""
        self.info(code)
        return self._ureg.Unit(code)

    def quantity(self, value: Any, code: str) -> pint.Quantity:
        """Build ``value`` units of a registered currency, e.g. 1 EUR."""
        return self._ureg.Quantity(value, self.unit(code))

    def parse_unit(self, unit: pint.Unit | str) -> pint.Unit:
        """Turn a unit string such as ``"BRL"`` or ``"kBRL"`` into a pint Unit."""
        if isinstance(unit, pint.Unit):
            return unit
        try:
            return self._ureg.Unit(unit)
        except pint.UndefinedUnitError as exc:
            raise NotACurrency(f"Unknown unit: {unit!r}") from exc

    def currency_code(self, unit: pint.Unit | str) -> str:
        """Return the currency code whose dimension ``unit`` carries.

        A unit counts as a currency when its dimensionality is exactly one
        registered currency dimension to the power one, so prefixed units
        such as kEUR qualify while EUR/kg or EUR**2 do not.

        Raises:
            NotACurrency: If the unit is not a currency unit.
        """
        parsed = self.parse_unit(unit)
        dims = dict(parsed.dimensionality)
        if len(dims) == 1:
            ((name, exponent),) = dims.items()
            code = code_from_dimension(name)
            if code is not None and code in self._currencies and exponent == 1:
                return code
        raise NotACurrency(f"{parsed} is not a currency unit")


def build_registry(settings: RegistrySettings | None = None) -> CurrencyUnitRegistry:
    """Create a registry and register the configured catalog groups."""
    settings = settings or RegistrySettings()
    if settings.load_default_units:
        ureg = pint.UnitRegistry(non_int_type=Decimal)
    else:
        ureg = pint.UnitRegistry(None, non_int_type=Decimal)

    registry = CurrencyUnitRegistry(ureg)
    registry.register_all(iter_catalog(settings.asset_classes))
    return registry


_registry: CurrencyUnitRegistry | None = None
_registry_lock = threading.Lock()


def get_registry(settings: RegistrySettings | None = None) -> CurrencyUnitRegistry:
    """Return the process-wide currency registry, building it on first use.

    ``settings`` only takes effect on the call that builds the registry.
    """
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = build_registry(settings)
    return _registry


def reset_registry() -> None:
    """Drop the process-wide registry. Intended for tests."""
    global _registry
    with _registry_lock:
        _registry = None
