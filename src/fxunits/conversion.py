"""Currency conversion engine.

Converts a quantity held in one currency unit into another currency unit
using the rates of an ExchangeMarket. Four resolution modes exist:

  mode  1: direct pair (source, target)           -> rate
  mode -1: inverse pair (target, source)          -> 1 / rate
  mode  2: chain source -> v -> target            -> rate1 * rate2
  mode -2: chain target -> v -> source            -> 1 / (rate1 * rate2)

For the chained modes the intermediate currency v is the first candidate
in lexicographic code order, so results do not depend on market
iteration order.

All arithmetic is Decimal. Conversion is a pure function of its
arguments and safe to call from several threads once the registry is built.
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

import pint

from fxunits.exceptions import InvalidMode, NotACurrency, RateUnavailable
from fxunits.logging import get_logger
from fxunits.models import ConversionMode, CurrencyPair, Rate
from fxunits.units import CurrencyUnitRegistry, get_registry

logger = get_logger(__name__)


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))
    raise TypeError(f"Unsupported magnitude type for currency conversion: {type(value).__name__}")


def validate_mode(mode: Any) -> ConversionMode:
    """Return the ConversionMode for ``mode`` or raise InvalidMode."""
    if isinstance(mode, bool):
        raise InvalidMode(f"Invalid conversion mode {mode!r}; expected one of 1, -1, 2, -2")
    try:
        return ConversionMode(mode)
    except ValueError:
        raise InvalidMode(
            f"Invalid conversion mode {mode!r}; expected one of 1, -1, 2, -2"
        ) from None


def _find_chain(
    market: Mapping[CurrencyPair, Rate], start: str, end: str
) -> tuple[str, Rate, Rate] | None:
    """Find start -> v -> end, trying intermediates in code order."""
    intermediates = sorted(
        {pair.quote for pair in market if pair.base == start} - {start, end}
    )
    for code in intermediates:
        second = market.get(CurrencyPair(code, end))
        if second is not None:
            return code, market[CurrencyPair(start, code)], second
    return None


def resolve_rate(
    market: Mapping[CurrencyPair, Rate],
    source: str,
    target: str,
    mode: int = ConversionMode.DIRECT,
) -> Decimal:
    """Resolve the factor turning one ``source`` unit into ``target`` units.

    Args:
        market: Rate table to consult.
        source: Source currency code.
        target: Target currency code.
        mode: Resolution mode, one of 1, -1, 2, -2.

    Returns:
        Multiplicative factor as a Decimal.

    Raises:
        InvalidMode: If ``mode`` is not a known mode.
        RateUnavailable: If the market cannot satisfy the mode.
    """
    mode = validate_mode(mode)

    if mode is ConversionMode.DIRECT:
        rate = market.get(CurrencyPair(source, target))
        if rate is not None:
            return rate.as_decimal()

    elif mode is ConversionMode.INVERSE:
        rate = market.get(CurrencyPair(target, source))
        if rate is not None:
            return Decimal(1) / rate.as_decimal()

    elif mode is ConversionMode.CHAINED:
        chain = _find_chain(market, source, target)
        if chain is not None:
            via, first, second = chain
            logger.debug("chain_selected", source=source, target=target, via=via)
            return first.as_decimal() * second.as_decimal()

    else:
        chain = _find_chain(market, target, source)
        if chain is not None:
            via, first, second = chain
            logger.debug("chain_selected", source=target, target=source, via=via)
            return Decimal(1) / (first.as_decimal() * second.as_decimal())

    raise RateUnavailable(
        f"No {mode.name.lower()} rate (mode {int(mode)}) from {source} to {target} in market"
    )


def convert(
    target_unit: pint.Unit | str,
    quantity: pint.Quantity,
    market: Mapping[CurrencyPair, Rate],
    mode: int = ConversionMode.DIRECT,
    *,
    registry: CurrencyUnitRegistry | None = None,
) -> pint.Quantity:
    """Convert a currency quantity into ``target_unit`` using ``market``.

    The quantity is first expressed in its reference currency unit, the
    resolved rate is applied, and the result is converted to
    ``target_unit`` so prefixed units such as kBRL work as targets and
    sources. Converting a currency to itself does not consult the market.

    Args:
        target_unit: Target currency unit or unit string.
        quantity: Amount in a source currency unit, e.g. 1 EUR.
        market: Rate table for the desired snapshot.
        mode: Resolution mode (1, -1, 2, -2). Defaults to 1 (direct).
        registry: Currency registry; the process-wide one when omitted.

    Returns:
        Quantity whose unit equals ``target_unit``.

    Raises:
        NotACurrency: If either side is not a registered currency unit.
        InvalidMode: If ``mode`` is not a known mode.
        RateUnavailable: If the market has no applicable rate.

    Example:
        >>> market = generate_exchange_market({("EUR", "BRL"): 6.685598})
        >>> convert("BRL", registry.quantity(1, "EUR"), market)
        <Quantity(6.685598, 'BRL')>
    """
    registry = registry or get_registry()
    if not isinstance(quantity, pint.Quantity):
        raise NotACurrency(f"Expected a currency quantity, got {type(quantity).__name__}")

    target = registry.parse_unit(target_unit)
    source_code = registry.currency_code(quantity.units)
    target_code = registry.currency_code(target)
    mode = validate_mode(mode)

    amount = registry.Quantity(_to_decimal(quantity.magnitude), quantity.units)
    source_ref = registry.unit(source_code)
    if amount.units != source_ref:
        amount = amount.to(source_ref)

    if source_code == target_code:
        factor = Decimal(1)
    else:
        factor = resolve_rate(market, source_code, target_code, mode)

    result = registry.Quantity(amount.magnitude * factor, registry.unit(target_code))
    if result.units != target:
        result = result.to(target)

    logger.debug(
        "currency_converted",
        source=source_code,
        target=target_code,
        mode=int(mode),
        factor=str(factor),
    )
    return result


uconvert = convert
