"""Exchange market: an immutable snapshot of currency pair rates.

A market is built once per snapshot (from a file, a literal table or a
generator) and then passed read-only into every conversion call.
"""

from collections.abc import Iterable, Iterator, Mapping
from decimal import Decimal
from typing import Any, Union

from fxunits.exceptions import InvalidCurrencyCode
from fxunits.logging import get_logger
from fxunits.models import CurrencyPair, Rate

logger = get_logger(__name__)

RawPair = Union[tuple[str, str], CurrencyPair]
RawRate = Union[int, float, Decimal, Rate]
RawEntry = tuple[RawPair, RawRate]


class ExchangeMarket(Mapping[CurrencyPair, Rate]):
    """Read-only mapping from CurrencyPair to Rate.

    Each pair appears at most once. Iteration order carries no meaning;
    callers needing a canonical order sort the pairs themselves.

    Args:
        rates: Mapping of already validated pairs to rates.
    """

    __slots__ = ("_rates",)

    def __init__(self, rates: Mapping[CurrencyPair, Rate] | None = None) -> None:
        checked: dict[CurrencyPair, Rate] = {}
        for pair, rate in (rates or {}).items():
            if not isinstance(pair, CurrencyPair):
                raise TypeError(f"Market keys must be CurrencyPair, got {type(pair).__name__}")
            if not isinstance(rate, Rate):
                raise TypeError(f"Market values must be Rate, got {type(rate).__name__}")
            checked[pair] = rate
        self._rates = checked

    def __getitem__(self, pair: CurrencyPair) -> Rate:
        return self._rates[pair]

    def __iter__(self) -> Iterator[CurrencyPair]:
        return iter(self._rates)

    def __len__(self) -> int:
        return len(self._rates)

    def __repr__(self) -> str:
        entries = ", ".join(f"{pair}: {rate.value}" for pair, rate in self._rates.items())
        return f"ExchangeMarket({{{entries}}})"

    def currencies(self) -> set[str]:
        """Return every currency code appearing in the market."""
        codes: set[str] = set()
        for pair in self._rates:
            codes.add(pair.base)
            codes.add(pair.quote)
        return codes

    def quotes_for(self, base: str) -> list[str]:
        """Return the sorted quote codes priced against ``base``."""
        return sorted(pair.quote for pair in self._rates if pair.base == base)

    def bases_for(self, quote: str) -> list[str]:
        """Return the sorted base codes priced in ``quote``."""
        return sorted(pair.base for pair in self._rates if pair.quote == quote)


def _is_single_entry(value: Any) -> bool:
    # ((base, quote), rate): the second element is a rate, not another entry
    return (
        isinstance(value, tuple)
        and len(value) == 2
        and isinstance(value[1], (int, float, Decimal, Rate))
    )


def _to_pair(key: RawPair) -> CurrencyPair:
    if isinstance(key, CurrencyPair):
        return key
    if not isinstance(key, (tuple, list)) or len(key) != 2:
        raise InvalidCurrencyCode(f"Expected a (base, quote) pair, got {key!r}")
    base, quote = key
    return CurrencyPair(base, quote)


def _to_rate(value: RawRate) -> Rate:
    if isinstance(value, Rate):
        return value
    return Rate(value)


def generate_exchange_market(
    rates: Mapping[RawPair, RawRate] | Iterable[RawEntry] | RawEntry,
) -> ExchangeMarket:
    """Build an ExchangeMarket from raw (base, quote) -> rate data.

    Accepted shapes:
        - a mapping ``{("EUR", "USD"): 1.16, ...}``
        - a sequence or generator of ``(("EUR", "USD"), 1.16)`` entries
        - a single ``(("EUR", "USD"), 1.16)`` entry

    Every entry is validated; the first invalid code or rate aborts the
    build and no partial market is returned. Duplicate pairs keep the
    last value seen.

    Args:
        rates: Raw rate data in one of the shapes above.

    Returns:
        The validated, read-only market.

    Raises:
        InvalidCurrencyCode: If any pair holds a malformed code.
        InvalidRate: If any rate is not strictly positive.

    Example:
        >>> market = generate_exchange_market({("EUR", "USD"): 1.164151})
        >>> market[CurrencyPair("EUR", "USD")].value
        1.164151
    """
    if isinstance(rates, Mapping):
        entries: Iterable[Any] = rates.items()
    elif _is_single_entry(rates):
        entries = [rates]
    else:
        entries = rates

    built: dict[CurrencyPair, Rate] = {}
    for key, value in entries:
        built[_to_pair(key)] = _to_rate(value)

    logger.debug("exchange_market_built", pairs=len(built))
    return ExchangeMarket(built)
