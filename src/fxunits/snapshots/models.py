"""Rate snapshot schema.

A snapshot is one JSON document per date:

    {"date": "2020-02-01", "base": "EUR", "rates": {"USD": 1.1052, "BRL": 4.7495}}

where each rate is the value of one unit of the base currency in that
currency.
"""

import datetime as dt
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fxunits.codes import is_currency_code
from fxunits.market import ExchangeMarket, RawEntry, generate_exchange_market


class RateSnapshot(BaseModel):
    """Exchange rates of every listed currency against one base currency."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    base: str
    rates: dict[str, Annotated[Decimal, Field(gt=0)]]

    @field_validator("base")
    @classmethod
    def _check_base(cls, value: str) -> str:
        if not is_currency_code(value):
            raise ValueError(f"invalid base currency code {value!r}")
        return value

    @field_validator("rates")
    @classmethod
    def _check_rate_codes(cls, value: dict[str, Decimal]) -> dict[str, Decimal]:
        bad = sorted(code for code in value if not is_currency_code(code))
        if bad:
            raise ValueError(f"invalid currency codes in rates: {', '.join(bad)}")
        return value

    def _base_rates(self) -> dict[str, Decimal]:
        # The base may or may not be listed in its own rates
        rates = dict(self.rates)
        rates[self.base] = Decimal(1)
        return rates

    def to_market(self, include_inverse: bool = False, cross: bool = False) -> ExchangeMarket:
        """Build an ExchangeMarket from this snapshot.

        Args:
            include_inverse: Also add (code, base) -> 1 / rate entries.
            cross: Add every ordered pair of listed currencies, derived
                through the base as rate(a, b) = rates[b] / rates[a].
                Implies include_inverse.

        Returns:
            The market for this snapshot's date.
        """
        rates = self._base_rates()
        entries: list[RawEntry] = []

        if cross:
            for base in sorted(rates):
                for quote in sorted(rates):
                    if base != quote:
                        entries.append(((base, quote), rates[quote] / rates[base]))
            return generate_exchange_market(entries)

        for code in sorted(rates):
            if code == self.base:
                continue
            entries.append(((self.base, code), rates[code]))
            if include_inverse:
                entries.append(((code, self.base), Decimal(1) / rates[code]))
        return generate_exchange_market(entries)
