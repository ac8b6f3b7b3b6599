"""Tests for the currency conversion engine."""

from decimal import Decimal

import pytest

from fxunits.conversion import convert, resolve_rate, uconvert, validate_mode
from fxunits.exceptions import InvalidMode, NotACurrency, RateUnavailable
from fxunits.market import ExchangeMarket, generate_exchange_market
from fxunits.models import ConversionMode
from fxunits.units import CurrencyUnitRegistry


class TestDirectMode:
    """Mode 1: rate(source, target) taken straight from the market."""

    def test_eur_to_brl(
        self, registry: CurrencyUnitRegistry, eur_brl_market: ExchangeMarket
    ) -> None:
        result = convert("BRL", registry.quantity(1, "EUR"), eur_brl_market, registry=registry)
        assert result.magnitude == Decimal("6.685598")
        assert result.units == registry.unit("BRL")

    def test_default_mode_is_direct(
        self, registry: CurrencyUnitRegistry, eur_brl_market: ExchangeMarket
    ) -> None:
        implicit = convert("BRL", registry.quantity(3, "EUR"), eur_brl_market, registry=registry)
        explicit = convert("BRL", registry.quantity(3, "EUR"), eur_brl_market, 1, registry=registry)
        assert implicit == explicit

    def test_scales_with_amount(
        self, registry: CurrencyUnitRegistry, eur_brl_market: ExchangeMarket
    ) -> None:
        amount = registry.quantity(Decimal("250.50"), "EUR")
        result = convert("BRL", amount, eur_brl_market, registry=registry)
        assert result.magnitude == Decimal("250.50") * Decimal("6.685598")

    def test_float_amount_goes_through_decimal(
        self, registry: CurrencyUnitRegistry, eur_brl_market: ExchangeMarket
    ) -> None:
        result = convert("BRL", registry.ureg.Quantity(0.5, "EUR"), eur_brl_market, registry=registry)
        assert result.magnitude == Decimal("0.5") * Decimal("6.685598")

    def test_target_as_unit_object(
        self, registry: CurrencyUnitRegistry, eur_brl_market: ExchangeMarket
    ) -> None:
        result = convert(
            registry.unit("BRL"), registry.quantity(1, "EUR"), eur_brl_market, registry=registry
        )
        assert result.magnitude == Decimal("6.685598")

    def test_direct_ignores_inverse_entry(self, registry: CurrencyUnitRegistry) -> None:
        market = generate_exchange_market({("BRL", "EUR"): 0.15})
        with pytest.raises(RateUnavailable):
            convert("BRL", registry.quantity(1, "EUR"), market, 1, registry=registry)

    def test_uconvert_alias(
        self, registry: CurrencyUnitRegistry, eur_brl_market: ExchangeMarket
    ) -> None:
        result = uconvert("BRL", registry.quantity(1, "EUR"), eur_brl_market, registry=registry)
        assert result.magnitude == Decimal("6.685598")


class TestInverseMode:
    """Mode -1: 1 / rate(target, source)."""

    def test_brl_to_eur(
        self, registry: CurrencyUnitRegistry, eur_brl_market: ExchangeMarket
    ) -> None:
        result = convert("EUR", registry.quantity(1, "BRL"), eur_brl_market, -1, registry=registry)
        assert result.magnitude == Decimal(1) / Decimal("6.685598")
        assert float(result.magnitude) == pytest.approx(0.149575, rel=1e-5)
        assert result.units == registry.unit("EUR")

    def test_inverse_needs_reverse_pair(
        self, registry: CurrencyUnitRegistry, eur_brl_market: ExchangeMarket
    ) -> None:
        with pytest.raises(RateUnavailable):
            convert("BRL", registry.quantity(1, "EUR"), eur_brl_market, -1, registry=registry)


class TestChainedMode:
    """Mode 2: rate(source, v) * rate(v, target)."""

    def test_two_hop_via_usd(self, registry: CurrencyUnitRegistry) -> None:
        market = generate_exchange_market({("EUR", "USD"): 1.1052, ("USD", "BRL"): 4.2732})
        result = convert("BRL", registry.quantity(1, "EUR"), market, 2, registry=registry)
        assert result.magnitude == Decimal("1.1052") * Decimal("4.2732")
        assert result.units == registry.unit("BRL")

    def test_chained_does_not_use_direct_pair(self, registry: CurrencyUnitRegistry) -> None:
        market = generate_exchange_market({("EUR", "BRL"): 6.685598})
        with pytest.raises(RateUnavailable):
            convert("BRL", registry.quantity(1, "EUR"), market, 2, registry=registry)

    def test_intermediate_chosen_in_code_order(self, registry: CurrencyUnitRegistry) -> None:
        """With USD and GBP both available, GBP wins because it sorts first."""
        market = generate_exchange_market(
            [
                (("EUR", "USD"), 1.1),
                (("USD", "BRL"), 4.0),
                (("EUR", "GBP"), 0.8),
                (("GBP", "BRL"), 5.0),
            ]
        )
        result = convert("BRL", registry.quantity(1, "EUR"), market, 2, registry=registry)
        assert result.magnitude == Decimal("0.8") * Decimal("5.0")

    def test_incomplete_chain(self, registry: CurrencyUnitRegistry) -> None:
        market = generate_exchange_market({("EUR", "USD"): 1.1, ("BRL", "USD"): 0.23})
        with pytest.raises(RateUnavailable):
            convert("BRL", registry.quantity(1, "EUR"), market, 2, registry=registry)


class TestInverseChainedMode:
    """Mode -2: 1 / (rate(target, v) * rate(v, source))."""

    def test_two_hop_inverse(self, registry: CurrencyUnitRegistry) -> None:
        market = generate_exchange_market({("EUR", "USD"): 1.1052, ("USD", "BRL"): 4.2732})
        result = convert("EUR", registry.quantity(1, "BRL"), market, -2, registry=registry)
        assert result.magnitude == Decimal(1) / (Decimal("1.1052") * Decimal("4.2732"))
        assert result.units == registry.unit("EUR")

    def test_wrong_direction_fails(self, registry: CurrencyUnitRegistry) -> None:
        market = generate_exchange_market({("EUR", "USD"): 1.1052, ("USD", "BRL"): 4.2732})
        with pytest.raises(RateUnavailable):
            convert("BRL", registry.quantity(1, "EUR"), market, -2, registry=registry)


class TestErrors:
    """Failure modes of convert."""

    @pytest.mark.parametrize("mode", [0, 3, -3, 10, "1", None, True, 1.5])
    def test_invalid_mode(
        self, registry: CurrencyUnitRegistry, eur_brl_market: ExchangeMarket, mode
    ) -> None:
        with pytest.raises(InvalidMode):
            convert("BRL", registry.quantity(1, "EUR"), eur_brl_market, mode, registry=registry)

    def test_rate_unavailable_names_currencies(self, registry: CurrencyUnitRegistry) -> None:
        with pytest.raises(RateUnavailable, match="EUR.*JPY"):
            convert("JPY", registry.quantity(1, "EUR"), generate_exchange_market({}), registry=registry)

    def test_non_currency_target(
        self, registry: CurrencyUnitRegistry, eur_brl_market: ExchangeMarket
    ) -> None:
        with pytest.raises(NotACurrency):
            convert("meter", registry.quantity(1, "EUR"), eur_brl_market, registry=registry)

    def test_non_currency_source(
        self, registry: CurrencyUnitRegistry, eur_brl_market: ExchangeMarket
    ) -> None:
        with pytest.raises(NotACurrency):
            convert("BRL", registry.ureg.Quantity(1, "kg"), eur_brl_market, registry=registry)

    def test_compound_currency_unit_is_not_a_currency(
        self, registry: CurrencyUnitRegistry, eur_brl_market: ExchangeMarket
    ) -> None:
        with pytest.raises(NotACurrency):
            convert("BRL", registry.ureg.Quantity(1, "EUR / kg"), eur_brl_market, registry=registry)

    def test_plain_number_is_not_a_currency(
        self, registry: CurrencyUnitRegistry, eur_brl_market: ExchangeMarket
    ) -> None:
        with pytest.raises(NotACurrency):
            convert("BRL", 1, eur_brl_market, registry=registry)  # type: ignore[arg-type]


class TestUnitHandling:
    """Identity conversions, prefixed units and round trips."""

    def test_same_currency_skips_market(self, registry: CurrencyUnitRegistry) -> None:
        result = convert("EUR", registry.quantity(5, "EUR"), generate_exchange_market({}), registry=registry)
        assert result.magnitude == 5
        assert result.units == registry.unit("EUR")

    def test_prefixed_target(
        self, registry: CurrencyUnitRegistry, eur_brl_market: ExchangeMarket
    ) -> None:
        result = convert("kBRL", registry.quantity(1000, "EUR"), eur_brl_market, registry=registry)
        assert str(result.units) == "kiloBRL"
        assert float(result.magnitude) == pytest.approx(6.685598)

    def test_round_trip_with_consistent_pairs(self, registry: CurrencyUnitRegistry) -> None:
        market = generate_exchange_market({("AUD", "CAD"): Decimal("0.8"), ("CAD", "AUD"): Decimal("1.25")})
        there = convert("CAD", registry.quantity(1, "AUD"), market, registry=registry)
        back = convert("AUD", there, market, registry=registry)
        assert back.magnitude == Decimal(1)
        assert back.units == registry.unit("AUD")

    def test_round_trip_float_rates(self, registry: CurrencyUnitRegistry) -> None:
        r = 1.164151
        market = generate_exchange_market({("EUR", "USD"): r, ("USD", "EUR"): 1 / r})
        there = convert("USD", registry.quantity(1, "EUR"), market, registry=registry)
        back = convert("EUR", there, market, registry=registry)
        assert float(back.magnitude) == pytest.approx(1.0)


class TestResolveRate:
    """Tests for the pure factor-resolution step."""

    @pytest.fixture
    def market(self) -> ExchangeMarket:
        return generate_exchange_market({("EUR", "USD"): Decimal("1.25"), ("USD", "BRL"): Decimal("4")})

    def test_modes(self, market: ExchangeMarket) -> None:
        assert resolve_rate(market, "EUR", "USD", ConversionMode.DIRECT) == Decimal("1.25")
        assert resolve_rate(market, "USD", "EUR", ConversionMode.INVERSE) == Decimal("0.8")
        assert resolve_rate(market, "EUR", "BRL", ConversionMode.CHAINED) == Decimal("5")
        assert resolve_rate(market, "BRL", "EUR", ConversionMode.INVERSE_CHAINED) == Decimal("0.2")

    def test_plain_dict_market(self) -> None:
        """Any mapping of CurrencyPair to Rate works as a market."""
        market = dict(generate_exchange_market({("EUR", "USD"): 2}))
        assert resolve_rate(market, "EUR", "USD") == Decimal(2)

    def test_validate_mode(self) -> None:
        assert validate_mode(-1) is ConversionMode.INVERSE
        with pytest.raises(InvalidMode):
            validate_mode(4)
