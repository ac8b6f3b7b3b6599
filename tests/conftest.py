"""Shared test fixtures for fxunits."""

import json
from collections.abc import Callable, Iterator
from decimal import Decimal
from pathlib import Path

import pint
import pytest

from fxunits.config import RegistrySettings
from fxunits.market import ExchangeMarket, generate_exchange_market
from fxunits.units import CurrencyUnitRegistry, build_registry, reset_registry


@pytest.fixture(scope="session")
def registry() -> CurrencyUnitRegistry:
    """Full registry: pint default units plus the whole currency catalog."""
    return build_registry(RegistrySettings())


@pytest.fixture
def empty_registry() -> CurrencyUnitRegistry:
    """Registry without pint's default units and without any currency."""
    return CurrencyUnitRegistry(pint.UnitRegistry(None, non_int_type=Decimal))


@pytest.fixture
def clean_global_registry() -> Iterator[None]:
    """Reset the process-wide registry before and after a test."""
    reset_registry()
    yield
    reset_registry()


@pytest.fixture
def eur_brl_market() -> ExchangeMarket:
    """Market with a single EUR/BRL quote."""
    return generate_exchange_market({("EUR", "BRL"): 6.685598})


def _write_snapshot(directory: Path, date: str, base: str, rates: dict) -> Path:
    path = directory / f"{date}.json"
    path.write_text(json.dumps({"date": date, "base": base, "rates": rates}), encoding="utf-8")
    return path


@pytest.fixture
def write_snapshot() -> Callable[..., Path]:
    """Return a helper writing a snapshot JSON file named after its date."""
    return _write_snapshot


@pytest.fixture
def rates_dir(tmp_path: Path) -> Path:
    """Directory holding two EUR-based snapshots."""
    _write_snapshot(tmp_path, "2020-02-01", "EUR", {"USD": 1.1052, "BRL": 4.7227, "GBP": 0.84175})
    _write_snapshot(tmp_path, "2020-11-27", "EUR", {"USD": 1.1957, "BRL": 6.3519})
    return tmp_path
