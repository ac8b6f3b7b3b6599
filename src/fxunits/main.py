"""Command-line interface for fxunits.

Wiring order for every command:
1. AppSettings (configuration)
2. Logging setup
3. Currency unit registry (registered once per process)
4. SnapshotStore and ExchangeMarket, for commands that need rates
"""

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

import typer

from fxunits.config import AppSettings
from fxunits.conversion import convert
from fxunits.exceptions import FxUnitsError
from fxunits.logging import get_logger, setup_logging
from fxunits.market import ExchangeMarket
from fxunits.models import AssetClass
from fxunits.snapshots import SnapshotStore
from fxunits.units import CurrencyUnitRegistry, get_registry

logger = get_logger(__name__)

app = typer.Typer(add_completion=False, help="Currency units and exchange-rate conversion")


def _bootstrap() -> tuple[AppSettings, CurrencyUnitRegistry]:
    settings = AppSettings()
    setup_logging(settings.log_level)
    return settings, get_registry(settings.registry)


def _load_market(
    settings: AppSettings,
    date_value: Optional[str],
    rates_dir: Optional[Path],
    inverse: bool,
    cross: bool,
) -> ExchangeMarket:
    store = SnapshotStore(rates_dir or settings.snapshot.rates_dir)
    when = date_value or settings.snapshot.default_date
    return store.market_for(
        when,
        include_inverse=inverse or settings.snapshot.include_inverse,
        cross=cross,
    )


def _fail(exc: FxUnitsError) -> None:
    logger.debug("command_failed", error=type(exc).__name__)
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1)


@app.command("convert")
def convert_command(
    amount: str = typer.Argument(..., help="Amount in the source currency"),
    source: str = typer.Argument(..., help="Source currency unit, e.g. EUR"),
    target: str = typer.Argument(..., help="Target currency unit, e.g. BRL"),
    date_value: Optional[str] = typer.Option(None, "--date", help="Snapshot date (YYYY-MM-DD)"),
    mode: int = typer.Option(1, "--mode", help="Rate mode: 1 direct, -1 inverse, 2 / -2 chained"),
    rates_dir: Optional[Path] = typer.Option(None, "--rates-dir", help="Snapshot directory"),
    inverse: bool = typer.Option(False, "--inverse", help="Add inverse pairs to the market"),
    cross: bool = typer.Option(False, "--cross", help="Add all cross pairs to the market"),
) -> None:
    try:
        value = Decimal(amount)
    except InvalidOperation as exc:
        raise typer.BadParameter(f"Amount must be a number, got {amount!r}") from exc

    settings, registry = _bootstrap()
    try:
        market = _load_market(settings, date_value, rates_dir, inverse, cross)
        quantity = registry.ureg.Quantity(value, registry.parse_unit(source))
        result = convert(target, quantity, market, mode, registry=registry)
    except FxUnitsError as exc:
        _fail(exc)
        return

    typer.echo(f"{value} {source} = {result.magnitude} {target}")


@app.command("rates")
def rates_command(
    date_value: Optional[str] = typer.Option(None, "--date", help="Snapshot date (YYYY-MM-DD)"),
    rates_dir: Optional[Path] = typer.Option(None, "--rates-dir", help="Snapshot directory"),
    inverse: bool = typer.Option(False, "--inverse", help="Add inverse pairs to the market"),
) -> None:
    settings, _ = _bootstrap()
    try:
        market = _load_market(settings, date_value, rates_dir, inverse, cross=False)
    except FxUnitsError as exc:
        _fail(exc)
        return

    for pair in sorted(market, key=lambda p: (p.base, p.quote)):
        typer.echo(f"{pair} {market[pair].value}")


@app.command("currencies")
def currencies_command(
    asset_class: Optional[AssetClass] = typer.Option(
        None, "--asset-class", help="Only list one catalog group"
    ),
) -> None:
    _, registry = _bootstrap()
    for info in registry.currencies():
        if asset_class is None or info.asset_class is asset_class:
            typer.echo(f"{info.code}\t{info.name}\t{info.asset_class.value}")


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
