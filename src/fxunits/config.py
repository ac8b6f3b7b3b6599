"""Configuration system using pydantic-settings with environment variable loading."""

from datetime import date
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from fxunits.models import AssetClass


class RegistrySettings(BaseSettings):
    """Currency unit registry settings."""

    model_config = SettingsConfigDict(env_prefix="FXUNITS_REGISTRY_")

    # Start from pint's default definitions so currencies combine with physical units
    load_default_units: bool = True
    asset_classes: list[AssetClass] = Field(default_factory=lambda: list(AssetClass))


class SnapshotSettings(BaseSettings):
    """Rate snapshot storage settings.

    Snapshots are JSON files, one per date, holding a base currency and
    the rates of every other currency against it.
    """

    model_config = SettingsConfigDict(env_prefix="FXUNITS_SNAPSHOT_")

    rates_dir: Path = Path("data/exchange_rates")
    default_date: date | None = None  # None selects the latest snapshot
    include_inverse: bool = False


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_prefix="FXUNITS_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    log_level: str = "INFO"
    registry: RegistrySettings = Field(default_factory=RegistrySettings)
    snapshot: SnapshotSettings = Field(default_factory=SnapshotSettings)
