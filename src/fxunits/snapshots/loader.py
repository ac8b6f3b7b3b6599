"""Loading rate snapshots from disk."""

import datetime as dt
from pathlib import Path

from pydantic import ValidationError

from fxunits.exceptions import SnapshotError
from fxunits.logging import get_logger
from fxunits.market import ExchangeMarket
from fxunits.snapshots.models import RateSnapshot

logger = get_logger(__name__)


def load_snapshot(path: Path | str) -> RateSnapshot:
    """Read and validate one snapshot JSON file.

    Raises:
        SnapshotError: If the file cannot be read or fails validation.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SnapshotError(f"Cannot read snapshot {path}: {exc}") from exc

    try:
        snapshot = RateSnapshot.model_validate_json(text)
    except ValidationError as exc:
        raise SnapshotError(f"Invalid snapshot {path}: {exc}") from exc

    logger.debug(
        "snapshot_loaded",
        path=str(path),
        date=snapshot.date.isoformat(),
        base=snapshot.base,
        rates=len(snapshot.rates),
    )
    return snapshot


def _parse_date(value: dt.date | str) -> dt.date:
    if isinstance(value, dt.date):
        return value
    try:
        return dt.date.fromisoformat(value)
    except ValueError as exc:
        raise SnapshotError(f"Snapshot date must be YYYY-MM-DD, got {value!r}") from exc


class SnapshotStore:
    """All snapshots found in a directory, keyed by date.

    Every ``*.json`` file in ``rates_dir`` is loaded eagerly. Two files
    declaring the same date are rejected.

    Args:
        rates_dir: Directory holding snapshot JSON files.
    """

    def __init__(self, rates_dir: Path | str) -> None:
        self._rates_dir = Path(rates_dir)
        if not self._rates_dir.is_dir():
            raise SnapshotError(f"Snapshot directory not found: {self._rates_dir}")

        self._snapshots: dict[dt.date, RateSnapshot] = {}
        for path in sorted(self._rates_dir.glob("*.json")):
            snapshot = load_snapshot(path)
            if snapshot.date in self._snapshots:
                raise SnapshotError(
                    f"Duplicate snapshot for {snapshot.date.isoformat()} in {path}"
                )
            self._snapshots[snapshot.date] = snapshot

        logger.info(
            "snapshot_store_loaded",
            rates_dir=str(self._rates_dir),
            snapshots=len(self._snapshots),
        )

    def __len__(self) -> int:
        return len(self._snapshots)

    def __contains__(self, when: object) -> bool:
        return when in self._snapshots

    def dates(self) -> list[dt.date]:
        return sorted(self._snapshots)

    def get(self, when: dt.date | str) -> RateSnapshot:
        """Return the snapshot for a date.

        Raises:
            SnapshotError: If no snapshot exists for that date.
        """
        day = _parse_date(when)
        try:
            return self._snapshots[day]
        except KeyError:
            raise SnapshotError(f"No snapshot for {day.isoformat()}") from None

    def latest(self) -> RateSnapshot:
        if not self._snapshots:
            raise SnapshotError(f"No snapshots in {self._rates_dir}")
        return self._snapshots[max(self._snapshots)]

    def market_for(
        self,
        when: dt.date | str | None = None,
        include_inverse: bool = False,
        cross: bool = False,
    ) -> ExchangeMarket:
        """Build the market for a date, or for the latest snapshot when omitted."""
        snapshot = self.latest() if when is None else self.get(when)
        return snapshot.to_market(include_inverse=include_inverse, cross=cross)
