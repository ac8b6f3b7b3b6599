"""Rate snapshots: dated JSON files of exchange rates against a base currency."""

from fxunits.snapshots.loader import SnapshotStore, load_snapshot
from fxunits.snapshots.models import RateSnapshot

__all__ = ["RateSnapshot", "SnapshotStore", "load_snapshot"]
