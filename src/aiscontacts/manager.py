"""Contact manager facade.

Composes the contact store with dead-reckoning projection and exposes the
API used by AIS decoders (ingestion), display code (queries) and
persistence collaborators (export/import).
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from aiscontacts.config import ContactsConfig
from aiscontacts.exceptions import ContactNotFoundError
from aiscontacts.extrapolation import project
from aiscontacts.ingestion.report import snapshot_from_report
from aiscontacts.models.snapshot import ShipSnapshot
from aiscontacts.state.store import ContactStore

_logger = logging.getLogger(__name__)


def _now_ms() -> int:
    """Current epoch timestamp in milliseconds."""
    return int(time.time() * 1000)


class ContactManager:
    """Process-wide access point to the AIS contact history.

    Construct one instance at startup and pass it to every producer and
    consumer. The manager is safe to share between threads; all state
    lives in the underlying :class:`ContactStore`.

    Usage::

        manager = ContactManager()
        manager.report_position(244123456, 12.0, cog, heading, lat, lon, ts_ms, "MV EXAMPLE")
        fleet = manager.current_fleet()
        ahead = manager.predicted_fleet(60_000)
    """

    def __init__(
        self,
        config: ContactsConfig | None = None,
        *,
        store: ContactStore | None = None,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._config = config or ContactsConfig()
        self._store = store if store is not None else ContactStore()
        self._clock = clock

    @property
    def config(self) -> ContactsConfig:
        return self._config

    @property
    def store(self) -> ContactStore:
        return self._store

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def report(self, snapshot: ShipSnapshot) -> None:
        """Record an already-built snapshot."""
        self._store.insert(snapshot)
        if self._config.log_reports:
            _logger.debug(
                "Report mmsi=%s label=%r ts=%d lat=%.6f lon=%.6f sog=%.1f",
                snapshot.mmsi,
                snapshot.label,
                snapshot.timestamp_ms,
                snapshot.lat_degs,
                snapshot.lon_degs,
                snapshot.sog,
            )

    def report_position(
        self,
        mmsi: int,
        sog_knots: float,
        cog_rads: float,
        heading_rads: float,
        lat_rads: float,
        lon_rads: float,
        timestamp_ms: int,
        label: str,
    ) -> ShipSnapshot:
        """Record one decoded position report and return the stored snapshot.

        Angles are radians, speed is knots, the timestamp is epoch
        milliseconds. Values are stored as given.
        """
        snapshot = ShipSnapshot(
            mmsi=mmsi,
            sog=sog_knots,
            cog=cog_rads,
            heading=heading_rads,
            lat_rads=lat_rads,
            lon_rads=lon_rads,
            timestamp_ms=timestamp_ms,
            label=label,
        )
        self.report(snapshot)
        return snapshot

    def report_decoded(self, report: Mapping[str, Any]) -> ShipSnapshot:
        """Record a decoder-style report (degrees, mixed key names).

        See :func:`aiscontacts.ingestion.report.snapshot_from_report`.
        """
        snapshot = snapshot_from_report(report)
        self.report(snapshot)
        return snapshot

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def vessel_ids(self) -> set[int]:
        return self._store.vessel_ids()

    def history(self, mmsi: int) -> list[ShipSnapshot]:
        return self._store.history(mmsi)

    def current_fleet(self) -> list[ShipSnapshot]:
        """Latest known snapshot of every vessel at the current clock time."""
        return self.fleet_at(self._clock())

    def fleet_at(self, timestamp_ms: int) -> list[ShipSnapshot]:
        """Latest snapshot at or before *timestamp_ms* for every vessel that has one."""
        return self._store.fleet_at_or_before(timestamp_ms)

    def predicted_position(self, mmsi: int, offset_ms: int) -> ShipSnapshot:
        """Project the vessel's latest snapshot by *offset_ms*.

        Raises
        ------
        ContactNotFoundError
            If nothing has been recorded for *mmsi*.
        """
        latest = self._store.latest(mmsi)
        return project(latest, offset_ms, earth_radius_km=self._config.earth_radius_km)

    def predicted_positions(self, mmsi: int, *offsets_ms: int) -> list[ShipSnapshot]:
        """Project the vessel's latest snapshot once per offset, in the given order.

        Raises
        ------
        ContactNotFoundError
            If nothing has been recorded for *mmsi*.
        """
        latest = self._store.latest(mmsi)
        radius = self._config.earth_radius_km
        return [project(latest, offset, earth_radius_km=radius) for offset in offsets_ms]

    def predicted_fleet(self, offset_ms: int) -> dict[str, ShipSnapshot]:
        """Predicted snapshot of every currently known vessel, keyed by label.

        Each vessel in :meth:`current_fleet` is projected from its most
        recently inserted snapshot. Labels are not unique: when two vessels
        share one, the vessel iterated last wins.
        """
        radius = self._config.earth_radius_km
        predicted: dict[str, ShipSnapshot] = {}
        for current in self.current_fleet():
            try:
                latest = self._store.latest(current.mmsi)
            except ContactNotFoundError:
                # Cleared or replaced concurrently.
                continue
            if latest.label in predicted:
                _logger.debug(
                    "Label %r shared by MMSI %s and %s; keeping %s",
                    latest.label,
                    predicted[latest.label].mmsi,
                    latest.mmsi,
                    latest.mmsi,
                )
            predicted[latest.label] = project(latest, offset_ms, earth_radius_km=radius)
        return predicted

    # ------------------------------------------------------------------
    # Persistence hooks
    # ------------------------------------------------------------------

    def export_snapshots(self) -> dict[int, list[ShipSnapshot]]:
        """Independent copy of every vessel history, oldest inserted first."""
        exported = self._store.export_all()
        _logger.debug("Exported histories for %d vessels", len(exported))
        return exported

    def import_snapshots(self, data: Mapping[Any, Iterable[ShipSnapshot | Mapping[str, Any]]]) -> int:
        """Merge exported histories into the store; returns the snapshot count."""
        return self._store.import_all(data)

    def save_contacts(self, save_fn: Callable[[dict[int, list[ShipSnapshot]]], Any]) -> bool:
        """Hand an exported copy of the store to *save_fn*.

        The copy is taken under the store lock; *save_fn* runs after the
        lock is released, so slow storage never blocks reporters.
        Returns whether *save_fn* reported success.
        """
        return bool(save_fn(self.export_snapshots()))

    def load_contacts(self, data: Mapping[Any, Iterable[ShipSnapshot | Mapping[str, Any]]]) -> int:
        """Alias of :meth:`import_snapshots` for symmetry with :meth:`save_contacts`."""
        return self.import_snapshots(data)
