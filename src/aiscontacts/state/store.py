"""Thread-safe in-memory contact history store.

This is the only component allowed to read or mutate vessel histories.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Iterable, Mapping
from typing import Any

from aiscontacts.exceptions import ContactNotFoundError
from aiscontacts.models.snapshot import ShipSnapshot

_logger = logging.getLogger(__name__)


def _coerce_snapshot(value: ShipSnapshot | Mapping[str, Any]) -> ShipSnapshot:
    if isinstance(value, ShipSnapshot):
        return value
    return ShipSnapshot.model_validate(value)


def _first_at_or_before(history: Iterable[ShipSnapshot], timestamp_ms: int) -> ShipSnapshot | None:
    # Insertion order need not match timestamp order, so too-new entries are
    # skipped rather than ending the scan.
    for snapshot in history:
        if snapshot.timestamp_ms > timestamp_ms:
            continue
        return snapshot
    return None


class ContactStore:
    """Per-vessel history of AIS snapshots.

    Each vessel's history is a deque with the most recently inserted
    snapshot at the head. Histories are created on first insert and
    grow without bound; retention is left to the caller.

    A single lock guards the whole ``mmsi -> history`` map. Fleet-wide
    reads walk every vessel while inserts mutate one, so per-vessel
    locking would let a reader observe a half-updated vessel set.
    Everything returned to callers is a fresh container of immutable
    snapshots, safe to iterate while the store keeps changing.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._histories: dict[int, deque[ShipSnapshot]] = {}

    def _history(self, mmsi: int) -> deque[ShipSnapshot]:
        history = self._histories.get(mmsi)
        if history is None:
            history = deque()
            self._histories[mmsi] = history
        return history

    def insert(self, snapshot: ShipSnapshot) -> None:
        """Push *snapshot* to the head of its vessel's history.

        Timestamps are not checked; out-of-order reports are accepted.
        """
        with self._lock:
            self._history(snapshot.mmsi).appendleft(snapshot)

    def latest(self, mmsi: int) -> ShipSnapshot:
        """Return the most recently inserted snapshot for *mmsi*."""
        with self._lock:
            history = self._histories.get(mmsi)
            if history:
                return history[0]
        raise ContactNotFoundError(f"no snapshot recorded for MMSI {mmsi}", mmsi=mmsi)

    def vessel_ids(self) -> set[int]:
        with self._lock:
            return set(self._histories)

    def history(self, mmsi: int) -> list[ShipSnapshot]:
        """Copy of the vessel's history, most recently inserted first.

        Unknown vessels yield an empty list.
        """
        with self._lock:
            return list(self._histories.get(mmsi, ()))

    def snapshot_at_or_before(self, mmsi: int, timestamp_ms: int) -> ShipSnapshot:
        """Return the first snapshot, in reverse insertion order, not newer than *timestamp_ms*.

        Raises
        ------
        ContactNotFoundError
            If the vessel is unknown or every snapshot is newer than
            *timestamp_ms*.
        """
        with self._lock:
            found = _first_at_or_before(self._histories.get(mmsi, ()), timestamp_ms)
        if found is None:
            raise ContactNotFoundError(
                f"no snapshot for MMSI {mmsi} at or before {timestamp_ms}",
                mmsi=mmsi,
                timestamp_ms=timestamp_ms,
            )
        return found

    def fleet_at_or_before(self, timestamp_ms: int) -> list[ShipSnapshot]:
        """One snapshot per vessel that has one at or before *timestamp_ms*.

        Vessels without a qualifying snapshot are omitted. Result order
        follows the store's vessel iteration order.
        """
        fleet: list[ShipSnapshot] = []
        with self._lock:
            for history in self._histories.values():
                found = _first_at_or_before(history, timestamp_ms)
                if found is not None:
                    fleet.append(found)
        return fleet

    def export_all(self) -> dict[int, list[ShipSnapshot]]:
        """Independent copy of every history, oldest inserted first.

        Feeding the result to :meth:`import_all` on an empty store
        rebuilds identical histories.
        """
        with self._lock:
            return {mmsi: list(reversed(history)) for mmsi, history in self._histories.items()}

    def import_all(self, data: Mapping[Any, Iterable[ShipSnapshot | Mapping[str, Any]]]) -> int:
        """Merge exported histories into the store.

        Each sequence is replayed through the insert path in order, so
        existing histories are extended rather than replaced. Keys may be
        ints or their string form (as after a JSON round trip); snapshot
        entries may be :class:`ShipSnapshot` or plain mappings.

        Returns the number of snapshots imported.
        """
        # Validate before taking the lock so a bad entry leaves the store untouched.
        staged = [(int(mmsi), [_coerce_snapshot(item) for item in items]) for mmsi, items in data.items()]

        count = 0
        with self._lock:
            for mmsi, snapshots in staged:
                history = self._history(mmsi)
                for snapshot in snapshots:
                    history.appendleft(snapshot)
                count += len(snapshots)
        _logger.debug("Imported %d snapshots for %d vessels", count, len(staged))
        return count

    def clear(self) -> None:
        with self._lock:
            self._histories.clear()
        _logger.debug("Contact store cleared")

    def snapshot_count(self) -> int:
        """Total number of snapshots across all vessels."""
        with self._lock:
            return sum(len(history) for history in self._histories.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._histories)

    def __contains__(self, mmsi: object) -> bool:
        with self._lock:
            return mmsi in self._histories
