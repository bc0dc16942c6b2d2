from __future__ import annotations

import threading

import pytest

from aiscontacts.exceptions import ContactNotFoundError
from aiscontacts.models.snapshot import ShipSnapshot
from aiscontacts.state.store import ContactStore


def _snap(mmsi: int, timestamp_ms: int, label: str = "A", **overrides: float) -> ShipSnapshot:
    fields: dict = {
        "mmsi": mmsi,
        "sog": 2.0,
        "cog": 2.0,
        "heading": 2.0,
        "lat_rads": 0.0,
        "lon_rads": 0.0,
        "timestamp_ms": timestamp_ms,
        "label": label,
    }
    fields.update(overrides)
    return ShipSnapshot(**fields)


def _store(*snapshots: ShipSnapshot) -> ContactStore:
    store = ContactStore()
    for snapshot in snapshots:
        store.insert(snapshot)
    return store


# ------------------------------------------------------------------
# insert / latest
# ------------------------------------------------------------------


class TestInsertAndLatest:
    def test_first_insert_creates_vessel(self) -> None:
        store = ContactStore()
        assert 1 not in store

        store.insert(_snap(1, 100))

        assert 1 in store
        assert len(store) == 1
        assert store.vessel_ids() == {1}

    def test_latest_is_most_recently_inserted_not_newest_timestamp(self) -> None:
        store = _store(_snap(1, 500), _snap(1, 100))
        assert store.latest(1).timestamp_ms == 100

    def test_latest_unknown_vessel_raises(self) -> None:
        store = _store(_snap(1, 100))
        with pytest.raises(ContactNotFoundError) as excinfo:
            store.latest(2)
        assert excinfo.value.mmsi == 2

    def test_not_found_is_a_lookup_error(self) -> None:
        with pytest.raises(LookupError):
            ContactStore().latest(1)

    def test_history_is_most_recent_first_copy(self) -> None:
        store = _store(_snap(1, 1), _snap(1, 2), _snap(1, 3))
        history = store.history(1)
        assert [s.timestamp_ms for s in history] == [3, 2, 1]

        history.clear()
        assert len(store.history(1)) == 3

    def test_history_of_unknown_vessel_is_empty(self) -> None:
        assert ContactStore().history(42) == []

    def test_snapshot_count_spans_vessels(self) -> None:
        store = _store(_snap(1, 1), _snap(1, 2), _snap(2, 1))
        assert store.snapshot_count() == 3
        assert len(store) == 2


# ------------------------------------------------------------------
# snapshot_at_or_before
# ------------------------------------------------------------------


class TestSnapshotAtOrBefore:
    def test_returns_greatest_timestamp_not_after_query(self) -> None:
        store = _store(*(_snap(1, ts) for ts in (0, 2000, 2423, 3023, 3342)))

        assert store.snapshot_at_or_before(1, 2000).timestamp_ms == 2000
        assert store.snapshot_at_or_before(1, 2422).timestamp_ms == 2000
        assert store.snapshot_at_or_before(1, 10_000).timestamp_ms == 3342
        assert store.snapshot_at_or_before(1, 0).timestamp_ms == 0

    def test_all_snapshots_newer_raises(self) -> None:
        store = _store(_snap(1, 1000), _snap(1, 2000))
        with pytest.raises(ContactNotFoundError) as excinfo:
            store.snapshot_at_or_before(1, 999)
        assert excinfo.value.timestamp_ms == 999

    def test_unknown_vessel_raises(self) -> None:
        with pytest.raises(ContactNotFoundError):
            ContactStore().snapshot_at_or_before(7, 1000)

    def test_scan_continues_past_too_new_out_of_order_insert(self) -> None:
        # Late-arriving old report lands at the head; a newer one sits behind it.
        store = _store(_snap(1, 100), _snap(1, 3000), _snap(1, 1500), _snap(1, 5000))

        assert store.snapshot_at_or_before(1, 2000).timestamp_ms == 1500
        assert store.snapshot_at_or_before(1, 1000).timestamp_ms == 100

    def test_first_match_in_reverse_insertion_order_wins(self) -> None:
        store = _store(_snap(1, 1800), _snap(1, 1200))
        # 1200 was inserted last, so it is found first even though 1800 is closer.
        assert store.snapshot_at_or_before(1, 2000).timestamp_ms == 1200


# ------------------------------------------------------------------
# fleet_at_or_before
# ------------------------------------------------------------------


class TestFleetAtOrBefore:
    def test_omits_vessels_without_qualifying_snapshot(self) -> None:
        store = _store(_snap(1, 100), _snap(2, 5000))
        fleet = store.fleet_at_or_before(1000)
        assert [s.mmsi for s in fleet] == [1]

    def test_empty_before_every_snapshot(self) -> None:
        store = _store(_snap(1, 100), _snap(2, 200))
        assert store.fleet_at_or_before(99) == []

    def test_empty_store(self) -> None:
        assert ContactStore().fleet_at_or_before(10**13) == []

    def test_vessels_are_isolated(self) -> None:
        store = _store(_snap(1, 100), _snap(1, 200))
        before = store.fleet_at_or_before(150)

        store.insert(_snap(2, 120))
        store.insert(_snap(2, 130))

        after = {s.mmsi: s for s in store.fleet_at_or_before(150)}
        assert after[1] == before[0]
        assert store.history(1) == [_snap(1, 200), _snap(1, 100)]


# ------------------------------------------------------------------
# export / import
# ------------------------------------------------------------------


class TestExportImport:
    def test_export_is_oldest_inserted_first(self) -> None:
        store = _store(_snap(1, 10), _snap(1, 20), _snap(2, 5))
        exported = store.export_all()
        assert [s.timestamp_ms for s in exported[1]] == [10, 20]
        assert [s.timestamp_ms for s in exported[2]] == [5]

    def test_export_is_independent_of_live_store(self) -> None:
        store = _store(_snap(1, 10))
        exported = store.export_all()

        exported[1].append(_snap(1, 999))
        exported[3] = [_snap(3, 1)]

        assert store.history(1) == [_snap(1, 10)]
        assert 3 not in store

        store.insert(_snap(1, 20))
        assert len(exported[1]) == 2

    def test_round_trip_into_fresh_store_reproduces_queries(self) -> None:
        store = _store(
            _snap(1, 100),
            _snap(1, 3000),
            _snap(1, 1500),
            _snap(2, 50, label="B"),
            _snap(2, 2500, label="B"),
        )
        fresh = ContactStore()
        fresh.import_all(store.export_all())

        for t in (0, 50, 99, 100, 1499, 1500, 2000, 2500, 3000, 10_000):
            assert fresh.fleet_at_or_before(t) == store.fleet_at_or_before(t)
        assert fresh.history(1) == store.history(1)

    def test_import_extends_existing_history(self) -> None:
        store = _store(_snap(1, 100))
        count = store.import_all({1: [_snap(1, 200), _snap(1, 300)], 2: [_snap(2, 50)]})

        assert count == 3
        assert [s.timestamp_ms for s in store.history(1)] == [300, 200, 100]
        assert store.vessel_ids() == {1, 2}

    def test_import_accepts_json_shaped_data(self) -> None:
        source = _store(_snap(244123456, 1000, label="MV X"))
        payload = {
            str(mmsi): [s.model_dump(by_alias=True) for s in history]
            for mmsi, history in source.export_all().items()
        }
        assert "latRads" in payload["244123456"][0]

        store = ContactStore()
        store.import_all(payload)

        assert store.latest(244123456) == source.latest(244123456)

    def test_invalid_import_leaves_store_untouched(self) -> None:
        store = _store(_snap(1, 100))
        with pytest.raises(ValueError):
            store.import_all({1: [_snap(1, 200)], 2: [{"mmsi": 2}]})
        assert store.history(1) == [_snap(1, 100)]
        assert 2 not in store

    def test_clear_then_import_replaces(self) -> None:
        store = _store(_snap(1, 100), _snap(9, 5))
        store.clear()
        store.import_all({1: [_snap(1, 200)]})
        assert store.vessel_ids() == {1}
        assert store.history(1) == [_snap(1, 200)]


# ------------------------------------------------------------------
# concurrency
# ------------------------------------------------------------------


def test_concurrent_inserts_and_fleet_reads_stay_consistent() -> None:
    store = ContactStore()
    writers = 8
    per_writer = 250
    errors: list[BaseException] = []
    stop = threading.Event()

    def write(mmsi: int) -> None:
        for ts in range(per_writer):
            store.insert(_snap(mmsi, ts))

    def read() -> None:
        try:
            while not stop.is_set():
                fleet = store.fleet_at_or_before(per_writer)
                mmsis = [s.mmsi for s in fleet]
                assert len(mmsis) == len(set(mmsis))
                exported = store.export_all()
                for history in exported.values():
                    assert [s.timestamp_ms for s in history] == list(range(len(history)))
        except BaseException as exc:  # noqa: BLE001
            errors.append(exc)

    readers = [threading.Thread(target=read) for _ in range(3)]
    threads = [threading.Thread(target=write, args=(mmsi,)) for mmsi in range(writers)]
    for thread in readers + threads:
        thread.start()
    for thread in threads:
        thread.join()
    stop.set()
    for thread in readers:
        thread.join()

    assert not errors
    assert store.snapshot_count() == writers * per_writer
    assert {s.timestamp_ms for s in store.fleet_at_or_before(per_writer)} == {per_writer - 1}
