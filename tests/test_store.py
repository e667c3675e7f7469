"""
tests/test_store.py

Unit tests for loop_relay/services/store.py.
"""

import threading
from datetime import timedelta

from loop_relay.services.store import SnapshotStore, elapsed_minutes, round_half_up
from tests.fixtures import TEST_NOW, FixedClock, build_snapshot


def test_empty_store_reports_never(store: SnapshotStore) -> None:
    assert store.current() is None
    assert store.has_data is False
    assert store.last_update is None
    assert store.time_since_update() is None
    assert store.minutes_since_update() is None


def test_replace_records_commit_time(store: SnapshotStore, clock: FixedClock) -> None:
    snapshot = build_snapshot()
    store.replace(snapshot)

    view = store.current()
    assert view is not None
    assert view.snapshot == snapshot
    assert view.updated_at == TEST_NOW
    assert store.has_data is True


def test_replace_overwrites_wholesale(store: SnapshotStore, clock: FixedClock) -> None:
    store.replace(build_snapshot(glucose=100, batteryLevel=90))
    clock.advance(minutes=5)
    second = build_snapshot(glucose=140, batteryLevel=None)
    store.replace(second)

    view = store.current()
    assert view.snapshot == second
    assert view.snapshot.battery_level is None
    assert view.updated_at == TEST_NOW + timedelta(minutes=5)


def test_time_since_update_uses_clock(store: SnapshotStore, clock: FixedClock) -> None:
    store.replace(build_snapshot())
    clock.advance(minutes=7, seconds=40)

    assert store.time_since_update() == timedelta(minutes=7, seconds=40)
    assert store.minutes_since_update() == 8


def test_round_half_up_rounds_halves_up() -> None:
    assert round_half_up(0.49) == 0
    assert round_half_up(0.5) == 1
    assert round_half_up(1.5) == 2
    assert round_half_up(2.5) == 3


def test_elapsed_minutes_rounds_to_nearest() -> None:
    assert elapsed_minutes(TEST_NOW, TEST_NOW + timedelta(seconds=29)) == 0
    assert elapsed_minutes(TEST_NOW, TEST_NOW + timedelta(seconds=30)) == 1
    assert elapsed_minutes(TEST_NOW, TEST_NOW + timedelta(minutes=44, seconds=31)) == 45


def test_concurrent_writers_leave_consistent_view() -> None:
    """Readers racing writers must always see a snapshot paired with its own commit."""
    clock = FixedClock()
    store = SnapshotStore(clock=clock)
    snapshots = [build_snapshot(glucose=100 + i) for i in range(50)]
    errors: list[str] = []

    def writer() -> None:
        for snapshot in snapshots:
            store.replace(snapshot)

    def reader() -> None:
        for _ in range(500):
            view = store.current()
            if view is not None and view.snapshot not in snapshots:
                errors.append("foreign snapshot observed")

    threads = [threading.Thread(target=writer) for _ in range(2)]
    threads += [threading.Thread(target=reader) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert store.current().snapshot == snapshots[-1]
