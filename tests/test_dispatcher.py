"""
tests/test_dispatcher.py

Unit tests for loop_relay/services/dispatcher.py.
"""

from datetime import timedelta

import pytest

from loop_relay.services.commands import COMMANDS
from loop_relay.services.dispatcher import (
    NO_DATA_MESSAGE,
    UNKNOWN_COMMAND_MESSAGE,
    dispatch,
    normalize_command,
)
from loop_relay.services.store import SnapshotStore
from tests.fixtures import FixedClock, build_snapshot


@pytest.mark.parametrize("command", [*COMMANDS, "bogus", ""])
def test_empty_store_answers_no_data(store: SnapshotStore, command: str) -> None:
    assert dispatch(command, store) == NO_DATA_MESSAGE


def test_unknown_command_with_data(store: SnapshotStore) -> None:
    store.replace(build_snapshot())

    assert dispatch("bolus", store) == UNKNOWN_COMMAND_MESSAGE


def test_each_command_routes_to_its_renderer(store: SnapshotStore) -> None:
    store.replace(build_snapshot())

    assert dispatch("glucose", store).startswith("🩸 **Current Glucose**")
    assert dispatch("status", store).startswith("📊 **Complete Loop Status**")
    assert dispatch("insulin", store).startswith("💉 **Insulin Status**")
    assert dispatch("loop", store).startswith("🔄 **Loop System Status**")
    assert dispatch("alert", store) == "✅ **All Clear!** No alerts at this time."


def test_alert_command_uses_store_staleness(store: SnapshotStore, clock: FixedClock) -> None:
    store.replace(build_snapshot())
    clock.advance(minutes=16)

    assert "📡 No recent data updates" in dispatch("alert", store)


def test_explicit_now_overrides_clock(store: SnapshotStore) -> None:
    view = store.replace(build_snapshot())

    reply = dispatch("glucose", store, now=view.updated_at + timedelta(minutes=90))
    assert reply.endswith("2 hours ago")


def test_dispatch_does_not_mutate_store(store: SnapshotStore) -> None:
    store.replace(build_snapshot())
    before = store.current()

    for command in [*COMMANDS, "bogus"]:
        dispatch(command, store)

    assert store.current() is before


def test_normalize_command() -> None:
    assert normalize_command(" /Status ") == "status"
    assert normalize_command("ALERT") == "alert"
