"""
tests/conftest.py

Supplies the required Discord credential before config.py is imported,
and shared pytest fixtures.
"""

import os

os.environ.setdefault("DISCORD_BOT_TOKEN", "test-bot-token")

import pytest  # noqa: E402

from loop_relay.services.store import SnapshotStore  # noqa: E402
from tests.fixtures import FakeNotifier, FixedClock  # noqa: E402


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def store(clock: FixedClock) -> SnapshotStore:
    return SnapshotStore(clock=clock)


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()
