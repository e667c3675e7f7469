"""
loop_relay/services/store.py

In-memory holder for the single most recent telemetry snapshot.
Created once per application lifespan and injected into request handlers.
No history is kept and nothing is written to disk.
"""

import math
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import structlog

from loop_relay.schemas import TelemetrySnapshot

logger = structlog.get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive input."""
    return int(math.floor(value + 0.5))


def elapsed_minutes(since: datetime, now: datetime) -> int:
    """Whole minutes between two instants, rounded to nearest."""
    return round_half_up((now - since).total_seconds() / 60.0)


@dataclass(frozen=True)
class StoreView:
    """The current snapshot and the instant it was committed."""

    snapshot: TelemetrySnapshot
    updated_at: datetime


class SnapshotStore:
    """
    Latest-value store for telemetry.

    The snapshot and its commit time are swapped together as one
    StoreView, so readers always see a consistent pair.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._view: Optional[StoreView] = None

    def replace(self, snapshot: TelemetrySnapshot) -> StoreView:
        """Overwrite the current snapshot. Callers validate beforehand."""
        view = StoreView(snapshot=snapshot, updated_at=self._clock())
        with self._lock:
            self._view = view
        logger.debug(
            "snapshot_replaced",
            glucose=snapshot.glucose,
            updated_at=view.updated_at.isoformat(),
        )
        return view

    def current(self) -> Optional[StoreView]:
        """Return the latest StoreView, or None if nothing was ever committed."""
        with self._lock:
            return self._view

    @property
    def has_data(self) -> bool:
        return self.current() is not None

    @property
    def last_update(self) -> Optional[datetime]:
        view = self.current()
        return view.updated_at if view is not None else None

    def time_since_update(self, now: Optional[datetime] = None) -> Optional[timedelta]:
        view = self.current()
        if view is None:
            return None
        return (now or self._clock()) - view.updated_at

    def minutes_since_update(self, now: Optional[datetime] = None) -> Optional[int]:
        view = self.current()
        if view is None:
            return None
        return elapsed_minutes(view.updated_at, now or self._clock())

    def now(self) -> datetime:
        """Current instant according to the store's clock."""
        return self._clock()
