"""
loop_relay/services/dispatcher.py

Maps a command name to the matching formatter or the alert evaluator,
rendered against the current snapshot. Dispatch never writes to the store.
"""

from datetime import datetime
from typing import Callable, Optional

import structlog

from loop_relay.schemas import TelemetrySnapshot
from loop_relay.services.alerts import evaluate_alerts, render_alerts
from loop_relay.services.formatter import (
    format_full_status,
    format_glucose,
    format_insulin,
    format_loop_status,
)
from loop_relay.services.store import SnapshotStore, elapsed_minutes

logger = structlog.get_logger(__name__)

NO_DATA_MESSAGE = (
    "❌ No Loop data available yet. "
    "Make sure your Loop app is sending data to the bot."
)
UNKNOWN_COMMAND_MESSAGE = "❓ Unknown command"

# (snapshot, updated_at, now) -> reply text
Renderer = Callable[[TelemetrySnapshot, datetime, datetime], str]


def _render_alerts(snapshot: TelemetrySnapshot, updated_at: datetime, now: datetime) -> str:
    return render_alerts(evaluate_alerts(snapshot, elapsed_minutes(updated_at, now)))


_RENDERERS: dict[str, Renderer] = {
    "glucose": format_glucose,
    "status": format_full_status,
    "insulin": format_insulin,
    "loop": format_loop_status,
    "alert": _render_alerts,
}


def normalize_command(command: str) -> str:
    return command.strip().lstrip("/").lower()


def dispatch(
    command: str,
    store: SnapshotStore,
    now: Optional[datetime] = None,
) -> str:
    """
    Answer one command from the current snapshot.

    Returns NO_DATA_MESSAGE when the store is empty (for any command) and
    UNKNOWN_COMMAND_MESSAGE for names outside the command set.
    """
    view = store.current()
    name = normalize_command(command)

    if view is None:
        logger.info("command_dispatched", command=name, outcome="no_data")
        return NO_DATA_MESSAGE

    renderer = _RENDERERS.get(name)
    if renderer is None:
        logger.info("command_dispatched", command=name, outcome="unknown")
        return UNKNOWN_COMMAND_MESSAGE

    reply = renderer(view.snapshot, view.updated_at, now or store.now())
    logger.info("command_dispatched", command=name, outcome="ok")
    return reply
