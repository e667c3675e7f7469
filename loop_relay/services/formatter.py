"""
loop_relay/services/formatter.py

Renders a telemetry snapshot as Discord-flavoured markdown for each query kind.
All functions are pure: the caller supplies the commit time and "now".
"""

from datetime import datetime
from typing import Optional

from loop_relay.schemas import LoopStatus, TelemetrySnapshot
from loop_relay.services.store import elapsed_minutes, round_half_up

_LOOP_STATUS_SYMBOLS: dict[LoopStatus, str] = {
    LoopStatus.CLOSED: "✅",
    LoopStatus.OPEN: "⚠️",
    LoopStatus.SUSPENDED: "🛑",
    LoopStatus.UNKNOWN: "🛑",
}


def staleness_phrase(minutes: Optional[int]) -> str:
    """
    Human-readable age of the last update.

    `minutes` is already rounded to the nearest minute; None means no
    update was ever received. Hours are rounded to nearest, so 90 minutes
    reads "2 hours ago".
    """
    if minutes is None:
        return "never"
    if minutes < 1:
        return "just now"
    if minutes == 1:
        return "1 minute ago"
    if minutes < 60:
        return f"{minutes} minutes ago"

    hours = round_half_up(minutes / 60)
    if hours == 1:
        return "1 hour ago"
    return f"{hours} hours ago"


def time_since(updated_at: Optional[datetime], now: datetime) -> str:
    if updated_at is None:
        return staleness_phrase(None)
    return staleness_phrase(elapsed_minutes(updated_at, now))


def _glucose_value(glucose: float) -> str:
    # mg/dL readings are integral; drop the trailing ".0"
    return f"{glucose:g}"


def _trend_suffix(trend: str) -> str:
    return f" {trend}" if trend else ""


def _loop_status_label(snapshot: TelemetrySnapshot) -> str:
    status = snapshot.loop_status or LoopStatus.UNKNOWN
    return status.value.upper()


def format_glucose(
    snapshot: TelemetrySnapshot,
    updated_at: Optional[datetime],
    now: datetime,
) -> str:
    return (
        "🩸 **Current Glucose**\n"
        f"**Reading:** {_glucose_value(snapshot.glucose)} mg/dL"
        f"{_trend_suffix(snapshot.trend)}\n"
        f"**Last Update:** {time_since(updated_at, now)}"
    )


def format_full_status(
    snapshot: TelemetrySnapshot,
    updated_at: Optional[datetime],
    now: datetime,
) -> str:
    lines = [
        "📊 **Complete Loop Status**",
        f"🩸 **Glucose:** {_glucose_value(snapshot.glucose)} mg/dL"
        f"{_trend_suffix(snapshot.trend)}",
        f"💉 **IOB:** {snapshot.iob}u",
        f"🍞 **COB:** {snapshot.cob}g",
        f"⚡ **Basal:** {snapshot.basal_rate}u/h",
        f"🔄 **Loop:** {_loop_status_label(snapshot)}",
    ]
    if snapshot.battery_level is not None:
        lines.append(f"🔋 **Battery:** {snapshot.battery_level:g}%")
    if snapshot.insulin_remaining is not None:
        lines.append(f"💧 **Insulin:** {snapshot.insulin_remaining}u remaining")
    lines.append(f"⏰ **Last Update:** {time_since(updated_at, now)}")
    return "\n".join(lines)


def format_insulin(
    snapshot: TelemetrySnapshot,
    updated_at: Optional[datetime],
    now: datetime,
) -> str:
    lines = [
        "💉 **Insulin Status**",
        f"📈 **IOB:** {snapshot.iob}u",
        f"⚡ **Current Basal:** {snapshot.basal_rate}u/h",
    ]
    if snapshot.last_bolus is not None:
        bolus = snapshot.last_bolus
        minutes_ago = elapsed_minutes(bolus.timestamp, now)
        lines.append(f"💊 **Last Bolus:** {bolus.amount}u ({minutes_ago}m ago)")
    lines.append(f"⏰ **Last Update:** {time_since(updated_at, now)}")
    return "\n".join(lines)


def format_loop_status(
    snapshot: TelemetrySnapshot,
    updated_at: Optional[datetime],
    now: datetime,
) -> str:
    status = snapshot.loop_status or LoopStatus.UNKNOWN
    battery = (
        f"{snapshot.battery_level:g}%"
        if snapshot.battery_level is not None
        else "Unknown"
    )
    reservoir = (
        f"{snapshot.insulin_remaining}u"
        if snapshot.insulin_remaining is not None
        else "Unknown"
    )
    return (
        "🔄 **Loop System Status**\n"
        f"{_LOOP_STATUS_SYMBOLS[status]} **Status:** {status.value.upper()}\n"
        f"📱 **Last Communication:** {time_since(updated_at, now)}\n"
        f"🔋 **Battery:** {battery}\n"
        f"💧 **Insulin Remaining:** {reservoir}"
    )
