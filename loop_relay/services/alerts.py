"""
loop_relay/services/alerts.py

Rule-based alert evaluation over the latest snapshot.
Rules are independent and evaluated in a fixed order; the order of the
returned conditions is the display order, not a severity ranking.

Uses constants from loop_relay/constants.py; no magic numbers allowed.
"""

from typing import Optional

from loop_relay.constants import (
    BATTERY_LOW_PERCENT,
    GLUCOSE_CRITICAL_LOW,
    GLUCOSE_HIGH,
    GLUCOSE_LOW,
    INSULIN_RESERVOIR_LOW_UNITS,
    NEVER_UPDATED_MIN,
    STALE_DATA_ALERT_MIN,
)
from loop_relay.schemas import (
    AlertCondition,
    AlertSeverity,
    LoopStatus,
    TelemetrySnapshot,
)

ALL_CLEAR_MESSAGE = "✅ **All Clear!** No alerts at this time."


def evaluate_alerts(
    snapshot: TelemetrySnapshot,
    minutes_since_update: Optional[int],
) -> list[AlertCondition]:
    """
    Evaluate every alert rule against the snapshot.

    `minutes_since_update` is None when no update was ever received,
    which counts as NEVER_UPDATED_MIN minutes of staleness.
    """
    alerts: list[AlertCondition] = []

    # Glucose bands overlap on purpose: a critical low also counts as low
    if snapshot.glucose > GLUCOSE_HIGH:
        alerts.append(AlertCondition(severity=AlertSeverity.WARNING, message="🔴 High glucose"))
    if snapshot.glucose < GLUCOSE_LOW:
        alerts.append(AlertCondition(severity=AlertSeverity.WARNING, message="🟡 Low glucose"))
    if snapshot.glucose < GLUCOSE_CRITICAL_LOW:
        alerts.append(
            AlertCondition(severity=AlertSeverity.CRITICAL, message="🚨 CRITICAL LOW glucose")
        )

    # Device and system state
    if snapshot.loop_status is not None and snapshot.loop_status != LoopStatus.CLOSED:
        alerts.append(
            AlertCondition(
                severity=AlertSeverity.WARNING,
                message=f"⚠️ Loop is {snapshot.loop_status.value}",
            )
        )
    if snapshot.battery_level is not None and snapshot.battery_level < BATTERY_LOW_PERCENT:
        alerts.append(AlertCondition(severity=AlertSeverity.WARNING, message="🔋 Low battery"))
    if (
        snapshot.insulin_remaining is not None
        and snapshot.insulin_remaining < INSULIN_RESERVOIR_LOW_UNITS
    ):
        alerts.append(AlertCondition(severity=AlertSeverity.WARNING, message="💧 Low insulin"))

    # Stale data
    staleness = NEVER_UPDATED_MIN if minutes_since_update is None else minutes_since_update
    if staleness > STALE_DATA_ALERT_MIN:
        alerts.append(
            AlertCondition(severity=AlertSeverity.INFO, message="📡 No recent data updates")
        )

    return alerts


def render_alerts(alerts: list[AlertCondition]) -> str:
    """Render conditions as a bulleted list, or the all-clear message."""
    if not alerts:
        return ALL_CLEAR_MESSAGE
    bullets = "\n".join(f"• {alert.message}" for alert in alerts)
    return f"🚨 **Active Alerts:**\n{bullets}"
