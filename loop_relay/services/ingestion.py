"""
loop_relay/services/ingestion.py

Validates telemetry pushed by the Loop app, commits it to the snapshot store
and fires the ingestion-time critical glucose alert.

The critical check here uses its own thresholds (INGEST_CRITICAL_*), separate
from the on-demand alert evaluator.
"""

from typing import Any

import pydantic
import structlog

from loop_relay.constants import INGEST_CRITICAL_HIGH, INGEST_CRITICAL_LOW
from loop_relay.exceptions import NotificationDeliveryError, ValidationError
from loop_relay.schemas import TelemetrySnapshot
from loop_relay.services.formatter import format_glucose
from loop_relay.services.notification import Notifier
from loop_relay.services.store import SnapshotStore

logger = structlog.get_logger(__name__)

_REQUIRED_FIELDS: tuple[str, ...] = ("glucose", "timestamp")


def parse_payload(raw: Any) -> TelemetrySnapshot:
    """
    Build a snapshot from a decoded JSON body.

    Raises ValidationError when the body is not an object, a required
    field is missing, or any field fails validation.
    """
    if not isinstance(raw, dict):
        raise ValidationError("Invalid data format: expected a JSON object")

    missing = [name for name in _REQUIRED_FIELDS if raw.get(name) is None]
    if missing:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing)}",
            fields=missing,
        )

    try:
        return TelemetrySnapshot.model_validate(raw)
    except pydantic.ValidationError as exc:
        fields = [".".join(str(part) for part in err["loc"]) for err in exc.errors()]
        raise ValidationError(
            f"Invalid fields: {', '.join(fields)}",
            fields=fields,
        ) from exc


def is_critical_glucose(glucose: float) -> bool:
    return glucose > INGEST_CRITICAL_HIGH or glucose < INGEST_CRITICAL_LOW


async def ingest_telemetry(
    raw: Any,
    store: SnapshotStore,
    notifier: Notifier,
) -> TelemetrySnapshot:
    """
    Validate and commit one telemetry payload.

    Flow:
    1. Validate; on failure raise ValidationError without touching the store
    2. Replace the stored snapshot
    3. If glucose is outside the critical band, notify the channel once

    A failed notification is logged and does not undo the commit.
    """
    try:
        snapshot = parse_payload(raw)
    except ValidationError as exc:
        logger.warning("telemetry_rejected", error=exc.message, fields=exc.fields)
        raise

    view = store.replace(snapshot)
    logger.info(
        "telemetry_received",
        glucose=snapshot.glucose,
        trend=snapshot.trend,
        device_timestamp=snapshot.timestamp.isoformat(),
    )

    if is_critical_glucose(snapshot.glucose):
        message = (
            "🚨 **CRITICAL ALERT** 🚨\n"
            f"{format_glucose(snapshot, view.updated_at, store.now())}"
        )
        try:
            await notifier.send_text(message)
            logger.info("critical_alert_sent", glucose=snapshot.glucose)
        except NotificationDeliveryError as exc:
            logger.error(
                "critical_alert_failed",
                glucose=snapshot.glucose,
                error=str(exc),
            )

    return snapshot
