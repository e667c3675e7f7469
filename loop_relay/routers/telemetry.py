"""
loop_relay/routers/telemetry.py

Webhook endpoints for the Loop app.
- POST /loop-data: ingest a telemetry snapshot
- GET /health: liveness plus data freshness
- GET/POST /test-glucose: commit sample data and push the full status (opt-in)
"""

import json
from datetime import datetime, timedelta

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from config import Settings
from loop_relay.dependencies import get_notifier, get_settings, get_store
from loop_relay.exceptions import NotificationDeliveryError, ValidationError
from loop_relay.schemas import (
    HealthStatus,
    LastBolus,
    LoopStatus,
    TelemetrySnapshot,
)
from loop_relay.services.formatter import format_full_status
from loop_relay.services.ingestion import ingest_telemetry
from loop_relay.services.notification import Notifier
from loop_relay.services.store import SnapshotStore

logger = structlog.get_logger(__name__)

router = APIRouter()


def build_sample_snapshot(now: datetime) -> TelemetrySnapshot:
    """Realistic fixed reading used by the test endpoint."""
    return TelemetrySnapshot(
        glucose=145.0,
        trend="↗️",
        timestamp=now,
        iob=2.1,
        cob=12.0,
        basal_rate=0.85,
        last_bolus=LastBolus(amount=3.5, timestamp=now - timedelta(minutes=45)),
        loop_status=LoopStatus.CLOSED,
        battery_level=78,
        insulin_remaining=45.2,
    )


@router.post("/loop-data")
async def receive_loop_data(
    request: Request,
    store: SnapshotStore = Depends(get_store),
    notifier: Notifier = Depends(get_notifier),
) -> JSONResponse:
    """
    Receive a telemetry push from the Loop app.

    The body is decoded by hand so that malformed JSON and missing fields
    both answer 400 rather than FastAPI's 422.
    """
    try:
        raw = json.loads(await request.body())
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.warning("telemetry_body_unreadable", error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid data format"},
        )

    try:
        await ingest_telemetry(raw, store, notifier)
    except ValidationError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": exc.message},
        )

    return JSONResponse(content={"message": "Data received successfully"})


@router.get("/health", response_model=HealthStatus)
async def health(store: SnapshotStore = Depends(get_store)) -> HealthStatus:
    last_update = store.last_update
    return HealthStatus(
        last_update=last_update.isoformat() if last_update else "never",
        has_data=last_update is not None,
    )


@router.api_route("/test-glucose", methods=["GET", "POST"])
async def send_test_glucose(
    store: SnapshotStore = Depends(get_store),
    notifier: Notifier = Depends(get_notifier),
    settings: Settings = Depends(get_settings),
) -> dict:
    """Commit sample telemetry and push the full status to the channel."""
    if not settings.enable_test_endpoint:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

    snapshot = build_sample_snapshot(store.now())
    view = store.replace(snapshot)
    logger.info("test_snapshot_committed", glucose=snapshot.glucose)

    delivered = True
    try:
        await notifier.send_text(format_full_status(snapshot, view.updated_at, store.now()))
    except NotificationDeliveryError as exc:
        delivered = False
        logger.error("test_status_push_failed", error=str(exc))

    return {
        "message": "Test data sent to Discord!" if delivered else "Test data stored",
        "data": snapshot.model_dump(mode="json", by_alias=True),
    }
