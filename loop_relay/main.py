"""
loop_relay/main.py

FastAPI application entry point for the Loop relay.
Builds the snapshot store, the shared httpx client and the Discord notifier
for the lifetime of the process, then registers routers.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from config import settings
from loop_relay.exceptions import NotificationDeliveryError
from loop_relay.logs import configure_logging
from loop_relay.routers.queries import router as queries_router
from loop_relay.routers.telemetry import router as telemetry_router
from loop_relay.services.commands import register_commands
from loop_relay.services.notification import DiscordNotifier
from loop_relay.services.store import SnapshotStore

logger = structlog.get_logger(__name__)

STARTUP_MESSAGE = "🚀 Loop Discord Bot connected and ready to monitor!"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle: startup and shutdown."""
    configure_logging(settings.log_level)
    logger.info("relay_starting", port=settings.port)

    client = httpx.AsyncClient(timeout=settings.notification_timeout_seconds)
    app.state.store = SnapshotStore()
    app.state.notifier = DiscordNotifier(client, settings)

    await register_commands(client, settings)

    if settings.announce_on_startup:
        try:
            await app.state.notifier.send_text(STARTUP_MESSAGE)
        except NotificationDeliveryError as exc:
            logger.error("startup_announcement_failed", error=str(exc))

    try:
        yield
    finally:
        await client.aclose()
        logger.info("relay_shutting_down")


app = FastAPI(
    title="Loop Discord Relay",
    description="Relays Loop telemetry to Discord and answers status commands",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(telemetry_router)
app.include_router(queries_router)


def run() -> None:
    """Console entry point: serve the relay on the configured port."""
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
