"""
tests/fixtures.py

Shared test data and helper functions for constructing test payloads.
All tests must use these fixtures instead of hardcoding test values.
"""

from datetime import datetime, timedelta, timezone

from config import Settings
from loop_relay.exceptions import NotificationDeliveryError
from loop_relay.schemas import TelemetrySnapshot

# ── Reference instant ───────────────────────────────────────

TEST_NOW: datetime = datetime(2024, 6, 15, 13, 30, 0, tzinfo=timezone.utc)


class FixedClock:
    """Controllable clock for the snapshot store."""

    def __init__(self, start: datetime = TEST_NOW) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, minutes: float = 0, seconds: float = 0) -> None:
        self.current = self.current + timedelta(minutes=minutes, seconds=seconds)


class FakeNotifier:
    """Records sent messages; optionally fails every send."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.messages: list[str] = []

    async def send_text(self, text: str) -> None:
        if self.fail:
            raise NotificationDeliveryError("discord unreachable")
        self.messages.append(text)


def build_payload(**overrides) -> dict:
    """Build a raw camelCase telemetry payload with sensible defaults."""
    payload = {
        "glucose": 120,
        "trend": "→",
        "timestamp": TEST_NOW.isoformat(),
        "iob": 1.5,
        "cob": 10.0,
        "basalRate": 0.8,
        "loopStatus": "closed",
        "batteryLevel": 80,
        "insulinRemaining": 50.0,
        "lastBolus": {
            "amount": 2.0,
            "timestamp": (TEST_NOW - timedelta(minutes=30)).isoformat(),
        },
    }
    payload.update(overrides)
    return payload


def build_minimal_payload(**overrides) -> dict:
    """Only the fields every Loop build sends."""
    payload = {
        "glucose": 120,
        "trend": "→",
        "timestamp": TEST_NOW.isoformat(),
        "iob": 1.5,
        "cob": 10.0,
        "basalRate": 0.8,
    }
    payload.update(overrides)
    return payload


def build_snapshot(**overrides) -> TelemetrySnapshot:
    return TelemetrySnapshot.model_validate(build_payload(**overrides))


def build_settings(**overrides) -> Settings:
    """Settings with every Discord target blank unless overridden."""
    values = {
        "discord_bot_token": "test-bot-token",
        "discord_client_id": "",
        "discord_public_key": "",
        "discord_guild_id": "",
        "discord_channel_id": "",
        "discord_webhook_url": "",
        "discord_api_base": "https://discord.test/api/v10",
        "notification_timeout_seconds": 2.0,
        "announce_on_startup": False,
        "enable_test_endpoint": False,
    }
    values.update(overrides)
    return Settings(**values)
