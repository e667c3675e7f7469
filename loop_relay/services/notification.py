"""
loop_relay/services/notification.py

Outbound "send text to the configured channel" capability.
DiscordNotifier posts through a channel webhook when one is configured,
otherwise through the bot's channel messages endpoint.
"""

from typing import Protocol

import httpx
import structlog

from config import Settings
from loop_relay.constants import DISCORD_MESSAGE_MAX_LEN
from loop_relay.exceptions import NotificationDeliveryError

logger = structlog.get_logger(__name__)


class Notifier(Protocol):
    """Anything that can deliver a text message to the relay channel."""

    async def send_text(self, text: str) -> None: ...


def _truncate(text: str) -> str:
    if len(text) <= DISCORD_MESSAGE_MAX_LEN:
        return text
    return text[: DISCORD_MESSAGE_MAX_LEN - 1] + "…"


class DiscordNotifier:
    """Sends plain-text messages to Discord with a bounded timeout."""

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings

    def _target(self) -> tuple[str, dict[str, str]] | None:
        """Resolve the URL and headers to post to, or None if unconfigured."""
        if self._settings.discord_webhook_url:
            return self._settings.discord_webhook_url, {}
        if self._settings.discord_channel_id:
            url = (
                f"{self._settings.discord_api_base}"
                f"/channels/{self._settings.discord_channel_id}/messages"
            )
            headers = {"Authorization": f"Bot {self._settings.discord_bot_token}"}
            return url, headers
        return None

    async def send_text(self, text: str) -> None:
        """
        Deliver `text` to the configured channel.

        Raises NotificationDeliveryError on timeouts, transport errors
        and non-2xx responses. Does nothing when no channel is configured.
        """
        target = self._target()
        if target is None:
            logger.warning("notification_skipped", reason="no channel configured")
            return

        url, headers = target
        try:
            response = await self._client.post(
                url,
                json={"content": _truncate(text)},
                headers=headers,
                timeout=self._settings.notification_timeout_seconds,
            )
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise NotificationDeliveryError("discord request timed out") from exc
        except httpx.HTTPStatusError as exc:
            raise NotificationDeliveryError(
                f"discord returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise NotificationDeliveryError(f"discord request failed: {exc}") from exc

        logger.info(
            "notification_sent",
            status=response.status_code,
            message_length=len(text),
        )
