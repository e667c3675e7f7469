"""
loop_relay/services/commands.py

Slash-command set and its registration with the Discord REST API.
Guild registration applies instantly; global registration can take up to
an hour to propagate.
"""

from typing import Optional

import httpx
import structlog

from config import Settings

logger = structlog.get_logger(__name__)

# Insertion order is the order shown in Discord's command picker
COMMANDS: dict[str, str] = {
    "glucose": "Get current blood glucose reading",
    "status": "Get full Loop status (BG, IOB, COB, basal)",
    "insulin": "Get detailed insulin information",
    "loop": "Get Loop system status and last update time",
    "alert": "Check if there are any alerts or issues",
}

# Discord application command type for slash commands
_CHAT_INPUT: int = 1


def command_definitions() -> list[dict]:
    return [
        {"name": name, "description": description, "type": _CHAT_INPUT}
        for name, description in COMMANDS.items()
    ]


async def register_commands(
    client: httpx.AsyncClient,
    settings: Settings,
) -> Optional[str]:
    """
    Overwrite the bot's slash commands with COMMANDS.

    Returns "guild" or "global" for the scope registered, or None when
    registration was skipped or failed. Never raises.
    """
    if not settings.discord_client_id:
        logger.warning("command_registration_skipped", reason="DISCORD_CLIENT_ID not set")
        return None

    base = f"{settings.discord_api_base}/applications/{settings.discord_client_id}"
    if settings.discord_guild_id:
        scope = "guild"
        url = f"{base}/guilds/{settings.discord_guild_id}/commands"
    else:
        scope = "global"
        url = f"{base}/commands"

    try:
        response = await client.put(
            url,
            json=command_definitions(),
            headers={"Authorization": f"Bot {settings.discord_bot_token}"},
            timeout=settings.notification_timeout_seconds,
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        logger.error(
            "command_registration_failed",
            scope=scope,
            status=exc.response.status_code,
        )
        return None
    except httpx.HTTPError as exc:
        logger.error("command_registration_failed", scope=scope, error=str(exc))
        return None

    logger.info("commands_registered", scope=scope, count=len(COMMANDS))
    return scope
