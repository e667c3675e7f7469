"""
config.py

Centralized configuration management using pydantic-settings.
All modules must import settings from this file.
Direct os.getenv() calls are prohibited elsewhere.

DISCORD_BOT_TOKEN is required: importing this module without it raises,
so the service never starts half-configured.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings loaded from the environment and .env file."""

    # Discord credentials
    discord_bot_token: str
    discord_client_id: str = ""
    discord_public_key: str = ""

    # Discord targets
    discord_guild_id: str = ""  # empty: register commands globally
    discord_channel_id: str = ""
    discord_webhook_url: str = ""  # takes precedence over the channel id
    discord_api_base: str = "https://discord.com/api/v10"

    # Outbound calls
    notification_timeout_seconds: float = 10.0

    # HTTP listener
    port: int = 3000

    # Behaviour toggles
    announce_on_startup: bool = True
    enable_test_endpoint: bool = False

    # Logging
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    @field_validator("discord_bot_token")
    @classmethod
    def token_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("DISCORD_BOT_TOKEN must not be empty")
        return value


settings = Settings()
