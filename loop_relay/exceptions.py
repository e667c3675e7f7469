"""
loop_relay/exceptions.py

Exception types raised by the relay core.
Unknown commands and an empty store are not errors; the dispatcher
answers them with fixed replies.
"""


class RelayError(Exception):
    """Base class for all relay errors."""


class ValidationError(RelayError):
    """Inbound telemetry payload is malformed or incomplete."""

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.fields = fields or []


class NotificationDeliveryError(RelayError):
    """Sending a message to the chat platform failed."""
