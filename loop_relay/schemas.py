"""
loop_relay/schemas.py

Pydantic data models for the relay.
- TelemetrySnapshot: latest device state pushed by the Loop app (camelCase on the wire)
- AlertCondition: one active alert produced by the alert evaluator
- HealthStatus: body of the health-check endpoint
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LoopStatus(str, Enum):
    """Closed-loop state reported by the dosing app."""

    CLOSED = "closed"
    OPEN = "open"
    SUSPENDED = "suspended"
    UNKNOWN = "unknown"


class AlertSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


def _as_utc(value: datetime) -> datetime:
    """Treat naive device timestamps as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class LastBolus(BaseModel):
    """Most recent bolus delivered by the pump."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    amount: float = Field(ge=0)
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def timestamp_as_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


class TelemetrySnapshot(BaseModel):
    """
    One validated telemetry record from the Loop app.

    Only `glucose` and `timestamp` are required; the Loop app omits
    device fields it cannot read. Snapshots are frozen once built.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, allow_inf_nan=False)

    glucose: float = Field(gt=0)  # mg/dL
    timestamp: datetime
    trend: str = ""
    iob: float = Field(default=0.0, ge=0)
    cob: float = Field(default=0.0, ge=0)
    basal_rate: float = Field(default=0.0, ge=0, alias="basalRate")
    loop_status: Optional[LoopStatus] = Field(default=None, alias="loopStatus")
    battery_level: Optional[float] = Field(
        default=None, ge=0, le=100, alias="batteryLevel"
    )
    insulin_remaining: Optional[float] = Field(
        default=None, ge=0, alias="insulinRemaining"
    )
    last_bolus: Optional[LastBolus] = Field(default=None, alias="lastBolus")

    @field_validator("timestamp")
    @classmethod
    def timestamp_as_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @field_validator("loop_status", mode="before")
    @classmethod
    def lowercase_loop_status(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class AlertCondition(BaseModel):
    """A single alert raised by the evaluator. Never persisted."""

    model_config = ConfigDict(frozen=True)

    severity: AlertSeverity
    message: str


class HealthStatus(BaseModel):
    """Liveness plus data freshness, serialized with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    bot: str = "running"
    last_update: str = Field(alias="lastUpdate")  # ISO-8601 or "never"
    has_data: bool = Field(alias="hasData")
