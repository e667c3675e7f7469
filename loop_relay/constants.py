"""
loop_relay/constants.py

Clinical and timing thresholds used by the alert evaluator and ingestion handler.
All numeric thresholds must be referenced from this module.
Glucose values are in mg/dL.
"""

# ── On-demand alert evaluator thresholds (mg/dL) ─────────────
GLUCOSE_HIGH: float = 180
GLUCOSE_LOW: float = 70
GLUCOSE_CRITICAL_LOW: float = 55

# ── Ingestion-time critical alert thresholds (mg/dL) ─────────
# Kept separate from the evaluator thresholds above.
INGEST_CRITICAL_HIGH: float = 250
INGEST_CRITICAL_LOW: float = 60

# ── Device thresholds ────────────────────────────────────────
BATTERY_LOW_PERCENT: float = 20
INSULIN_RESERVOIR_LOW_UNITS: float = 10

# ── Staleness (minutes) ──────────────────────────────────────
STALE_DATA_ALERT_MIN: int = 15
NEVER_UPDATED_MIN: int = 999

# ── Discord limits ───────────────────────────────────────────
DISCORD_MESSAGE_MAX_LEN: int = 2000
