"""
loop_relay/dependencies.py

FastAPI dependencies exposing lifespan-scoped objects to the routers.
Tests replace these through app.dependency_overrides.
"""

from fastapi import Request

from config import Settings, settings
from loop_relay.services.notification import Notifier
from loop_relay.services.store import SnapshotStore


def get_settings() -> Settings:
    return settings


def get_store(request: Request) -> SnapshotStore:
    return request.app.state.store


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier
