"""Pytest bootstrap configuration.

Ensure environment variables are set before test collection and module
imports that depend on application settings.
"""
import os

os.environ.setdefault("JWT_SECRET", "unit-test-secret")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest

from application.services.realtime_service import RoomRelay
from application.services.token_service import TokenService
from core.config import Settings
from tests.fakes import RecordingTransport


@pytest.fixture
def settings() -> Settings:
    return Settings(JWT_SECRET="unit-test-secret", ENVIRONMENT="test", PORT=3000)


@pytest.fixture
def token_service(settings) -> TokenService:
    return TokenService(settings)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def relay(transport) -> RoomRelay:
    return RoomRelay(transport=transport, clock=lambda: "2024-01-01T00:00:00.000Z")
