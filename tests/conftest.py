"""Shared test fixtures."""
from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from huddle_backend.main import create_app
from huddle_backend.persistence.huddle_registry import InMemoryHuddleRegistry
from huddle_backend.settings import AppSettings

APP_ID = "test-app-id"
APP_CERTIFICATE = "test-app-certificate"


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(app_id=APP_ID, app_certificate=APP_CERTIFICATE)


@pytest.fixture
def registry() -> InMemoryHuddleRegistry:
    return InMemoryHuddleRegistry()


@pytest.fixture
def app(settings, registry):
    return create_app(settings, registry=registry)


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
