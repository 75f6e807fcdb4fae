"""Shared fixtures for web tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from iracing_feed.client.options import ClientOptions
from iracing_feed.client.poller import TelemetryClient
from iracing_feed.web.app import app, get_service
from iracing_feed.web.service import FeedService
from tests.conftest import FakeProvider


@pytest.fixture
def feed(provider: FakeProvider) -> FeedService:
    """Feed service wired to the in-memory provider; nothing polled yet."""
    return FeedService(TelemetryClient(provider, ClientOptions()))


@pytest.fixture
def client(feed):
    """FastAPI test client bound to *feed*."""
    app.dependency_overrides[get_service] = lambda: feed
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
