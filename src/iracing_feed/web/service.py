"""FeedService — keeps the latest session and telemetry payloads of a TelemetryClient."""

from __future__ import annotations

import threading
from typing import Any

from iracing_feed.client.poller import (
    EVENT_ERROR,
    EVENT_SESSION,
    EVENT_TELEMETRY,
    SessionUpdate,
    TelemetryClient,
)
from iracing_feed.telemetry.models import TelemetryFrame


class FeedService:
    """Subscribes to *client* and caches what the Web API serves.

    Parameters
    ----------
    client:
        The polling client to observe. Its polling loop is driven by
        :meth:`start` / :meth:`stop`.
    """

    def __init__(self, client: TelemetryClient) -> None:
        self._client = client
        self._lock = threading.Lock()
        self._session: SessionUpdate | None = None
        self._telemetry: TelemetryFrame | None = None
        self._last_error: str | None = None
        client.on(EVENT_SESSION, self._on_session)
        client.on(EVENT_TELEMETRY, self._on_telemetry)
        client.on(EVENT_ERROR, self._on_error)

    @property
    def client(self) -> TelemetryClient:
        return self._client

    def start(self) -> None:
        self._client.start()

    def stop(self) -> None:
        self._client.stop()

    def latest_session(self) -> SessionUpdate | None:
        with self._lock:
            return self._session

    def latest_telemetry(self) -> TelemetryFrame | None:
        with self._lock:
            return self._telemetry

    def last_error(self) -> str | None:
        with self._lock:
            return self._last_error

    def status(self) -> dict[str, Any]:
        return {
            "connected": self._client.connected,
            "polling": self._client.is_polling,
            "status_id": self._client.get_status_id(),
            "session_update_count": self._client.last_session_update,
            "last_error": self.last_error(),
        }

    # ------------------------------------------------------------------
    # Event handlers (run on the polling thread)
    # ------------------------------------------------------------------

    def _on_session(self, update: SessionUpdate) -> None:
        with self._lock:
            self._session = update

    def _on_telemetry(self, frame: TelemetryFrame) -> None:
        with self._lock:
            self._telemetry = frame

    def _on_error(self, exc: Exception) -> None:
        with self._lock:
            self._last_error = str(exc)
