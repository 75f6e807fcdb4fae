"""TelemetryClient — polling loop that turns provider signals into ordered events."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from iracing_feed.client.commands import CommandSender
from iracing_feed.client.options import ClientOptions
from iracing_feed.session.parser import SessionInfoParser, SessionNode
from iracing_feed.telemetry.decoder import VariableTableDecoder
from iracing_feed.telemetry.models import TelemetryFrame, TelemetryValue, VariableHeader

_logger = logging.getLogger(__name__)

EVENT_CONNECT = "connect"
EVENT_DISCONNECT = "disconnect"
EVENT_SESSION = "session"
EVENT_TELEMETRY = "telemetry"
EVENT_ERROR = "error"

EVENTS = frozenset({EVENT_CONNECT, EVENT_DISCONNECT, EVENT_SESSION, EVENT_TELEMETRY, EVENT_ERROR})


@dataclass(frozen=True)
class SessionUpdate:
    """Payload of a ``session`` event."""

    update_count: int
    session_info: dict[str, SessionNode]

    def to_dict(self) -> dict[str, Any]:
        return {"updateCount": self.update_count, "sessionInfo": self.session_info}


class TelemetryClient:
    """Polls a provider every ``poll_interval_ms`` and emits events.

    Events, emitted synchronously on the polling thread in this order within
    a tick: ``connect`` / ``disconnect``, ``session``, ``telemetry``.
    Any exception raised during a tick is emitted as ``error`` and the loop
    keeps running.

    Parameters
    ----------
    provider:
        A :class:`~iracing_feed.telemetry.provider.TelemetryProvider`. Injected
        for testability; defaults to the shared-memory provider.
    options:
        Polling options; defaults to :class:`ClientOptions` defaults.
    """

    def __init__(self, provider: Any | None = None, options: ClientOptions | None = None) -> None:
        if provider is None:
            from iracing_feed.telemetry.connection import IRSDKProvider

            provider = IRSDKProvider()
        self._provider = provider
        self._options = options or ClientOptions()
        self._decoder = VariableTableDecoder(provider)
        self._parser = SessionInfoParser()
        self._commands = CommandSender(provider)

        self._interval = self._options.poll_interval_ms / 1000.0
        self._wait_timeout_ms = int(self._options.wait_timeout_ms)
        self._use_all_telemetry = self._options.use_all_variables
        self._telemetry_vars: list[str] = list(self._options.telemetry_variables or [])
        self._emit_session_on_connect = self._options.emit_session_on_connect

        self._connected = False
        self._last_session_update = -1
        self._listeners: dict[str, list[Callable[..., None]]] = {name: [] for name in EVENTS}
        self._tick_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def on(self, event: str, listener: Callable[..., None]) -> None:
        """Register *listener* for *event* (one of :data:`EVENTS`)."""
        if event not in EVENTS:
            raise ValueError(f"unknown event {event!r}")
        self._listeners[event].append(listener)

    def off(self, event: str, listener: Callable[..., None]) -> None:
        """Remove a listener registered with :meth:`on` or :meth:`once`."""
        listeners = self._listeners.get(event, [])
        for registered in listeners:
            if registered == listener or getattr(registered, "_once_target", None) == listener:
                listeners.remove(registered)
                return

    def once(self, event: str, listener: Callable[..., None]) -> None:
        """Register *listener* for the next *event* only."""

        def _wrapper(*args: Any) -> None:
            self.off(event, _wrapper)
            listener(*args)

        _wrapper._once_target = listener  # type: ignore[attr-defined]
        self.on(event, _wrapper)

    # ------------------------------------------------------------------
    # Configuration and state
    # ------------------------------------------------------------------

    @property
    def connected(self) -> bool:
        """Connection state as last observed by a tick."""
        return self._connected

    @property
    def last_session_update(self) -> int:
        """Session update counter of the last emitted snapshot, -1 before the first."""
        return self._last_session_update

    @property
    def is_polling(self) -> bool:
        return self._thread is not None

    @property
    def commands(self) -> CommandSender:
        """Broadcast command sender bound to this client's provider."""
        return self._commands

    def set_telemetry_variables(self, names: list[str] | None) -> None:
        """Replace the variables read on each tick and leave all-variables mode.

        An empty list suppresses ``telemetry`` events until reconfigured.
        """
        self._telemetry_vars = list(names) if isinstance(names, (list, tuple)) else []
        self._use_all_telemetry = False

    # ------------------------------------------------------------------
    # Provider pass-throughs
    # ------------------------------------------------------------------

    def is_connected(self) -> bool:
        return self._provider.is_connected()

    def get_status_id(self) -> int:
        return self._provider.get_status_id()

    def get_session_info(self) -> dict[str, SessionNode] | None:
        """Parse the provider's current session text; None if there is none."""
        return self._parser.parse(self._provider.get_session_text())

    def read_vars(self, names: list[str] | None = None) -> TelemetryFrame:
        """Read *names*, defaulting to the configured variable list."""
        return self._decoder.read_vars(self._telemetry_vars if names is None else names)

    def read_all_vars(self) -> TelemetryFrame | None:
        return self._decoder.read_all_vars()

    def get_var_headers(self) -> list[VariableHeader]:
        return self._decoder.headers()

    def get_var_value(self, name: str, entry: int | None = None) -> TelemetryValue:
        return self._decoder.read_value(name, entry)

    # ------------------------------------------------------------------
    # Polling loop
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the background polling thread. No-op while already polling."""
        if self.is_polling:
            return
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, args=(self._stop_event,), daemon=True, name="TelemetryClient"
        )
        self._thread.start()
        _logger.info("Polling started (interval %.0f ms)", self._interval * 1000)

    def stop(self) -> None:
        """Stop scheduling ticks. An in-flight tick runs to completion."""
        thread = self._thread
        if thread is None:
            return
        self._stop_event.set()
        self._thread = None
        if thread is not threading.current_thread():
            thread.join(timeout=2.0)
        _logger.info("Polling stopped")

    def tick(self) -> None:
        """Run one poll-and-emit cycle.

        Ticks never overlap: a call made while another tick is running, for
        example from a listener, returns without polling.
        """
        if not self._tick_lock.acquire(blocking=False):
            return
        try:
            self._tick()
        except Exception as exc:
            self._emit_error(exc)
        finally:
            self._tick_lock.release()

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            t0 = time.monotonic()
            self.tick()
            elapsed = time.monotonic() - t0
            wait = self._interval - elapsed
            if wait > 0:
                stop_event.wait(wait)

    def _tick(self) -> None:
        had_data = self._provider.wait_for_data(self._wait_timeout_ms)
        is_connected = self._provider.is_connected()

        if is_connected and not self._connected:
            self._connected = True
            _logger.info("Connected to iRacing")
            self._emit(EVENT_CONNECT)
            if self._emit_session_on_connect:
                self._emit_session_update()
        elif not is_connected and self._connected:
            self._connected = False
            _logger.info("Disconnected from iRacing")
            self._emit(EVENT_DISCONNECT)

        if not is_connected or not had_data:
            return

        if self._provider.was_session_info_updated():
            self._emit_session_update()

        if self._use_all_telemetry:
            telemetry = self._decoder.read_all_vars()
        elif self._telemetry_vars:
            telemetry = self._decoder.read_vars(self._telemetry_vars)
        else:
            telemetry = None
        if telemetry is not None:
            _logger.debug("Telemetry frame with %d variables", len(telemetry))
            self._emit(EVENT_TELEMETRY, telemetry)

    def _emit_session_update(self) -> None:
        session_info = self.get_session_info()
        if session_info is None:
            return
        self._last_session_update = self._provider.get_session_update_count()
        _logger.debug("Session info update %d", self._last_session_update)
        self._emit(EVENT_SESSION, SessionUpdate(self._last_session_update, session_info))

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------

    def _emit(self, event: str, *args: Any) -> None:
        for listener in list(self._listeners[event]):
            listener(*args)

    def _emit_error(self, exc: Exception) -> None:
        listeners = list(self._listeners[EVENT_ERROR])
        if not listeners:
            _logger.error("Unhandled error during poll tick", exc_info=exc)
            return
        for listener in listeners:
            try:
                listener(exc)
            except Exception:
                _logger.exception("Error listener %r failed", listener)
