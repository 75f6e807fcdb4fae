"""Provider — the capability interface the simulator's SDK layer must offer.

Everything above this boundary (decoder, polling client, command sender) is
written against :class:`TelemetryProvider` so it can run against the real
shared-memory adapter (:class:`~iracing_feed.telemetry.connection.IRSDKProvider`)
or a deterministic fake in tests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from iracing_feed.telemetry.models import VariableHeader


@runtime_checkable
class TelemetryProvider(Protocol):
    def wait_for_data(self, timeout_ms: int) -> bool:
        """Block up to *timeout_ms* for a new telemetry sample; 0 polls."""
        ...

    def is_connected(self) -> bool: ...

    def get_status_id(self) -> int:
        """Connection status id; changes on every reconnect."""
        ...

    def get_session_update_count(self) -> int: ...

    def was_session_info_updated(self) -> bool:
        """True once per change of the session-info text."""
        ...

    def get_session_text(self) -> str | None: ...

    def get_variable_headers(self) -> list[VariableHeader]: ...

    def read_entry(self, header: VariableHeader, entry: int) -> bytes:
        """Raw bytes of entry *entry* of *header* in the latest sample."""
        ...

    def send_command(self, msg: int, var1: int, var2: int, var3: int = 0) -> None:
        """Send a broadcast message to the simulator."""
        ...
