"""IRSDKProvider — exposes iRacing shared memory through the provider interface."""

from __future__ import annotations

import contextlib
import logging
import time
from collections.abc import Iterator
from typing import Any

from iracing_feed.exceptions import ProviderError
from iracing_feed.telemetry.models import VariableHeader, coerce_var_type

_logger = logging.getLogger(__name__)

# Older sim builds write session info in Windows-1252; newer ones flag UTF-8.
_LEGACY_SESSION_ENCODING = "cp1252"
_WAIT_STEP_S = 0.001


@contextlib.contextmanager
def _sdk_errors(action: str) -> Iterator[None]:
    """Re-raise anything the SDK throws as :class:`ProviderError`."""
    try:
        yield
    except ProviderError:
        raise
    except Exception as exc:
        raise ProviderError(f"iRacing SDK {action} failed: {exc}") from exc


class IRSDKProvider:
    """Provider backed by the pyirsdk shared-memory reader.

    Parameters
    ----------
    sdk:
        An iRacing SDK instance (``irsdk.IRSDK()``). Injected for testability;
        defaults to the real SDK when not provided.
    """

    def __init__(self, sdk: Any | None = None) -> None:
        if sdk is None:
            import irsdk  # lazy import — irsdk is only needed at runtime

            sdk = irsdk.IRSDK()
        self._sdk = sdk
        self._status_id = 0
        self._was_connected = False
        self._last_tick: int | None = None
        self._buf_offset = 0
        self._last_session_update: int | None = None
        self._startup_failed_logged = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def connect(self) -> bool:
        """Open the SDK's shared memory if it is not open yet.

        Returns
        -------
        bool
            True if the memory map is open. False otherwise (never raises).
        """
        if self._sdk.is_initialized:
            return True
        try:
            initialized = bool(self._sdk.startup())
        except Exception as exc:
            if not self._startup_failed_logged:
                _logger.warning("iRacing SDK startup failed: %s", exc)
                self._startup_failed_logged = True
            initialized = False

        if initialized:
            _logger.info("iRacing SDK shared memory opened")
            self._startup_failed_logged = False
        return initialized

    def disconnect(self) -> None:
        """Close the shared memory; the next wait re-opens it."""
        self._sdk.shutdown()
        self._was_connected = False
        self._last_tick = None
        self._last_session_update = None

    # ------------------------------------------------------------------
    # Provider interface
    # ------------------------------------------------------------------

    def wait_for_data(self, timeout_ms: int) -> bool:
        """Poll until the latest variable buffer advances or *timeout_ms* elapses."""
        deadline = time.monotonic() + max(timeout_ms, 0) / 1000.0
        while True:
            if self.connect() and self.is_connected() and self._advance_buffer():
                return True
            if time.monotonic() >= deadline:
                return False
            time.sleep(_WAIT_STEP_S)

    def is_connected(self) -> bool:
        with _sdk_errors("connection check"):
            connected = bool(self._sdk.is_initialized and self._sdk.is_connected)
        if connected and not self._was_connected:
            self._status_id += 1
        self._was_connected = connected
        return connected

    def get_status_id(self) -> int:
        return self._status_id

    def get_session_update_count(self) -> int:
        with _sdk_errors("session update count"):
            return int(self._sdk.session_info_update)

    def was_session_info_updated(self) -> bool:
        count = self.get_session_update_count()
        if count == self._last_session_update:
            return False
        self._last_session_update = count
        return True

    def get_session_text(self) -> str | None:
        if not self._sdk.is_initialized:
            return None
        with _sdk_errors("session info read"):
            header = self._sdk._header
            start = header.session_info_offset
            raw = bytes(self._sdk._shared_mem[start : start + header.session_info_len])
            encoding = "utf-8" if self._sdk.is_session_info_utf8 else _LEGACY_SESSION_ENCODING
        text = raw.rstrip(b"\x00").decode(encoding, errors="replace")
        return text or None

    def get_variable_headers(self) -> list[VariableHeader]:
        if not self._sdk.is_initialized:
            return []
        with _sdk_errors("variable header read"):
            return [
                VariableHeader(
                    name=vh.name,
                    type=coerce_var_type(vh.type),
                    count=vh.count,
                    offset=vh.offset,
                    count_as_time=bool(vh.count_as_time),
                    desc=vh.desc,
                    unit=vh.unit,
                )
                for vh in self._sdk._var_headers
            ]

    def read_entry(self, header: VariableHeader, entry: int) -> bytes:
        size = header.entry_size
        if size is None:
            raise ProviderError(f"unknown variable type {header.type!r} for {header.name!r}")
        start = self._buf_offset + header.offset + entry * size
        with _sdk_errors("variable read"):
            return bytes(self._sdk._shared_mem[start : start + size])

    def send_command(self, msg: int, var1: int, var2: int, var3: int = 0) -> None:
        with _sdk_errors("broadcast"):
            self._sdk._broadcast_msg(msg, var1, var2, var3)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _advance_buffer(self) -> bool:
        """Latch the newest variable buffer; True if it is newer than the last one seen."""
        with _sdk_errors("variable buffer lookup"):
            latest = max(self._sdk._header.var_buf, key=lambda buf: buf.tick_count)
            tick, offset = latest.tick_count, latest.buf_offset
        if tick == self._last_tick:
            return False
        self._last_tick = tick
        self._buf_offset = offset
        return True
