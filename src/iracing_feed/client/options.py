"""Client configuration for the polling client."""

from __future__ import annotations

import dataclasses
import math
import os
from typing import Any

DEFAULT_POLL_INTERVAL_MS = 16
DEFAULT_WAIT_TIMEOUT_MS = 0


def env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _finite_or(value: Any, default: float) -> float:
    """Return *value* if it is a finite number, else *default*."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if not math.isfinite(value):
        return default
    return value


def _env_number(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return math.nan


@dataclasses.dataclass(frozen=True)
class ClientOptions:
    """Polling client options.

    Parameters
    ----------
    poll_interval_ms : float
        Delay between ticks. Non-finite or non-numeric values fall back to 16.
    wait_timeout_ms : float
        How long each tick blocks waiting for new data; 0 polls without
        blocking. Non-finite or non-numeric values fall back to 0.
    telemetry_variables : list[str] or None
        Variables to read on each tick. ``None`` reads every variable;
        any list, even an empty one, restricts reads to that list.
    emit_session_on_connect : bool
        Emit a ``session`` event right after ``connect``.
    """

    poll_interval_ms: float = DEFAULT_POLL_INTERVAL_MS
    wait_timeout_ms: float = DEFAULT_WAIT_TIMEOUT_MS
    telemetry_variables: list[str] | None = None
    emit_session_on_connect: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "poll_interval_ms", _finite_or(self.poll_interval_ms, DEFAULT_POLL_INTERVAL_MS)
        )
        object.__setattr__(
            self, "wait_timeout_ms", _finite_or(self.wait_timeout_ms, DEFAULT_WAIT_TIMEOUT_MS)
        )
        if self.telemetry_variables is not None:
            names = self.telemetry_variables
            copied = list(names) if isinstance(names, (list, tuple)) else []
            object.__setattr__(self, "telemetry_variables", copied)
        object.__setattr__(self, "emit_session_on_connect", self.emit_session_on_connect is not False)

    @property
    def use_all_variables(self) -> bool:
        return self.telemetry_variables is None

    @classmethod
    def from_env(cls, **overrides: Any) -> ClientOptions:
        """Create options from ``IRACING_FEED_*`` environment variables.

        Reads ``IRACING_FEED_POLL_INTERVAL_MS``, ``IRACING_FEED_WAIT_TIMEOUT_MS``,
        ``IRACING_FEED_TELEMETRY_VARS`` (comma-separated) and
        ``IRACING_FEED_EMIT_SESSION_ON_CONNECT``. Explicit keyword arguments
        override environment values.
        """
        env = os.environ
        kwargs: dict[str, Any] = {}

        interval = _env_number(env.get("IRACING_FEED_POLL_INTERVAL_MS"))
        if interval is not None:
            kwargs["poll_interval_ms"] = interval

        timeout = _env_number(env.get("IRACING_FEED_WAIT_TIMEOUT_MS"))
        if timeout is not None:
            kwargs["wait_timeout_ms"] = timeout

        names = env.get("IRACING_FEED_TELEMETRY_VARS")
        if names is not None:
            kwargs["telemetry_variables"] = [n.strip() for n in names.split(",") if n.strip()]

        kwargs["emit_session_on_connect"] = env_bool(
            env.get("IRACING_FEED_EMIT_SESSION_ON_CONNECT"), True
        )

        kwargs.update(overrides)
        return cls(**kwargs)
