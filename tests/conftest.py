"""Shared test doubles: a deterministic in-memory provider."""

from __future__ import annotations

import struct

import pytest

from iracing_feed.telemetry.models import VariableHeader, VarType

_PACK = {
    VarType.CHAR: "<b",
    VarType.BOOL: "<?",
    VarType.INT: "<i",
    VarType.BITFIELD: "<i",
    VarType.FLOAT: "<f",
    VarType.DOUBLE: "<d",
}


def make_header(name: str, type: VarType | int = VarType.FLOAT, count: int = 1, **kwargs) -> VariableHeader:
    """Build a header; offsets are assigned by :class:`FakeProvider`."""
    return VariableHeader(name=name, type=type, count=count, **kwargs)


class FakeProvider:
    """Provider double fed by scripted sequences.

    ``connected`` and ``data_ready`` accept either a bool (constant) or a list
    consumed one item per call; the last item repeats once the list runs out.
    """

    def __init__(
        self,
        variables: dict[str, tuple[VarType | int, list]] | None = None,
        *,
        connected: bool | list[bool] = True,
        data_ready: bool | list[bool] = True,
        session_text: str | None = None,
        session_update_count: int = 1,
    ) -> None:
        self._connected = connected
        self._data_ready = data_ready
        self.session_text = session_text
        self.session_update_count = session_update_count
        self.session_updated: bool | list[bool] = False
        self.headers: list[VariableHeader] = []
        self.buffer = bytearray()
        self.commands: list[tuple] = []
        self.wait_calls: list[int] = []
        self.status_id = 1
        for name, (var_type, values) in (variables or {}).items():
            self.add_variable(name, var_type, values)

    # -- scripting helpers -------------------------------------------------

    @staticmethod
    def _next(value):
        if isinstance(value, list):
            return value.pop(0) if len(value) > 1 else value[0]
        return value

    def add_variable(self, name: str, var_type: VarType | int, values: list, **kwargs) -> VariableHeader:
        offset = len(self.buffer)
        fmt = _PACK.get(var_type)
        if fmt is not None:
            for value in values:
                self.buffer += struct.pack(fmt, value)
        header = VariableHeader(
            name=name, type=var_type, count=len(values), offset=offset, **kwargs
        )
        self.headers.append(header)
        return header

    # -- provider interface ------------------------------------------------

    def wait_for_data(self, timeout_ms: int) -> bool:
        self.wait_calls.append(timeout_ms)
        return self._next(self._data_ready)

    def is_connected(self) -> bool:
        return self._next(self._connected)

    def get_status_id(self) -> int:
        return self.status_id

    def get_session_update_count(self) -> int:
        return self.session_update_count

    def was_session_info_updated(self) -> bool:
        return self._next(self.session_updated)

    def get_session_text(self) -> str | None:
        return self.session_text

    def get_variable_headers(self) -> list[VariableHeader]:
        return list(self.headers)

    def read_entry(self, header: VariableHeader, entry: int) -> bytes:
        size = header.entry_size
        start = header.offset + entry * size
        return bytes(self.buffer[start : start + size])

    def send_command(self, msg: int, var1: int, var2: int, var3: int = 0) -> None:
        self.commands.append((msg, var1, var2, var3))


SAMPLE_SESSION = """\
WeekendInfo:
 TrackName: "Summit Point"
 TrackLength: 3.23
Drivers:
 - CarNumber: "07"
   UserName: Alice
"""


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider(
        {
            "Speed": (VarType.FLOAT, [42.5]),
            "Gear": (VarType.INT, [3]),
            "OnPitRoad": (VarType.BOOL, [False]),
            "CarIdxLap": (VarType.INT, [1, 2, 3]),
        },
        session_text=SAMPLE_SESSION,
    )
