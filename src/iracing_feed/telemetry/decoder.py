"""VariableTableDecoder — turns raw telemetry slots into typed Python values."""

from __future__ import annotations

import struct
from collections.abc import Iterable
from typing import Any

from iracing_feed.exceptions import OutOfRangeError
from iracing_feed.telemetry.models import (
    TelemetryEntry,
    TelemetryFrame,
    TelemetryValue,
    VariableHeader,
    VarType,
)

# VarType → little-endian struct format of one entry.
# char/int/bitfield all decode as signed ints, matching the SDK's getVarInt().
_FORMATS: dict[VarType, struct.Struct] = {
    VarType.CHAR: struct.Struct("<b"),
    VarType.BOOL: struct.Struct("<?"),
    VarType.INT: struct.Struct("<i"),
    VarType.BITFIELD: struct.Struct("<i"),
    VarType.FLOAT: struct.Struct("<f"),
    VarType.DOUBLE: struct.Struct("<d"),
}


class VariableTableDecoder:
    """Decodes telemetry variables exposed by a provider.

    Parameters
    ----------
    provider:
        Object implementing :class:`~iracing_feed.telemetry.provider.TelemetryProvider`.
        Only ``is_connected``, ``get_variable_headers`` and ``read_entry`` are used.
    """

    def __init__(self, provider: Any) -> None:
        self._provider = provider

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def decode(self, header: VariableHeader, entry: int = 0) -> TelemetryValue:
        """Return entry *entry* of *header* as bool/int/float, or None for an unknown type.

        Raises
        ------
        OutOfRangeError
            If *entry* is outside ``[0, header.count)``.
        """
        if entry < 0 or entry >= header.count:
            raise OutOfRangeError(
                f"entry index {entry} out of range for {header.name!r} (count={header.count})"
            )
        fmt = _FORMATS.get(header.type) if isinstance(header.type, VarType) else None
        if fmt is None:
            return None
        raw = self._provider.read_entry(header, entry)
        (value,) = fmt.unpack_from(raw)
        if header.type in (VarType.FLOAT, VarType.DOUBLE):
            return float(value)
        if header.type == VarType.BOOL:
            return bool(value)
        return int(value)

    def decode_entry(self, header: VariableHeader) -> TelemetryEntry:
        """Return a scalar for single-entry variables, otherwise every entry in index order."""
        if header.count <= 1:
            return self.decode(header, 0)
        return [self.decode(header, i) for i in range(header.count)]

    def headers(self) -> list[VariableHeader]:
        """Return the provider's header table in declaration order."""
        return list(self._provider.get_variable_headers())

    def export_headers(self) -> list[dict[str, Any]]:
        return [h.to_dict() for h in self.headers()]

    def find(self, name: str) -> VariableHeader | None:
        for header in self._provider.get_variable_headers():
            if header.name == name:
                return header
        return None

    def read_value(self, name: str, entry: int | None = None) -> TelemetryValue:
        """Return one entry of variable *name* (default entry 0); None if the name is unknown."""
        header = self.find(name)
        if header is None:
            return None
        return self.decode(header, 0 if entry is None else entry)

    def read_vars(self, names: Iterable[str]) -> TelemetryFrame:
        """Read the named variables. Unknown names map to None; never returns None."""
        by_name = {h.name: h for h in self._provider.get_variable_headers()}
        frame: TelemetryFrame = {}
        for name in names:
            if not isinstance(name, str):
                continue
            header = by_name.get(name)
            frame[name] = None if header is None else self.decode_entry(header)
        return frame

    def read_all_vars(self) -> TelemetryFrame | None:
        """Read every declared variable; None while the provider is disconnected."""
        if not self._provider.is_connected():
            return None
        frame: TelemetryFrame = {}
        for header in self._provider.get_variable_headers():
            if not header.name:
                continue
            frame[header.name] = self.decode_entry(header)
        return frame
