"""Telemetry data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class VarType(IntEnum):
    """iRacing variable types, with the SDK's numeric values."""

    CHAR = 0
    BOOL = 1
    INT = 2
    BITFIELD = 3
    FLOAT = 4
    DOUBLE = 5


# Byte width of one entry of each type.
VAR_TYPE_SIZES: dict[VarType, int] = {
    VarType.CHAR: 1,
    VarType.BOOL: 1,
    VarType.INT: 4,
    VarType.BITFIELD: 4,
    VarType.FLOAT: 4,
    VarType.DOUBLE: 8,
}

TelemetryValue = bool | int | float | None
TelemetryEntry = TelemetryValue | list[TelemetryValue]
TelemetryFrame = dict[str, TelemetryEntry]
"""Variable name → scalar (``count == 1``) or list of ``count`` entries."""


def coerce_var_type(raw: int) -> VarType | int:
    """Return the :class:`VarType` for *raw*, or *raw* itself if it is unknown."""
    try:
        return VarType(raw)
    except ValueError:
        return raw


@dataclass(frozen=True)
class VariableHeader:
    """Metadata describing one telemetry variable in the SDK's header table."""

    name: str
    type: VarType | int
    count: int = 1
    offset: int = 0
    count_as_time: bool = False
    desc: str = ""
    unit: str = ""

    @property
    def entry_size(self) -> int | None:
        """Byte width of one entry, or None for an unknown type."""
        if isinstance(self.type, VarType):
            return VAR_TYPE_SIZES[self.type]
        return None

    def to_dict(self) -> dict[str, Any]:
        """Export shape consumed by JSON clients."""
        return {
            "name": self.name,
            "type": int(self.type),
            "count": self.count,
            "offset": self.offset,
            "countAsTime": self.count_as_time,
            "desc": self.desc,
            "unit": self.unit,
        }
