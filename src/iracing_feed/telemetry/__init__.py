"""Telemetry variable access.

Public API
----------
VariableHeader       - metadata for one telemetry variable
VarType              - SDK variable type ids
TelemetryProvider    - capability interface the SDK layer implements
IRSDKProvider        - provider backed by iRacing shared memory (pyirsdk)
VariableTableDecoder - raw variable slots → typed values
"""

from iracing_feed.telemetry.connection import IRSDKProvider
from iracing_feed.telemetry.decoder import VariableTableDecoder
from iracing_feed.telemetry.models import TelemetryFrame, VariableHeader, VarType
from iracing_feed.telemetry.provider import TelemetryProvider

__all__ = [
    "IRSDKProvider",
    "TelemetryFrame",
    "TelemetryProvider",
    "VarType",
    "VariableHeader",
    "VariableTableDecoder",
]
