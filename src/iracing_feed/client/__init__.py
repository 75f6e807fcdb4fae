"""Polling client, options, car-number codec and broadcast commands.

Public API
----------
TelemetryClient   - polls a provider and emits connect/disconnect/session/telemetry/error
ClientOptions     - polling configuration (``from_env()`` reads IRACING_FEED_*)
SessionUpdate     - payload of the ``session`` event
CommandSender     - camera/replay/pit/chat broadcast messages
encode_car_number - car number → padded SDK integer
"""

from iracing_feed.client.commands import BroadcastMsg, CommandSender
from iracing_feed.client.identifier import encode_car_number, pad_car_num
from iracing_feed.client.options import ClientOptions
from iracing_feed.client.poller import SessionUpdate, TelemetryClient

__all__ = [
    "BroadcastMsg",
    "ClientOptions",
    "CommandSender",
    "SessionUpdate",
    "TelemetryClient",
    "encode_car_number",
    "pad_car_num",
]
