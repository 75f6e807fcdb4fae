"""Tests for IRSDKProvider against a mocked pyirsdk instance."""

from __future__ import annotations

import struct
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from iracing_feed.exceptions import ProviderError
from iracing_feed.telemetry.connection import IRSDKProvider
from iracing_feed.telemetry.models import VariableHeader, VarType

SESSION_OFFSET = 64


def make_sdk(is_initialized: bool = True, is_connected: bool = True) -> MagicMock:
    """Create a mock iRacing SDK."""
    sdk = MagicMock()
    sdk.startup.return_value = is_initialized
    sdk.is_initialized = is_initialized
    sdk.is_connected = is_connected
    sdk.session_info_update = 1
    sdk.is_session_info_utf8 = False
    sdk._var_headers = []
    sdk._header = SimpleNamespace(
        session_info_offset=SESSION_OFFSET,
        session_info_len=0,
        var_buf=[SimpleNamespace(tick_count=1, buf_offset=0)],
    )
    sdk._shared_mem = b""
    return sdk


def with_session_text(sdk: MagicMock, text: bytes, padding: int = 8) -> MagicMock:
    sdk._shared_mem = b"\x00" * SESSION_OFFSET + text + b"\x00" * padding
    sdk._header.session_info_len = len(text) + padding
    return sdk


# ---------------------------------------------------------------------------
# connect()
# ---------------------------------------------------------------------------

def test_connect_returns_true_when_already_initialized():
    sdk = make_sdk(is_initialized=True)
    assert IRSDKProvider(sdk=sdk).connect() is True
    sdk.startup.assert_not_called()


def test_connect_calls_sdk_startup():
    sdk = make_sdk(is_initialized=False)
    sdk.startup.return_value = True
    assert IRSDKProvider(sdk=sdk).connect() is True
    sdk.startup.assert_called_once()


def test_connect_returns_false_when_iracing_not_running():
    sdk = make_sdk(is_initialized=False)
    assert IRSDKProvider(sdk=sdk).connect() is False


def test_connect_does_not_raise_when_sdk_fails(caplog):
    sdk = make_sdk(is_initialized=False)
    sdk.startup.side_effect = OSError("shared memory not available")
    provider = IRSDKProvider(sdk=sdk)
    with caplog.at_level("WARNING"):
        assert provider.connect() is False
        assert provider.connect() is False
    warnings = [r for r in caplog.records if r.levelname == "WARNING"]
    assert len(warnings) == 1


def test_disconnect_calls_shutdown():
    sdk = make_sdk()
    IRSDKProvider(sdk=sdk).disconnect()
    sdk.shutdown.assert_called_once()


# ---------------------------------------------------------------------------
# Connection state and status id
# ---------------------------------------------------------------------------

def test_is_connected_requires_initialized_and_connected():
    assert IRSDKProvider(sdk=make_sdk(True, True)).is_connected() is True
    assert IRSDKProvider(sdk=make_sdk(True, False)).is_connected() is False
    assert IRSDKProvider(sdk=make_sdk(False, True)).is_connected() is False


def test_status_id_increments_on_each_new_connection():
    sdk = make_sdk()
    provider = IRSDKProvider(sdk=sdk)
    assert provider.get_status_id() == 0
    provider.is_connected()
    provider.is_connected()
    assert provider.get_status_id() == 1
    sdk.is_connected = False
    provider.is_connected()
    sdk.is_connected = True
    provider.is_connected()
    assert provider.get_status_id() == 2


# ---------------------------------------------------------------------------
# wait_for_data()
# ---------------------------------------------------------------------------

def test_wait_for_data_true_on_new_tick():
    assert IRSDKProvider(sdk=make_sdk()).wait_for_data(0) is True


def test_wait_for_data_false_when_tick_unchanged():
    provider = IRSDKProvider(sdk=make_sdk())
    provider.wait_for_data(0)
    assert provider.wait_for_data(0) is False


def test_wait_for_data_false_when_disconnected():
    assert IRSDKProvider(sdk=make_sdk(is_connected=False)).wait_for_data(0) is False


def test_wait_for_data_latches_newest_buffer():
    sdk = make_sdk()
    sdk._header.var_buf = [
        SimpleNamespace(tick_count=5, buf_offset=100),
        SimpleNamespace(tick_count=9, buf_offset=200),
        SimpleNamespace(tick_count=7, buf_offset=300),
    ]
    sdk._shared_mem = b"\x00" * 200 + struct.pack("<i", 77)
    provider = IRSDKProvider(sdk=sdk)
    assert provider.wait_for_data(0) is True
    header = VariableHeader(name="Gear", type=VarType.INT, offset=0)
    assert provider.read_entry(header, 0) == struct.pack("<i", 77)


# ---------------------------------------------------------------------------
# Session info
# ---------------------------------------------------------------------------

def test_session_text_strips_nul_padding():
    sdk = with_session_text(make_sdk(), b"WeekendInfo:\n TrackID: 1\n")
    assert IRSDKProvider(sdk=sdk).get_session_text() == "WeekendInfo:\n TrackID: 1\n"


def test_session_text_decodes_cp1252():
    sdk = with_session_text(make_sdk(), "UserName: José\n".encode("cp1252"))
    assert IRSDKProvider(sdk=sdk).get_session_text() == "UserName: José\n"


def test_session_text_decodes_utf8_when_flagged():
    sdk = with_session_text(make_sdk(), "UserName: Łukasz Ørsted\n".encode("utf-8"))
    sdk.is_session_info_utf8 = True
    assert IRSDKProvider(sdk=sdk).get_session_text() == "UserName: Łukasz Ørsted\n"


def test_session_text_utf8_bytes_without_flag_use_cp1252():
    raw = "UserName: José\n".encode("utf-8")
    sdk = with_session_text(make_sdk(), raw)
    assert IRSDKProvider(sdk=sdk).get_session_text() == raw.decode("cp1252")


def test_session_text_none_when_empty():
    sdk = with_session_text(make_sdk(), b"")
    assert IRSDKProvider(sdk=sdk).get_session_text() is None


def test_session_text_none_when_not_initialized():
    assert IRSDKProvider(sdk=make_sdk(is_initialized=False)).get_session_text() is None


def test_was_session_info_updated_once_per_count():
    sdk = make_sdk()
    provider = IRSDKProvider(sdk=sdk)
    assert provider.was_session_info_updated() is True
    assert provider.was_session_info_updated() is False
    sdk.session_info_update = 2
    assert provider.get_session_update_count() == 2
    assert provider.was_session_info_updated() is True


# ---------------------------------------------------------------------------
# Variable headers and reads
# ---------------------------------------------------------------------------

def test_variable_headers_are_converted():
    sdk = make_sdk()
    sdk._var_headers = [
        SimpleNamespace(
            name="Speed", type=4, count=1, offset=8, count_as_time=0,
            desc="GPS vehicle speed", unit="m/s",
        ),
    ]
    (header,) = IRSDKProvider(sdk=sdk).get_variable_headers()
    assert header == VariableHeader(
        name="Speed", type=VarType.FLOAT, count=1, offset=8,
        count_as_time=False, desc="GPS vehicle speed", unit="m/s",
    )


def test_variable_headers_empty_when_not_initialized():
    assert IRSDKProvider(sdk=make_sdk(is_initialized=False)).get_variable_headers() == []


def test_read_entry_uses_entry_stride():
    sdk = make_sdk()
    sdk._shared_mem = struct.pack("<3f", 1.0, 2.0, 3.0)
    header = VariableHeader(name="CarIdxRPM", type=VarType.FLOAT, count=3)
    assert IRSDKProvider(sdk=sdk).read_entry(header, 2) == struct.pack("<f", 3.0)


def test_read_entry_unknown_type_raises():
    header = VariableHeader(name="Mystery", type=99)
    with pytest.raises(ProviderError):
        IRSDKProvider(sdk=make_sdk()).read_entry(header, 0)


# ---------------------------------------------------------------------------
# Broadcast
# ---------------------------------------------------------------------------

def test_send_command_forwards_to_sdk():
    sdk = make_sdk()
    IRSDKProvider(sdk=sdk).send_command(9, 2, 50, 0)
    sdk._broadcast_msg.assert_called_once_with(9, 2, 50, 0)


def test_send_command_wraps_sdk_errors():
    sdk = make_sdk()
    sdk._broadcast_msg.side_effect = OSError("no window")
    with pytest.raises(ProviderError):
        IRSDKProvider(sdk=sdk).send_command(0, 1, 0)
