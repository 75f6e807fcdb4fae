"""Broadcast commands — camera, replay, pit and chat control messages for the sim."""

from __future__ import annotations

from enum import IntEnum, IntFlag
from typing import Any

from iracing_feed.client.identifier import encode_car_number


class BroadcastMsg(IntEnum):
    CAM_SWITCH_POS = 0
    CAM_SWITCH_NUM = 1
    CAM_SET_STATE = 2
    REPLAY_SET_PLAY_SPEED = 3
    REPLAY_SET_PLAY_POSITION = 4
    REPLAY_SEARCH = 5
    REPLAY_SET_STATE = 6
    RELOAD_TEXTURES = 7
    CHAT_COMMAND = 8
    PIT_COMMAND = 9
    TELEM_COMMAND = 10
    FFB_COMMAND = 11
    REPLAY_SEARCH_SESSION_TIME = 12
    VIDEO_CAPTURE = 13


class ChatCommandMode(IntEnum):
    MACRO = 0
    BEGIN_CHAT = 1
    REPLY = 2
    CANCEL = 3


class PitCommandMode(IntEnum):
    CLEAR = 0
    WS = 1
    FUEL = 2
    LF = 3
    RF = 4
    LR = 5
    RR = 6
    CLEAR_TIRES = 7
    FR = 8
    CLEAR_WS = 9
    CLEAR_FR = 10
    CLEAR_FUEL = 11
    TC = 12


class TelemCommandMode(IntEnum):
    STOP = 0
    START = 1
    RESTART = 2


class FFBCommandMode(IntEnum):
    MAX_FORCE = 0


class CameraState(IntFlag):
    IS_SESSION_SCREEN = 0x0001
    IS_SCENIC_ACTIVE = 0x0002
    CAM_TOOL_ACTIVE = 0x0004
    UI_HIDDEN = 0x0008
    USE_AUTO_SHOT_SELECTION = 0x0010
    USE_TEMPORARY_EDITS = 0x0020
    USE_KEY_ACCELERATION = 0x0040
    USE_KEY_10X_ACCELERATION = 0x0080
    USE_MOUSE_AIM_MODE = 0x0100


class ReplaySearchMode(IntEnum):
    TO_START = 0
    TO_END = 1
    PREV_SESSION = 2
    NEXT_SESSION = 3
    PREV_LAP = 4
    NEXT_LAP = 5
    PREV_FRAME = 6
    NEXT_FRAME = 7
    PREV_INCIDENT = 8
    NEXT_INCIDENT = 9


class ReplayPositionMode(IntEnum):
    BEGIN = 0
    CURRENT = 1
    END = 2


class ReplayStateMode(IntEnum):
    ERASE_TAPE = 0


class ReloadTexturesMode(IntEnum):
    ALL = 0
    CAR_IDX = 1


class VideoCaptureMode(IntEnum):
    TRIGGER_SCREEN_SHOT = 0
    START_VIDEO_CAPTURE = 1
    END_VIDEO_CAPTURE = 2
    TOGGLE_VIDEO_CAPTURE = 3
    SHOW_VIDEO_TIMER = 4
    HIDE_VIDEO_TIMER = 5


class CameraFocusMode(IntEnum):
    """Special car positions accepted by the camera switch messages."""

    FOCUS_AT_INCIDENT = -3
    FOCUS_AT_LEADER = -2
    FOCUS_AT_EXITING = -1
    FOCUS_AT_DRIVER = 0


def _split_words(value: int) -> tuple[int, int]:
    """Split a 32-bit value into its low and high 16-bit words."""
    return value & 0xFFFF, (value >> 16) & 0xFFFF


class CommandSender:
    """Sends broadcast messages through a provider's ``send_command``.

    Parameters
    ----------
    provider:
        Object implementing
        :meth:`~iracing_feed.telemetry.provider.TelemetryProvider.send_command`.
    """

    def __init__(self, provider: Any) -> None:
        self._provider = provider

    def broadcast(self, msg: int, var1: int | str, var2: int, var3: int | None = None) -> None:
        """Send a raw broadcast message.

        ``var1`` is run through the car-number codec for ``CAM_SWITCH_NUM``.
        """
        if msg == BroadcastMsg.CAM_SWITCH_NUM:
            var1 = encode_car_number(var1)
        if var3 is None:
            self._provider.send_command(int(msg), int(var1), int(var2))
        else:
            self._provider.send_command(int(msg), int(var1), int(var2), int(var3))

    def broadcast_float(self, msg: int, var1: int, value: float) -> None:
        """Send a message whose second parameter is a 16.16 fixed-point float."""
        self._provider.send_command(int(msg), int(var1), int(value * 65536.0))

    def switch_camera_by_pos(self, car_pos: int, group: int, camera: int) -> None:
        self.broadcast(BroadcastMsg.CAM_SWITCH_POS, car_pos, group, camera)

    def switch_camera_by_num(self, driver_num: int | str, group: int, camera: int) -> None:
        """Focus the camera on car *driver_num*; ``"07"`` and ``"7"`` are different cars."""
        self.broadcast(BroadcastMsg.CAM_SWITCH_NUM, driver_num, group, camera)

    def set_camera_state(self, camera_state: int) -> None:
        self.broadcast(BroadcastMsg.CAM_SET_STATE, camera_state, 0)

    def replay_set_play_speed(self, speed: int, slow_motion: int = 0) -> None:
        self.broadcast(BroadcastMsg.REPLAY_SET_PLAY_SPEED, speed, slow_motion)

    def replay_set_play_position(self, mode: int, frame_number: int) -> None:
        low, high = _split_words(frame_number)
        self.broadcast(BroadcastMsg.REPLAY_SET_PLAY_POSITION, mode, low, high)

    def replay_search(self, mode: int) -> None:
        self.broadcast(BroadcastMsg.REPLAY_SEARCH, mode, 0)

    def replay_set_state(self, state: int) -> None:
        self.broadcast(BroadcastMsg.REPLAY_SET_STATE, state, 0)

    def reload_textures(self, mode: int, car_idx: int = 0) -> None:
        self.broadcast(BroadcastMsg.RELOAD_TEXTURES, mode, car_idx)

    def send_chat_command(self, command: int, sub_command: int = 0) -> None:
        self.broadcast(BroadcastMsg.CHAT_COMMAND, command, sub_command)

    def send_pit_command(self, command: int, parameter: int = 0) -> None:
        self.broadcast(BroadcastMsg.PIT_COMMAND, command, parameter)

    def send_telem_command(self, command: int) -> None:
        self.broadcast(BroadcastMsg.TELEM_COMMAND, command, 0)

    def send_ffb_command(self, command: int, value: float) -> None:
        self.broadcast_float(BroadcastMsg.FFB_COMMAND, command, value)

    def replay_search_session_time(self, session_num: int, session_time_ms: int) -> None:
        low, high = _split_words(session_time_ms)
        self.broadcast(BroadcastMsg.REPLAY_SEARCH_SESSION_TIME, session_num, low, high)

    def video_capture(self, mode: int) -> None:
        self.broadcast(BroadcastMsg.VIDEO_CAPTURE, mode, 0)
