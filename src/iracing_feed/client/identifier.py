"""Car-number codec — packs driver numbers the way the SDK's broadcast API expects.

``"7"``, ``"07"`` and ``"007"`` are different car numbers in iRacing, so the
leading zeros are counted and folded into the packed integer.
"""

from __future__ import annotations

import math
import re

from iracing_feed.exceptions import InvalidArgumentError, OutOfRangeError

_INT32_MAX = 2**31 - 1
_INT32_DIGITS = 10
_DIGITS_RE = re.compile(r"[0-9]+")


def pad_car_num(num: int, zero_count: int) -> int:
    """Pack *num* with *zero_count* leading zeros (``irsdk_padCarNum``)."""
    if not zero_count:
        return num
    if num > 99:
        num_place = 3
    elif num > 9:
        num_place = 2
    else:
        num_place = 1
    return num + 1000 * (num_place + zero_count)


def split_car_number(text: str) -> tuple[int, int]:
    """Return ``(value, zero_count)`` for a car number string.

    An all-zero string keeps one zero as the number itself: ``"000"`` is
    ``(0, 2)`` and ``"0"`` is ``(0, 0)``.

    Raises
    ------
    InvalidArgumentError
        If *text* is empty or contains anything but ASCII digits.
    OutOfRangeError
        If the number does not fit a signed 32-bit int.
    """
    if not text:
        raise InvalidArgumentError("car number must be a non-empty numeric string")

    digits = text.lstrip("0")
    zero_count = len(text) - len(digits)
    if not digits:
        return 0, len(text) - 1

    if _DIGITS_RE.fullmatch(digits) is None:
        raise InvalidArgumentError(f"car number must be numeric: {text!r}")
    if len(digits) > _INT32_DIGITS:
        raise OutOfRangeError(f"car number is out of range: {text!r}")
    value = int(digits)
    if value > _INT32_MAX:
        raise OutOfRangeError(f"car number is out of range: {text!r}")
    return value, zero_count


def encode_car_number(value: int | float | str) -> int:
    """Encode a car number for ``CamSwitchNum``.

    Numbers pass through unchanged; strings keep their zero padding.
    """
    if isinstance(value, bool):
        raise InvalidArgumentError("car number must be a number or a numeric string")
    if isinstance(value, str):
        num, zero_count = split_car_number(value)
        return pad_car_num(num, zero_count)
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidArgumentError(f"car number must be finite: {value!r}")
    if isinstance(value, (int, float)):
        return pad_car_num(int(value), 0)
    raise InvalidArgumentError(f"car number must be a number or a numeric string, got {type(value).__name__}")
