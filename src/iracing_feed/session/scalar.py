"""Scalar codec — classifies a raw session-info token into a typed value."""

from __future__ import annotations

import math
import re

Scalar = str | int | float | bool | None

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_INT64_DIGITS = 19

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)
_HEX_PREFIX_RE = re.compile(r"[+-]?0[xX]")


def _has_hex_prefix(token: str) -> bool:
    return _HEX_PREFIX_RE.match(token) is not None


def parse_int(token: str) -> int | None:
    """Return *token* as a 64-bit signed int, or None if it is not one."""
    if _has_hex_prefix(token) or _INT_RE.fullmatch(token) is None:
        return None
    sign = "-" if token.startswith("-") else ""
    digits = token.lstrip("+-").lstrip("0") or "0"
    if len(digits) > _INT64_DIGITS:
        return None
    value = int(sign + digits)
    if value < _INT64_MIN or value > _INT64_MAX:
        return None
    return value


def parse_float(token: str) -> float | None:
    """Return *token* as a float, or None on bad syntax, overflow or underflow."""
    if _has_hex_prefix(token) or _FLOAT_RE.fullmatch(token) is None:
        return None
    value = float(token)
    body = token.lstrip("+-").lower()
    if math.isinf(value) and not body.startswith("inf"):
        return None
    if value == 0.0:
        mantissa = re.split(r"[eE]", body)[0]
        if any(ch in "123456789" for ch in mantissa):
            return None
    return value


def classify(token: str) -> Scalar:
    """Convert a trimmed session-info token into ``None``/``str``/``bool``/``int``/``float``.

    Quoted tokens are returned without their quotes and never inferred as
    numbers. Integers win over floats when both would parse.
    """
    if not token:
        return None
    if len(token) >= 2 and token[0] == '"' and token[-1] == '"':
        return token[1:-1]
    if token == "true":
        return True
    if token == "false":
        return False

    int_value = parse_int(token)
    if int_value is not None:
        return int_value

    float_value = parse_float(token)
    if float_value is not None:
        return float_value

    return token
