"""Normalization helpers.

Centralizes parsing of loosely typed telemetry values.  Every helper
returns ``None`` for values that cannot be parsed; nothing is coerced to zero.
"""

from __future__ import annotations

import math
from typing import Any

from pylivemotion._constants import MS_THRESHOLD

_TRUE_STRINGS = frozenset({"1", "true", "yes", "y", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "n", "off"})


def safe_float(value: Any) -> float | None:
    """Parse *value* as a finite float."""
    if value is None or value == "" or value == "--" or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(result):
        return None
    return result


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def safe_bool(value: Any) -> bool | None:
    """Parse flags sent as bools, numbers or ``"on"/"off"``-style strings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        if value == 1:
            return True
        if value == 0:
            return False
        return None
    text = safe_str(value)
    if text is None:
        return None
    normalized = text.lower()
    if normalized in _TRUE_STRINGS:
        return True
    if normalized in _FALSE_STRINGS:
        return False
    return None


def normalize_timestamp_ms(value: Any) -> int | None:
    """Normalize epoch timestamps to integer milliseconds.

    - Empty/missing/unparseable -> None
    - <= 0 -> None
    - Seconds (< 1e11) -> milliseconds
    """
    ts = safe_float(value)
    if ts is None or ts <= 0:
        return None
    if ts < MS_THRESHOLD:
        ts *= 1000.0
    return int(ts)
