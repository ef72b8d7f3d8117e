"""Vehicle-tracking backend adapter.

Translates the loosely typed "vehicle-like" dicts emitted by fleet tracking
backends into :class:`PositionReport` objects.  Backend vocabulary (alert
names, engine status strings) stops here.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from pylivemotion.exceptions import LiveMotionIngestionError
from pylivemotion.ingestion.normalize import safe_bool, safe_str
from pylivemotion.models.report import Ignition, PositionReport

_logger = logging.getLogger(__name__)

_IGNITION_ALERTS: dict[str, Ignition] = {
    "turn on": Ignition.ON,
    "turn off": Ignition.OFF,
    "ignition on": Ignition.ON,
    "ignition off": Ignition.OFF,
}


def _first_present(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = payload.get(key)
        if value is not None and value != "":
            return value
    return None


def _motion_hints(payload: Mapping[str, Any]) -> dict[str, Any]:
    motion: dict[str, Any] = {}

    alert = safe_str(payload.get("alert"))
    if alert is not None:
        ignition = _IGNITION_ALERTS.get(alert.lower())
        if ignition is not None:
            motion["ignition"] = ignition

    if "engine_status" in payload:
        moving = safe_bool(payload.get("engine_status"))
        if moving is not None:
            motion["moving"] = moving

    explicit = payload.get("motion")
    if isinstance(explicit, Mapping):
        # Explicit hints win over derived ones.
        motion.update({k: v for k, v in explicit.items() if v is not None})
    return motion


def report_from_vehicle(payload: Mapping[str, Any]) -> PositionReport:
    """Build a :class:`PositionReport` from a backend vehicle dict.

    Raises
    ------
    LiveMotionIngestionError
        When the payload lacks an id or finite coordinates.
    """
    if not isinstance(payload, Mapping):
        raise LiveMotionIngestionError("vehicle payload must be a mapping", payload=payload)

    data: dict[str, Any] = {
        "id": _first_present(payload, "id", "device_id", "deviceId", "vin"),
        "lat": _first_present(payload, "lat", "latitude"),
        "lng": _first_present(payload, "lng", "lon", "longitude"),
        "speed_kmh": _first_present(payload, "speedKmh", "speed_kmh", "speed"),
        "bearing": _first_present(payload, "bearing", "course", "heading"),
        "timestamp": _first_present(payload, "ts", "timestamp"),
        "raw": dict(payload),
    }
    motion = _motion_hints(payload)
    if motion:
        data["motion"] = motion

    try:
        return PositionReport.model_validate(data)
    except ValidationError as exc:
        _logger.debug("Rejected vehicle payload id=%s: %s", data.get("id"), exc)
        raise LiveMotionIngestionError(f"invalid vehicle payload: {exc.error_count()} error(s)", payload=payload) from exc
