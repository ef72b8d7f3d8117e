"""Position report model."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, Field, field_validator

from pylivemotion.geo import normalize_heading
from pylivemotion.ingestion.normalize import normalize_timestamp_ms, safe_bool, safe_float, safe_str
from pylivemotion.models._base import LiveMotionBaseModel

EntityId = str | int


class Ignition(StrEnum):
    ON = "on"
    OFF = "off"


class MotionHints(LiveMotionBaseModel):
    """Optional motion-state hints carried by a report.

    Parameters
    ----------
    moving : bool or None
        Explicit moving/stopped flag from the device.
    ignition : Ignition or None
        Ignition state when the device reports it.
    """

    moving: bool | None = None
    ignition: Ignition | None = None

    @field_validator("moving", mode="before")
    @classmethod
    def _coerce_moving(cls, value: Any) -> bool | None:
        return safe_bool(value)

    @field_validator("ignition", mode="before")
    @classmethod
    def _coerce_ignition(cls, value: Any) -> Ignition | None:
        if isinstance(value, Ignition):
            return value
        flag = safe_bool(value)
        if flag is None:
            return None
        return Ignition.ON if flag else Ignition.OFF


class PositionReport(LiveMotionBaseModel):
    """One telemetry sample for a tracked entity.

    Optional fields are ``None`` when absent or unparseable; they are never
    coerced to zero.  ``lat``/``lng`` are required and must be finite: a
    payload without them fails validation, which is how malformed input is
    rejected before it reaches the motion core.

    Parameters
    ----------
    id : str or int
        Entity identifier.
    lat : float
        Latitude in degrees.
    lng : float
        Longitude in degrees.
    speed_kmh : float or None
        Reported speed in km/h.
    bearing : float or None
        Reported heading in degrees, normalized to ``[0, 360)``.
    timestamp : int or None
        Report time in epoch milliseconds.
    motion : MotionHints or None
        Optional moving/ignition hints.
    raw : dict
        Original payload.
    """

    id: EntityId = Field(validation_alias=AliasChoices("id", "deviceId", "device_id", "vin"))
    lat: float = Field(validation_alias=AliasChoices("lat", "latitude", "gpsLatitude"))
    lng: float = Field(validation_alias=AliasChoices("lng", "lon", "longitude", "gpsLongitude"))
    speed_kmh: float | None = Field(
        default=None,
        validation_alias=AliasChoices("speedKmh", "speed_kmh", "speed", "gpsSpeed"),
    )
    bearing: float | None = Field(
        default=None,
        validation_alias=AliasChoices("bearing", "heading", "course", "direction"),
    )
    timestamp: int | None = Field(
        default=None,
        validation_alias=AliasChoices("timestamp", "ts", "gpsTimestamp", "gpsTimeStamp", "time"),
    )
    motion: MotionHints | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> EntityId:
        if isinstance(value, bool):
            raise ValueError("id must be a string or integer")
        if isinstance(value, int):
            return value
        text = safe_str(value)
        if text is None:
            raise ValueError("id must be non-empty")
        return text

    @field_validator("lat", "lng", mode="before")
    @classmethod
    def _require_finite(cls, value: Any) -> float:
        parsed = safe_float(value)
        if parsed is None:
            raise ValueError("coordinate must be a finite number")
        return parsed

    @field_validator("lat")
    @classmethod
    def _latitude_range(cls, value: float) -> float:
        if not -90.0 <= value <= 90.0:
            raise ValueError("latitude must be within [-90, 90]")
        return value

    @field_validator("speed_kmh", mode="before")
    @classmethod
    def _coerce_speed(cls, value: Any) -> float | None:
        parsed = safe_float(value)
        if parsed is None or parsed < 0:
            return None
        return parsed

    @field_validator("bearing", mode="before")
    @classmethod
    def _coerce_bearing(cls, value: Any) -> float | None:
        parsed = safe_float(value)
        if parsed is None:
            return None
        return normalize_heading(parsed)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> int | None:
        return normalize_timestamp_ms(value)

    @property
    def ignition(self) -> Ignition | None:
        return self.motion.ignition if self.motion is not None else None
