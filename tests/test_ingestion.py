from __future__ import annotations

import pytest
from pydantic import ValidationError

from pylivemotion.exceptions import LiveMotionIngestionError
from pylivemotion.ingestion.hints import classify_motion_hint
from pylivemotion.ingestion.normalize import normalize_timestamp_ms, safe_bool, safe_float
from pylivemotion.ingestion.vehicles import report_from_vehicle
from pylivemotion.models.report import Ignition, PositionReport


def _report(**kwargs: object) -> PositionReport:
    return PositionReport.model_validate({"id": "u", "lat": 1.0, "lng": 2.0, **kwargs})


def test_position_report_camel_case_and_aliases() -> None:
    report = PositionReport.model_validate(
        {"deviceId": "abc", "latitude": "19.5", "lon": -99.1, "speedKmh": "36", "course": 450, "ts": 1_700_000_000}
    )

    assert report.id == "abc"
    assert report.lat == 19.5
    assert report.lng == -99.1
    assert report.speed_kmh == 36.0
    assert report.bearing == 90.0
    # Second-resolution epoch promoted to milliseconds.
    assert report.timestamp == 1_700_000_000_000
    assert report.raw["deviceId"] == "abc"


def test_unparseable_optional_fields_are_absent_not_zero() -> None:
    report = _report(speedKmh="--", bearing="n/a", timestamp="", motion={"moving": "maybe"})

    assert report.speed_kmh is None
    assert report.bearing is None
    assert report.timestamp is None
    assert report.motion is not None
    assert report.motion.moving is None


def test_negative_speed_treated_as_absent() -> None:
    assert _report(speedKmh=-5).speed_kmh is None


@pytest.mark.parametrize(
    "lat,lng",
    [
        ("abc", 2.0),
        (float("nan"), 2.0),
        (1.0, float("inf")),
        (95.0, 2.0),
        (None, 2.0),
    ],
)
def test_invalid_coordinates_rejected(lat: object, lng: object) -> None:
    with pytest.raises(ValidationError):
        PositionReport.model_validate({"id": "u", "lat": lat, "lng": lng})


def test_empty_id_rejected() -> None:
    with pytest.raises(ValidationError):
        PositionReport.model_validate({"id": "  ", "lat": 1.0, "lng": 2.0})


def test_report_is_immutable() -> None:
    report = _report()
    with pytest.raises(ValidationError):
        report.lat = 5.0  # type: ignore[misc]


def test_motion_hints_parsing() -> None:
    report = _report(motion={"moving": "true", "ignition": "OFF"})

    assert report.motion is not None
    assert report.motion.moving is True
    assert report.ignition is Ignition.OFF


def test_normalize_helpers() -> None:
    assert safe_float("1.5") == 1.5
    assert safe_float(True) is None
    assert safe_float(float("inf")) is None
    assert safe_bool("on") is True
    assert safe_bool(0) is False
    assert safe_bool("sometimes") is None
    assert normalize_timestamp_ms(0) is None
    assert normalize_timestamp_ms("1700000000123") == 1_700_000_000_123


def test_classify_speed_threshold() -> None:
    assert classify_motion_hint(_report(speedKmh=0.5)).is_stationary is True
    assert classify_motion_hint(_report()).is_stationary is True
    moving = classify_motion_hint(_report(speedKmh=30))
    assert moving.is_stationary is False
    assert moving.allow_heading_update is True


def test_classify_stationary_suppresses_heading() -> None:
    hint = classify_motion_hint(_report(speedKmh=0, bearing=120))

    assert hint.is_stationary is True
    assert hint.allow_heading_update is False


def test_classify_moving_flag_overrides_speed() -> None:
    assert classify_motion_hint(_report(speedKmh=40, motion={"moving": False})).is_stationary is True
    assert classify_motion_hint(_report(speedKmh=0, motion={"moving": True})).is_stationary is False


def test_classify_ignition_precedence_and_toggle() -> None:
    off = _report(speedKmh=40, motion={"ignition": "off", "moving": True})

    first = classify_motion_hint(off)
    assert first.is_stationary is True
    assert first.allow_heading_update is True
    assert first.ignition is Ignition.OFF

    repeated = classify_motion_hint(off, previous_ignition=Ignition.OFF)
    assert repeated.is_stationary is True
    assert repeated.allow_heading_update is False

    on = classify_motion_hint(_report(speedKmh=0, motion={"ignition": "on"}), previous_ignition=Ignition.OFF)
    assert on.is_stationary is False
    assert on.allow_heading_update is True


def test_classify_custom_threshold() -> None:
    assert classify_motion_hint(_report(speedKmh=4), stationary_speed_kmh=5.0).is_stationary is True


def test_vehicle_payload_alert_and_engine_status() -> None:
    report = report_from_vehicle(
        {
            "device_id": "D-9",
            "lat": "40.1",
            "lng": "-3.7",
            "speed": 12,
            "course": "270",
            "timestamp": 1_700_000_000_500,
            "alert": "Turn Off",
            "engine_status": "ON",
        }
    )

    assert report.id == "D-9"
    assert report.speed_kmh == 12.0
    assert report.bearing == 270.0
    assert report.timestamp == 1_700_000_000_500
    assert report.motion is not None
    assert report.motion.ignition is Ignition.OFF
    assert report.motion.moving is True
    assert report.raw["alert"] == "Turn Off"


def test_vehicle_payload_ts_preferred_and_explicit_motion_wins() -> None:
    report = report_from_vehicle(
        {
            "id": 5,
            "latitude": 1.0,
            "longitude": 2.0,
            "ts": 1_700_000_000_000,
            "timestamp": 1_600_000_000_000,
            "alert": "Turn On",
            "motion": {"ignition": "off"},
        }
    )

    assert report.id == 5
    assert report.timestamp == 1_700_000_000_000
    assert report.ignition is Ignition.OFF


def test_vehicle_payload_without_hints_has_no_motion() -> None:
    report = report_from_vehicle({"id": "x", "lat": 1.0, "lng": 2.0, "alert": "Overspeed"})
    assert report.motion is None


def test_vehicle_payload_rejected() -> None:
    with pytest.raises(LiveMotionIngestionError) as exc_info:
        report_from_vehicle({"id": "x", "lat": "north", "lng": 2.0})
    assert exc_info.value.payload == {"id": "x", "lat": "north", "lng": 2.0}

    with pytest.raises(LiveMotionIngestionError):
        report_from_vehicle(["not", "a", "mapping"])  # type: ignore[arg-type]
