from __future__ import annotations

import pytest

from pylivemotion.models.motion import IntentAction
from pylivemotion.models.report import PositionReport
from pylivemotion.motion.intent import IntentModel, circular_variance


def _report(bearing: float | None) -> PositionReport:
    return PositionReport(id="u", lat=0.0, lng=0.0, bearing=bearing)


def _feed(model: IntentModel, bearings: list[float | None]) -> None:
    for bearing in bearings:
        model.update(_report(bearing))


def test_unknown_with_fewer_than_two_samples() -> None:
    model = IntentModel()
    intent = model.get_intent()
    assert intent.action is IntentAction.UNKNOWN
    assert intent.confidence == 0.0

    _feed(model, [90.0])
    assert model.get_intent().action is IntentAction.UNKNOWN


def test_only_present_headings_enter_window() -> None:
    model = IntentModel()
    _feed(model, [90.0, None, None])

    assert model.headings == (90.0,)
    assert model.get_intent().action is IntentAction.UNKNOWN


def test_constant_heading_is_straight_with_full_confidence() -> None:
    model = IntentModel()
    _feed(model, [42.0] * 5)

    intent = model.get_intent()
    assert intent.action is IntentAction.STRAIGHT
    assert intent.confidence == pytest.approx(1.0)


def test_straight_across_north_wrap() -> None:
    model = IntentModel()
    _feed(model, [359.0, 0.0, 1.0, 359.5, 0.5])

    intent = model.get_intent()
    assert intent.action is IntentAction.STRAIGHT
    assert intent.confidence > 0.99


def test_spread_headings_are_turn() -> None:
    model = IntentModel(window_size=4)
    _feed(model, [0.0, 90.0, 180.0, 270.0])

    intent = model.get_intent()
    assert intent.action is IntentAction.TURN
    assert intent.confidence == pytest.approx(1.0, abs=1e-9)


def test_moderate_dispersion_is_conservative_straight() -> None:
    model = IntentModel()
    # Circular variance of +/-20 degrees spread is ~0.03.
    _feed(model, [80.0, 100.0, 80.0, 100.0])

    intent = model.get_intent()
    assert intent.action is IntentAction.STRAIGHT
    assert intent.confidence == 0.5


def test_window_keeps_most_recent_headings() -> None:
    model = IntentModel(window_size=3)
    _feed(model, [0.0, 90.0, 180.0, 10.0, 10.0, 10.0])

    assert model.headings == (10.0, 10.0, 10.0)
    assert model.get_intent().action is IntentAction.STRAIGHT


def test_stationary_observation_reports_stop() -> None:
    model = IntentModel()
    _feed(model, [10.0, 10.0])
    model.update(_report(200.0), stationary=True, admit_heading=False)

    intent = model.get_intent()
    assert intent.action is IntentAction.STOP
    assert intent.confidence == 1.0
    assert model.headings == (10.0, 10.0)

    model.update(_report(10.0))
    assert model.get_intent().action is IntentAction.STRAIGHT


def test_circular_variance_limits() -> None:
    assert circular_variance([]) == 1.0
    assert circular_variance([123.0, 123.0]) == pytest.approx(0.0, abs=1e-12)
    assert circular_variance([0.0, 180.0]) == pytest.approx(1.0)
    uniform = [i * 360.0 / 36 for i in range(36)]
    assert circular_variance(uniform) == pytest.approx(1.0, abs=1e-9)
