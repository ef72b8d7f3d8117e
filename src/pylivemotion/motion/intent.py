"""Heading-stability intent classifier.

A closed-form heuristic over the last few reported headings.  Angles are
compared through circular statistics because an arithmetic mean is wrong
across the 0/360 wrap (the mean of 359 and 1 is 0, not 180).
"""

from __future__ import annotations

import math
from collections import deque
from collections.abc import Iterable

from pylivemotion._constants import (
    AMBIGUOUS_STRAIGHT_CONFIDENCE,
    DEFAULT_INTENT_WINDOW,
    STRAIGHT_VARIANCE_MAX,
    TURN_VARIANCE_MIN,
)
from pylivemotion.geo import clamp
from pylivemotion.models.motion import Intent, IntentAction
from pylivemotion.models.report import PositionReport


def circular_variance(angles: Iterable[float]) -> float:
    """Return ``1 - R/N`` for headings in degrees.

    0 means all headings agree, 1 means they cancel out.  Empty input is
    treated as fully dispersed.
    """
    sum_cos = 0.0
    sum_sin = 0.0
    count = 0
    for angle in angles:
        rad = math.radians(angle)
        sum_cos += math.cos(rad)
        sum_sin += math.sin(rad)
        count += 1
    if count == 0:
        return 1.0
    mean_resultant_length = math.hypot(sum_cos, sum_sin) / count
    return clamp(1.0 - mean_resultant_length, 0.0, 1.0)


class IntentModel:
    def __init__(self, *, window_size: int = DEFAULT_INTENT_WINDOW) -> None:
        self._headings: deque[float] = deque(maxlen=window_size)
        self._stopped = False

    @property
    def headings(self) -> tuple[float, ...]:
        return tuple(self._headings)

    def update(self, report: PositionReport, *, stationary: bool = False, admit_heading: bool = True) -> None:
        self._stopped = stationary
        if admit_heading and report.bearing is not None:
            self._headings.append(report.bearing)

    def get_intent(self) -> Intent:
        if self._stopped:
            return Intent(action=IntentAction.STOP, confidence=1.0)
        if len(self._headings) < 2:
            return Intent(action=IntentAction.UNKNOWN, confidence=0.0)

        variance = circular_variance(self._headings)
        if variance < STRAIGHT_VARIANCE_MAX:
            return Intent(action=IntentAction.STRAIGHT, confidence=1.0 - variance)
        if variance > TURN_VARIANCE_MIN:
            return Intent(action=IntentAction.TURN, confidence=variance)
        return Intent(action=IntentAction.STRAIGHT, confidence=AMBIGUOUS_STRAIGHT_CONFIDENCE)
