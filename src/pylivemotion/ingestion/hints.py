"""Motion hint classification.

Backends describe "parked" in many vocabularies (alert types, engine status
strings, explicit flags).  Adapters map those onto :class:`MotionHints`; this
module turns hints plus reported speed into the single decision the motion
core needs.
"""

from __future__ import annotations

from dataclasses import dataclass

from pylivemotion._constants import DEFAULT_STATIONARY_SPEED_KMH
from pylivemotion.models.report import Ignition, PositionReport


@dataclass(frozen=True, slots=True)
class MotionHint:
    """Outcome of classifying one report.

    ``allow_heading_update`` is ``False`` for a parked entity so GPS noise
    cannot spin it in place; an ignition toggle still lets the heading through.
    """

    is_stationary: bool
    allow_heading_update: bool
    ignition: Ignition | None = None


def classify_motion_hint(
    report: PositionReport,
    *,
    previous_ignition: Ignition | None = None,
    stationary_speed_kmh: float = DEFAULT_STATIONARY_SPEED_KMH,
) -> MotionHint:
    """Decide whether *report* describes a stationary entity.

    Precedence: ignition hint, then the explicit ``moving`` flag, then the
    reported speed (absent speed counts as zero).
    """
    hints = report.motion
    ignition = hints.ignition if hints is not None else None
    moving = hints.moving if hints is not None else None

    if ignition is Ignition.OFF:
        is_stationary = True
    elif ignition is Ignition.ON:
        is_stationary = False
    elif moving is not None:
        is_stationary = not moving
    else:
        is_stationary = (report.speed_kmh or 0.0) < stationary_speed_kmh

    toggled = ignition is not None and ignition != previous_ignition
    return MotionHint(
        is_stationary=is_stationary,
        allow_heading_update=not is_stationary or toggled,
        ignition=ignition,
    )
