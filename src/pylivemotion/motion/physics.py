"""Kinematic integrator."""

from __future__ import annotations

from pylivemotion._constants import DEFAULT_UNCERTAINTY_GROWTH
from pylivemotion.geo import extrapolate_position, kmh_to_mps
from pylivemotion.models.motion import MotionPose
from pylivemotion.models.report import PositionReport


class PhysicsModel:
    """Dead-reckoning integrator with speed and heading held between reports.

    Uncertainty grows with the distance extrapolated without confirmation:
    ``uncertainty += speed * growth * dt``.
    """

    def __init__(self, *, uncertainty_growth: float = DEFAULT_UNCERTAINTY_GROWTH) -> None:
        self._uncertainty_growth = uncertainty_growth
        self._speed = 0.0
        self._heading = 0.0

    @property
    def speed(self) -> float:
        """Held speed in m/s."""
        return self._speed

    @property
    def heading(self) -> float:
        """Held heading in degrees."""
        return self._heading

    def step(self, pose: MotionPose, dt: float) -> MotionPose:
        """Return *pose* projected forward by *dt* seconds."""
        lat, lng = extrapolate_position(pose.lat, pose.lng, self._speed, self._heading, dt)
        return MotionPose(
            lat=lat,
            lng=lng,
            heading=self._heading,
            speed=self._speed,
            uncertainty_radius=pose.uncertainty_radius + self._speed * self._uncertainty_growth * dt,
        )

    def update(self, report: PositionReport, *, apply_heading: bool = True, stationary: bool = False) -> None:
        """Absorb speed and heading from *report*.

        Position is not touched; correcting it is the engine's job.
        """
        self._speed = 0.0 if stationary else kmh_to_mps(report.speed_kmh or 0.0)
        if apply_heading and report.bearing is not None:
            self._heading = report.bearing
