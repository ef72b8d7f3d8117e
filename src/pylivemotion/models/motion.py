"""Motion estimate models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class MotionState(StrEnum):
    """Trust level of an estimate.

    - ``REAL``: recent, trusted data.
    - ``COASTING``: data is getting stale; extrapolation continues.
    - ``PREDICTED``: past the decay window with zero confidence, not yet stale.
    - ``FROZEN``: data too old; the entity is held in place.
    """

    REAL = "REAL"
    COASTING = "COASTING"
    PREDICTED = "PREDICTED"
    FROZEN = "FROZEN"


class IntentAction(StrEnum):
    UNKNOWN = "UNKNOWN"
    STRAIGHT = "STRAIGHT"
    TURN = "TURN"
    STOP = "STOP"


class Intent(BaseModel):
    model_config = ConfigDict(frozen=True)

    action: IntentAction = IntentAction.UNKNOWN
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class MotionPose(BaseModel):
    """Physical pose of an entity.

    Parameters
    ----------
    lat, lng : float
        Position in degrees.
    heading : float
        Degrees in ``[0, 360)``.
    speed : float
        Meters per second.
    uncertainty_radius : float
        Estimated position error in meters.  Grows while extrapolating and
        resets on every observation.
    """

    model_config = ConfigDict(extra="forbid")

    lat: float = 0.0
    lng: float = 0.0
    heading: float = 0.0
    speed: float = 0.0
    uncertainty_radius: float = 0.0


class MotionEstimate(BaseModel):
    """Read-only snapshot produced once per tick."""

    model_config = ConfigDict(frozen=True)

    pose: MotionPose
    state: MotionState
    intent: Intent
    confidence: float = Field(ge=0.0, le=1.0)
    timestamp: float
    """Virtual time (epoch ms) of the tick that produced this estimate."""
