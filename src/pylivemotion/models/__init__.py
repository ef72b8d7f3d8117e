"""Data models for telemetry input and motion estimates."""

from pylivemotion.models._base import LiveMotionBaseModel
from pylivemotion.models.motion import Intent, IntentAction, MotionEstimate, MotionPose, MotionState
from pylivemotion.models.report import EntityId, Ignition, MotionHints, PositionReport

__all__ = [
    "EntityId",
    "Ignition",
    "Intent",
    "IntentAction",
    "LiveMotionBaseModel",
    "MotionEstimate",
    "MotionHints",
    "MotionPose",
    "MotionState",
    "PositionReport",
]
