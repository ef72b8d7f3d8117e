"""pylivemotion - Live dead-reckoning motion estimation for intermittently reporting vehicles."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pylivemotion")
except PackageNotFoundError:
    __version__ = "0+local"
from pylivemotion.config import ConfidencePolicy, LiveMotionConfig
from pylivemotion.controller import MarkerAdapter, MotionController
from pylivemotion.exceptions import LiveMotionConfigError, LiveMotionError, LiveMotionIngestionError
from pylivemotion.ingestion.hints import MotionHint, classify_motion_hint
from pylivemotion.ingestion.vehicles import report_from_vehicle
from pylivemotion.models import (
    EntityId,
    Ignition,
    Intent,
    IntentAction,
    MotionEstimate,
    MotionHints,
    MotionPose,
    MotionState,
    PositionReport,
)
from pylivemotion.motion import (
    ConfidenceModel,
    IntentModel,
    MotionEngine,
    NetworkBuffer,
    PhysicsModel,
    circular_variance,
)

__all__ = [
    "__version__",
    "ConfidenceModel",
    "ConfidencePolicy",
    "EntityId",
    "Ignition",
    "Intent",
    "IntentAction",
    "IntentModel",
    "LiveMotionConfig",
    "LiveMotionConfigError",
    "LiveMotionError",
    "LiveMotionIngestionError",
    "MarkerAdapter",
    "MotionController",
    "MotionEngine",
    "MotionEstimate",
    "MotionHint",
    "MotionHints",
    "MotionPose",
    "MotionState",
    "NetworkBuffer",
    "PhysicsModel",
    "PositionReport",
    "circular_variance",
    "classify_motion_hint",
    "report_from_vehicle",
]
