"""Live motion-estimation core."""

from pylivemotion.motion.buffer import NetworkBuffer
from pylivemotion.motion.confidence import ConfidenceModel
from pylivemotion.motion.engine import MotionEngine
from pylivemotion.motion.intent import IntentModel, circular_variance
from pylivemotion.motion.physics import PhysicsModel

__all__ = [
    "ConfidenceModel",
    "IntentModel",
    "MotionEngine",
    "NetworkBuffer",
    "PhysicsModel",
    "circular_variance",
]
