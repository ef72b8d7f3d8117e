"""Temporal trust decay and motion state classification.

The model runs on a virtual clock advanced only by :meth:`ConfidenceModel.decay`,
so it is deterministic and independent of wall time.  Three trust tiers keep
an entity from ghost-driving on stale data without freezing it after a single
missed report::

    age <  full                      REAL       confidence 1
    full <= age < full + decay       COASTING   confidence 1 → 0
    full + decay <= age <= max_stale PREDICTED  confidence 0
    age >  max_stale                 FROZEN     confidence 0
"""

from __future__ import annotations

from pylivemotion.config import ConfidencePolicy
from pylivemotion.models.motion import MotionState


class ConfidenceModel:
    def __init__(self, policy: ConfidencePolicy | None = None) -> None:
        self._policy = policy or ConfidencePolicy()
        self._clock_ms = 0.0
        self._last_update_ms = 0.0

    @property
    def policy(self) -> ConfidencePolicy:
        return self._policy

    @property
    def age_ms(self) -> float:
        """Virtual milliseconds since the last observation."""
        return self._clock_ms - self._last_update_ms

    def update(self) -> None:
        """Mark a fresh observation at the current virtual time."""
        self._last_update_ms = self._clock_ms

    def decay(self, dt: float) -> None:
        """Advance the virtual clock by *dt* seconds."""
        self._clock_ms += dt * 1000.0

    def get_confidence(self) -> float:
        age = self.age_ms
        policy = self._policy
        if age < policy.full_confidence_ms:
            return 1.0
        if age < policy.decay_end_ms:
            return 1.0 - (age - policy.full_confidence_ms) / policy.decay_ms
        return 0.0

    def get_state(self) -> MotionState:
        age = self.age_ms
        if age < self._policy.full_confidence_ms:
            return MotionState.REAL
        if self.get_confidence() > 0:
            return MotionState.COASTING
        if age > self._policy.max_stale_ms:
            return MotionState.FROZEN
        return MotionState.PREDICTED
