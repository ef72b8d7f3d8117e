"""Engine and controller configuration for pylivemotion."""

from __future__ import annotations

import dataclasses
import logging
import math
import os
from typing import Any

from pylivemotion._constants import (
    DEFAULT_BASELINE_UNCERTAINTY_M,
    DEFAULT_BUFFER_CAPACITY,
    DEFAULT_CORRECTION_GAIN,
    DEFAULT_DECAY_MS,
    DEFAULT_FRAME_INTERVAL_S,
    DEFAULT_FULL_CONFIDENCE_MS,
    DEFAULT_INTENT_WINDOW,
    DEFAULT_MAX_STALE_MS,
    DEFAULT_STATIONARY_SPEED_KMH,
    DEFAULT_TELEPORT_THRESHOLD_M,
    DEFAULT_UNCERTAINTY_GROWTH,
)
from pylivemotion.exceptions import LiveMotionConfigError

_logger = logging.getLogger(__name__)

_ENV_POLICY_MAP: dict[str, str] = {
    "LIVEMOTION_FULL_CONFIDENCE_MS": "full_confidence_ms",
    "LIVEMOTION_DECAY_MS": "decay_ms",
    "LIVEMOTION_MAX_STALE_MS": "max_stale_ms",
}

_ENV_CONFIG_MAP: dict[str, tuple[str, type]] = {
    "LIVEMOTION_FRAME_INTERVAL": ("frame_interval", float),
    "LIVEMOTION_MAX_STEP_SECONDS": ("max_step_seconds", float),
    "LIVEMOTION_BUFFER_CAPACITY": ("buffer_capacity", int),
    "LIVEMOTION_TELEPORT_THRESHOLD_M": ("teleport_threshold_m", float),
    "LIVEMOTION_STATIONARY_SPEED_KMH": ("stationary_speed_kmh", float),
    "LIVEMOTION_CORRECTION_GAIN": ("correction_gain", float),
    "LIVEMOTION_BASELINE_UNCERTAINTY_M": ("baseline_uncertainty_m", float),
    "LIVEMOTION_UNCERTAINTY_GROWTH": ("uncertainty_growth", float),
    "LIVEMOTION_INTENT_WINDOW": ("intent_window", int),
}


def _require_positive(name: str, value: float) -> None:
    if not isinstance(value, (int, float)) or isinstance(value, bool) or not math.isfinite(value) or value <= 0:
        raise LiveMotionConfigError(f"{name} must be a positive finite number, got {value!r}")


@dataclasses.dataclass(frozen=True)
class ConfidencePolicy:
    """Temporal trust policy for a motion engine.

    Parameters
    ----------
    full_confidence_ms : float
        Age below which the last report is fully trusted (``REAL``).
    decay_ms : float
        Length of the window over which confidence falls linearly to zero
        (``COASTING``).
    max_stale_ms : float
        Age beyond which the entity is ``FROZEN``.  Must exceed
        ``full_confidence_ms + decay_ms`` for ``PREDICTED`` to be reachable.
    """

    full_confidence_ms: float = DEFAULT_FULL_CONFIDENCE_MS
    decay_ms: float = DEFAULT_DECAY_MS
    max_stale_ms: float = DEFAULT_MAX_STALE_MS

    def __post_init__(self) -> None:
        _require_positive("full_confidence_ms", self.full_confidence_ms)
        _require_positive("decay_ms", self.decay_ms)
        _require_positive("max_stale_ms", self.max_stale_ms)
        if self.max_stale_ms <= self.full_confidence_ms + self.decay_ms:
            _logger.warning(
                "max_stale_ms=%s does not exceed full_confidence_ms+decay_ms=%s; PREDICTED is unreachable",
                self.max_stale_ms,
                self.full_confidence_ms + self.decay_ms,
            )

    @property
    def decay_end_ms(self) -> float:
        """Age at which confidence reaches zero."""
        return self.full_confidence_ms + self.decay_ms


@dataclasses.dataclass(frozen=True)
class LiveMotionConfig:
    """Controller configuration.

    Parameters
    ----------
    policy : ConfidencePolicy
        Trust policy applied to every engine the controller creates.
    frame_interval : float
        Seconds between scheduled frames of the controller loop.
    max_step_seconds : float or None
        Upper bound on the time step fed to the physics integrator per tick.
        ``None`` integrates the full elapsed time.
    buffer_capacity : int
        Maximum number of reports held per entity before the oldest is evicted.
    teleport_threshold_m : float
        Observations farther than this from the estimate hard-snap the position.
    stationary_speed_kmh : float
        Reported speeds below this classify the entity as stationary.
    correction_gain : float
        Blend factor toward each observation after the first one.
    baseline_uncertainty_m : float
        Uncertainty radius restored on every observation.
    uncertainty_growth : float
        Uncertainty added per meter of unconfirmed extrapolation.
    intent_window : int
        Number of recent headings used by the intent classifier.
    """

    policy: ConfidencePolicy = dataclasses.field(default_factory=ConfidencePolicy)
    frame_interval: float = DEFAULT_FRAME_INTERVAL_S
    max_step_seconds: float | None = None
    buffer_capacity: int = DEFAULT_BUFFER_CAPACITY
    teleport_threshold_m: float = DEFAULT_TELEPORT_THRESHOLD_M
    stationary_speed_kmh: float = DEFAULT_STATIONARY_SPEED_KMH
    correction_gain: float = DEFAULT_CORRECTION_GAIN
    baseline_uncertainty_m: float = DEFAULT_BASELINE_UNCERTAINTY_M
    uncertainty_growth: float = DEFAULT_UNCERTAINTY_GROWTH
    intent_window: int = DEFAULT_INTENT_WINDOW

    def __post_init__(self) -> None:
        _require_positive("frame_interval", self.frame_interval)
        if self.max_step_seconds is not None:
            _require_positive("max_step_seconds", self.max_step_seconds)
        _require_positive("teleport_threshold_m", self.teleport_threshold_m)
        if self.buffer_capacity < 1:
            raise LiveMotionConfigError(f"buffer_capacity must be >= 1, got {self.buffer_capacity!r}")
        if self.intent_window < 2:
            raise LiveMotionConfigError(f"intent_window must be >= 2, got {self.intent_window!r}")
        if not 0.0 < self.correction_gain <= 1.0:
            raise LiveMotionConfigError(f"correction_gain must be in (0, 1], got {self.correction_gain!r}")
        if self.stationary_speed_kmh < 0 or self.baseline_uncertainty_m < 0 or self.uncertainty_growth < 0:
            raise LiveMotionConfigError("stationary_speed_kmh, baseline_uncertainty_m and uncertainty_growth must be >= 0")

    @classmethod
    def from_env(cls, **overrides: Any) -> LiveMotionConfig:
        """Create configuration from environment variables.

        Reads optional ``LIVEMOTION_*`` variables.  Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        LiveMotionConfig
            Populated configuration.
        """
        env = os.environ

        policy_kwargs: dict[str, float] = {}
        for env_key, field_name in _ENV_POLICY_MAP.items():
            val = env.get(env_key)
            if val is not None:
                policy_kwargs[field_name] = _parse_number(env_key, val, float)

        # Allow overriding policy fields via a nested dict
        policy_overrides = overrides.pop("policy", None)
        if isinstance(policy_overrides, dict):
            policy_kwargs.update(policy_overrides)
        elif isinstance(policy_overrides, ConfidencePolicy):
            policy_kwargs = dataclasses.asdict(policy_overrides)

        policy = ConfidencePolicy(**policy_kwargs) if policy_kwargs else ConfidencePolicy()

        config_kwargs: dict[str, Any] = {"policy": policy}
        for env_key, (field_name, kind) in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _parse_number(env_key, val, kind)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)


def _parse_number(env_key: str, value: str, kind: type) -> Any:
    try:
        return kind(value.strip())
    except ValueError as exc:
        raise LiveMotionConfigError(f"{env_key} is not a valid {kind.__name__}: {value!r}") from exc
