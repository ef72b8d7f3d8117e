"""Per-entity motion engine.

Fuses the jitter buffer, physics integrator, confidence model and intent
classifier into one estimate per tick.

Lifecycle::

    uninitialized --first timestamped report--> live --destroy()--> destroyed

While uninitialized, reports are only buffered.  The first report carrying a
timestamp is applied immediately as a hard snap and establishes the virtual
clock at that timestamp.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from pylivemotion._constants import MIN_TRACK_BEARING_DISTANCE_M
from pylivemotion.config import LiveMotionConfig
from pylivemotion.geo import haversine_distance, initial_bearing, lerp_angle, lerp_position
from pylivemotion.ingestion.hints import classify_motion_hint
from pylivemotion.models.motion import MotionEstimate, MotionPose, MotionState
from pylivemotion.models.report import EntityId, Ignition, PositionReport
from pylivemotion.motion.buffer import NetworkBuffer
from pylivemotion.motion.confidence import ConfidenceModel
from pylivemotion.motion.intent import IntentModel
from pylivemotion.motion.physics import PhysicsModel

_logger = logging.getLogger(__name__)

# States in which the entity is held in place.  PREDICTED carries zero
# confidence, so it does not extrapolate either.
_HOLD_STATES = frozenset({MotionState.PREDICTED, MotionState.FROZEN})


class MotionEngine:
    """Motion estimator for one tracked entity."""

    def __init__(
        self,
        config: LiveMotionConfig | None = None,
        *,
        entity_id: EntityId | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._config = config or LiveMotionConfig()
        self._entity_id = entity_id
        if clock is None:
            self._buffer = NetworkBuffer(capacity=self._config.buffer_capacity)
        else:
            self._buffer = NetworkBuffer(capacity=self._config.buffer_capacity, clock=clock)
        self._physics = PhysicsModel(uncertainty_growth=self._config.uncertainty_growth)
        self._confidence = ConfidenceModel(self._config.policy)
        self._intent = IntentModel(window_size=self._config.intent_window)

        self._pose = MotionPose()
        self._last_tick_time: float = 0.0
        self._has_fix = False
        self._last_fix: tuple[float, float] | None = None
        self._live = False
        self._destroyed = False
        self._last_ignition: Ignition | None = None
        self._last_state: MotionState | None = None

    @property
    def entity_id(self) -> EntityId | None:
        return self._entity_id

    @property
    def is_live(self) -> bool:
        return self._live and not self._destroyed

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    @property
    def last_tick_time(self) -> float:
        return self._last_tick_time

    @property
    def buffer(self) -> NetworkBuffer:
        return self._buffer

    def destroy(self) -> None:
        """Release the engine; further input and ticks are ignored."""
        self._destroyed = True
        self._live = False
        while self._buffer.pop() is not None:
            pass

    def input(self, report: PositionReport) -> None:
        """Queue a report; bootstrap synchronously on the first timestamped one."""
        if self._destroyed:
            return
        self._buffer.push(report)

        if not self._live and report.timestamp is not None:
            self._drain()
            self._last_tick_time = float(report.timestamp)
            self._live = True
            self._last_state = self._confidence.get_state()
            _logger.debug(
                "Engine live id=%s lat=%.6f lng=%.6f ts=%s",
                self._entity_id,
                self._pose.lat,
                self._pose.lng,
                report.timestamp,
            )

    def tick(self, now: float) -> None:
        """Advance the estimate to *now* (epoch ms)."""
        if not self.is_live:
            return

        self._drain()

        dt = (now - self._last_tick_time) / 1000.0
        self._last_tick_time = now
        if dt <= 0:
            return

        self._confidence.decay(dt)
        state = self._confidence.get_state()
        if state != self._last_state:
            _logger.debug("Motion state id=%s %s -> %s", self._entity_id, self._last_state, state)
            self._last_state = state

        if state in _HOLD_STATES:
            self._pose.speed = 0.0
            return

        step = dt
        if self._config.max_step_seconds is not None:
            step = min(dt, self._config.max_step_seconds)
        self._pose = self._physics.step(self._pose, step)

    def get_estimate(self) -> MotionEstimate:
        return MotionEstimate(
            pose=self._pose.model_copy(),
            state=self._confidence.get_state(),
            intent=self._intent.get_intent(),
            confidence=self._confidence.get_confidence(),
            timestamp=self._last_tick_time,
        )

    def _drain(self) -> None:
        report = self._buffer.pop()
        while report is not None:
            self.process_observation(report)
            report = self._buffer.pop()

    def process_observation(self, report: PositionReport) -> None:
        """Apply one report: update the models, then correct the pose toward it."""
        hint = classify_motion_hint(
            report,
            previous_ignition=self._last_ignition,
            stationary_speed_kmh=self._config.stationary_speed_kmh,
        )
        if hint.ignition is not None:
            self._last_ignition = hint.ignition

        if report.bearing is None and not hint.is_stationary:
            track_bearing = self._track_bearing(report)
            if track_bearing is not None:
                report = report.model_copy(update={"bearing": track_bearing})
        self._last_fix = (report.lat, report.lng)

        # The first fix always sets heading, even for an entity first seen parked.
        apply_heading = hint.allow_heading_update or not self._has_fix

        self._physics.update(report, apply_heading=apply_heading, stationary=hint.is_stationary)
        self._confidence.update()
        self._intent.update(report, stationary=hint.is_stationary, admit_heading=hint.allow_heading_update)

        if not self._has_fix:
            blend = 1.0
        else:
            distance = haversine_distance(self._pose.lat, self._pose.lng, report.lat, report.lng)
            if distance > self._config.teleport_threshold_m:
                _logger.debug("Teleport snap id=%s distance=%.1fm", self._entity_id, distance)
                blend = 1.0
            else:
                blend = self._config.correction_gain

        self._pose.lat, self._pose.lng = lerp_position(
            (self._pose.lat, self._pose.lng),
            (report.lat, report.lng),
            blend,
        )
        if report.bearing is not None and apply_heading:
            self._pose.heading = lerp_angle(self._pose.heading, report.bearing, blend)

        self._pose.uncertainty_radius = self._config.baseline_uncertainty_m
        self._has_fix = True

    def _track_bearing(self, report: PositionReport) -> float | None:
        """Bearing from the previous fix to *report*, when the entity clearly moved."""
        if self._last_fix is None:
            return None
        prev_lat, prev_lng = self._last_fix
        distance = haversine_distance(prev_lat, prev_lng, report.lat, report.lng)
        if distance <= MIN_TRACK_BEARING_DISTANCE_M or distance > self._config.teleport_threshold_m:
            return None
        return initial_bearing(prev_lat, prev_lng, report.lat, report.lng)
