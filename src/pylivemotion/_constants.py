"""Numeric defaults shared across the motion core."""

from __future__ import annotations

# Confidence policy (milliseconds).
DEFAULT_FULL_CONFIDENCE_MS = 5_000
DEFAULT_DECAY_MS = 10_000
DEFAULT_MAX_STALE_MS = 15 * 60 * 1000

# Jitter buffer.
DEFAULT_BUFFER_CAPACITY = 50

# Correction step.
DEFAULT_CORRECTION_GAIN = 0.5
DEFAULT_BASELINE_UNCERTAINTY_M = 5.0
DEFAULT_TELEPORT_THRESHOLD_M = 500.0
# Displacement between fixes above which heading is derived from the track.
MIN_TRACK_BEARING_DISTANCE_M = 2.0

# Physics.
DEFAULT_UNCERTAINTY_GROWTH = 0.1

# Stationary classification: below this reported speed the entity is parked.
DEFAULT_STATIONARY_SPEED_KMH = 1.0

# Intent window (number of reported headings).
DEFAULT_INTENT_WINDOW = 5

# Scheduler.
DEFAULT_FRAME_INTERVAL_S = 1 / 60

# Intent thresholds on circular variance.
STRAIGHT_VARIANCE_MAX = 0.01
TURN_VARIANCE_MIN = 0.1
AMBIGUOUS_STRAIGHT_CONFIDENCE = 0.5

# Earth radii (meters).
EARTH_MEAN_RADIUS_M = 6_371_000.0
EARTH_EQUATORIAL_RADIUS_M = 6_378_137.0

# Epoch values at or above this are milliseconds.
MS_THRESHOLD = 100_000_000_000
