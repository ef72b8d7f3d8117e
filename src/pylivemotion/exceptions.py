"""Custom exception hierarchy for pylivemotion."""

from __future__ import annotations


class LiveMotionError(Exception):
    """Base exception for all pylivemotion errors."""


class LiveMotionConfigError(LiveMotionError):
    """Invalid or missing configuration."""


class LiveMotionIngestionError(LiveMotionError):
    """A telemetry payload could not be turned into a position report.

    Raised only at the ingestion boundary.  The motion core itself never
    raises for bad or late data; it assumes validated reports.
    """

    def __init__(self, message: str, *, payload: object = None) -> None:
        self.payload = payload
        super().__init__(message)
