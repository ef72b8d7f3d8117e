"""Ingestion layer.

This package contains the boundary between telemetry backends and the motion
core: value parsing, backend vocabulary adapters and motion-hint
classification.  Reports that reach the core have already been validated here.
"""

__all__: list[str] = []
