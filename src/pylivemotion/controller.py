"""Fleet-level scheduler for live motion estimation."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Callable, Iterator, Mapping
from typing import Any, Protocol

from pylivemotion.config import LiveMotionConfig
from pylivemotion.exceptions import LiveMotionError, LiveMotionIngestionError
from pylivemotion.ingestion.vehicles import report_from_vehicle
from pylivemotion.models.motion import MotionEstimate
from pylivemotion.models.report import EntityId, PositionReport
from pylivemotion.motion.engine import MotionEngine

_logger = logging.getLogger(__name__)


def _now_ms() -> int:
    """Current epoch timestamp in milliseconds."""
    return int(time.time() * 1000)


class MarkerAdapter(Protocol):
    """Rendering sink the controller publishes estimates to.

    Only ``set_position`` is required.  Adapters may additionally define
    ``set_rotation(entity_id, bearing_deg)`` and
    ``on_state(entity_id, estimate)``; the latter receives the full estimate
    for uncertainty visuals.
    """

    def set_position(self, entity_id: EntityId, lat: float, lng: float) -> None: ...


class MotionController:
    """Owns one :class:`MotionEngine` per entity and drives the frame loop.

    Usage::

        controller = MotionController(renderer)
        controller.update(report)

        async with controller:
            ...  # frames run every ``config.frame_interval`` seconds

    All state is touched from the event loop thread only: ``update``,
    ``remove`` and ``clear`` must be called from the same thread as the loop.
    """

    def __init__(
        self,
        renderer: MarkerAdapter,
        config: LiveMotionConfig | None = None,
        *,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._renderer = renderer
        self._config = config or LiveMotionConfig()
        self._clock = clock
        self._engines: dict[EntityId, MotionEngine] = {}
        self._task: asyncio.Task[None] | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> MotionController:
        self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        task = self._task
        self.stop()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    @property
    def config(self) -> LiveMotionConfig:
        return self._config

    def __len__(self) -> int:
        return len(self._engines)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._engines

    def entity_ids(self) -> Iterator[EntityId]:
        return iter(list(self._engines))

    def update(self, report: PositionReport) -> None:
        """Route *report* to its entity's engine, creating the engine on first sight."""
        engine = self._engines.get(report.id)
        if engine is None:
            engine = MotionEngine(self._config, entity_id=report.id, clock=self._clock)
            self._engines[report.id] = engine
            _logger.debug("Tracking new entity id=%s", report.id)
        engine.input(report)

    def ingest(self, payload: Mapping[str, Any]) -> bool:
        """Adapt a backend vehicle payload and route it.

        Returns ``False`` when the payload is rejected at the boundary.
        """
        try:
            report = report_from_vehicle(payload)
        except LiveMotionIngestionError:
            _logger.debug("Ignoring malformed vehicle payload", exc_info=True)
            return False
        self.update(report)
        return True

    def remove(self, entity_id: EntityId) -> None:
        engine = self._engines.pop(entity_id, None)
        if engine is not None:
            engine.destroy()
            _logger.debug("Stopped tracking entity id=%s", entity_id)

    def clear(self) -> None:
        engines = list(self._engines.values())
        self._engines.clear()
        for engine in engines:
            engine.destroy()

    def get_estimate(self, entity_id: EntityId) -> MotionEstimate | None:
        engine = self._engines.get(entity_id)
        if engine is None or not engine.is_live:
            return None
        return engine.get_estimate()

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._task is not None

    def tick(self, now: float | None = None) -> dict[EntityId, MotionEstimate]:
        """Run one frame and publish every live entity to the renderer."""
        if now is None:
            now = self._clock()

        published: dict[EntityId, MotionEstimate] = {}
        for entity_id, engine in list(self._engines.items()):
            engine.tick(now)
            if not engine.is_live:
                continue
            estimate = engine.get_estimate()
            published[entity_id] = estimate
            self._publish(entity_id, estimate)
        return published

    def _publish(self, entity_id: EntityId, estimate: MotionEstimate) -> None:
        pose = estimate.pose
        try:
            self._renderer.set_position(entity_id, pose.lat, pose.lng)
            set_rotation = getattr(self._renderer, "set_rotation", None)
            if set_rotation is not None:
                set_rotation(entity_id, pose.heading)
            on_state = getattr(self._renderer, "on_state", None)
            if on_state is not None:
                on_state(entity_id, estimate)
        except Exception:
            _logger.debug("Renderer callback failed id=%s", entity_id, exc_info=True)

    def start(self) -> None:
        """Schedule the frame loop on the running event loop.  No-op if already running."""
        if self._task is not None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as exc:
            raise LiveMotionError("MotionController.start() requires a running event loop") from exc
        self._task = loop.create_task(self._run(), name="pylivemotion-frames")
        _logger.debug("Frame loop started interval=%.4fs", self._config.frame_interval)

    def stop(self) -> None:
        """Cancel the frame loop.  Safe to call repeatedly."""
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        _logger.debug("Frame loop stopped")

    async def _run(self) -> None:
        interval = self._config.frame_interval
        while True:
            self.tick()
            await asyncio.sleep(interval)
