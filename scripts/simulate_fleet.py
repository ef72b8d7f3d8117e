#!/usr/bin/env python3
"""Synthetic fleet simulator for the live motion controller.

This script drives :class:`pylivemotion.MotionController` with fabricated
telemetry that misbehaves the way real trackers do:

1) reports arrive late and out of order (network jitter),
2) some reports are lost entirely,
3) one vehicle goes silent half-way through to exercise COASTING,
   PREDICTED and FROZEN,
4) one vehicle jumps several kilometers to exercise teleport snapping.

Use ``--verbose`` to see engine DEBUG logs (drops, snaps, state transitions).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import math
import random
import sys
import time
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pylivemotion import (  # noqa: E402
    ConfidencePolicy,
    EntityId,
    LiveMotionConfig,
    MotionController,
    MotionEstimate,
    MotionState,
)
from pylivemotion.geo import extrapolate_position  # noqa: E402


@dataclass
class SimVehicle:
    """Ground truth for one simulated vehicle."""

    vehicle_id: str
    lat: float
    lng: float
    speed_kmh: float
    bearing: float
    turn_rate: float
    silent_after_s: float | None = None
    teleport_at_s: float | None = None
    teleported: bool = False

    def advance(self, dt: float) -> None:
        self.bearing = (self.bearing + self.turn_rate * dt) % 360.0
        self.lat, self.lng = extrapolate_position(self.lat, self.lng, self.speed_kmh / 3.6, self.bearing, dt)


@dataclass
class RenderStats:
    frames: int = 0
    states: Counter[str] = field(default_factory=Counter)
    last: dict[EntityId, MotionEstimate] = field(default_factory=dict)


class ConsoleRenderer:
    """Minimal marker adapter that records what a map would draw."""

    def __init__(self, stats: RenderStats) -> None:
        self._stats = stats

    def set_position(self, entity_id: EntityId, lat: float, lng: float) -> None:
        self._stats.frames += 1

    def set_rotation(self, entity_id: EntityId, bearing_deg: float) -> None:
        return None

    def on_state(self, entity_id: EntityId, estimate: MotionEstimate) -> None:
        self._stats.states[estimate.state.value] += 1
        self._stats.last[entity_id] = estimate


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Drive the live motion controller with synthetic jittery telemetry.",
    )
    parser.add_argument("--vehicles", type=int, default=5, help="Number of simulated vehicles.")
    parser.add_argument("--duration", type=float, default=20.0, help="Simulated runtime in seconds.")
    parser.add_argument("--report-interval", type=float, default=1.0, help="Seconds between device reports.")
    parser.add_argument("--loss", type=float, default=0.1, help="Probability that a report is lost.")
    parser.add_argument("--max-delay", type=float, default=1.5, help="Maximum delivery delay in seconds.")
    parser.add_argument("--seed", type=int, default=7, help="Random seed.")
    parser.add_argument(
        "--short-policy",
        action="store_true",
        help="Use a compressed confidence policy (1s/2s/5s) so every state shows up quickly.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logs.")
    return parser.parse_args()


def _build_fleet(count: int, duration: float, rng: random.Random) -> list[SimVehicle]:
    fleet: list[SimVehicle] = []
    for index in range(count):
        fleet.append(
            SimVehicle(
                vehicle_id=f"sim-{index}",
                lat=19.4326 + rng.uniform(-0.02, 0.02),
                lng=-99.1332 + rng.uniform(-0.02, 0.02),
                speed_kmh=rng.uniform(20.0, 60.0),
                bearing=rng.uniform(0.0, 360.0),
                turn_rate=rng.choice([0.0, 0.0, 3.0, -6.0]),
            )
        )
    if fleet:
        fleet[0].silent_after_s = duration / 2
    if len(fleet) > 1:
        fleet[1].teleport_at_s = duration / 3
    return fleet


def _payload(vehicle: SimVehicle, ts_ms: int) -> dict[str, Any]:
    return {
        "device_id": vehicle.vehicle_id,
        "lat": vehicle.lat,
        "lng": vehicle.lng,
        "speed": round(vehicle.speed_kmh, 1),
        "course": round(vehicle.bearing, 1),
        "ts": ts_ms,
        "engine_status": "on",
    }


async def _run(args: argparse.Namespace) -> RenderStats:
    rng = random.Random(args.seed)
    fleet = _build_fleet(args.vehicles, args.duration, rng)

    policy = (
        ConfidencePolicy(full_confidence_ms=1_000, decay_ms=2_000, max_stale_ms=5_000)
        if args.short_policy
        else ConfidencePolicy()
    )
    stats = RenderStats()
    controller = MotionController(ConsoleRenderer(stats), LiveMotionConfig(policy=policy, frame_interval=1 / 30))
    loop = asyncio.get_running_loop()
    started = time.monotonic()

    async with controller:
        elapsed = 0.0
        while elapsed < args.duration:
            await asyncio.sleep(args.report_interval)
            elapsed = time.monotonic() - started
            now_ms = int(time.time() * 1000)
            for vehicle in fleet:
                vehicle.advance(args.report_interval)
                if vehicle.teleport_at_s is not None and not vehicle.teleported and elapsed >= vehicle.teleport_at_s:
                    vehicle.lat, vehicle.lng = extrapolate_position(vehicle.lat, vehicle.lng, 5_000.0, 45.0, 1.0)
                    vehicle.teleported = True
                    print(f"[sim] {vehicle.vehicle_id} teleported")
                if vehicle.silent_after_s is not None and elapsed >= vehicle.silent_after_s:
                    continue
                if rng.random() < args.loss:
                    continue
                delay = rng.uniform(0.0, args.max_delay)
                loop.call_later(delay, controller.ingest, _payload(vehicle, now_ms))

    return stats


def _print_summary(stats: RenderStats) -> None:
    print("[sim] Summary")
    print(f"[sim]   frames rendered : {stats.frames}")
    for state in MotionState:
        print(f"[sim]   {state.value:<15} : {stats.states.get(state.value, 0)}")
    for entity_id, estimate in sorted(stats.last.items(), key=lambda item: str(item[0])):
        pose = estimate.pose
        print(
            f"[sim]   {entity_id!s:<8} state={estimate.state.value:<9} intent={estimate.intent.action.value:<8} "
            f"conf={estimate.confidence:.2f} speed={pose.speed:5.1f}m/s heading={pose.heading:6.1f} "
            f"uncertainty={pose.uncertainty_radius:6.1f}m"
        )
        if math.isnan(pose.lat):
            print(f"[sim]   {entity_id} produced a NaN position", file=sys.stderr)


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        stats = asyncio.run(_run(args))
    except KeyboardInterrupt:
        return 130

    _print_summary(stats)
    return 0


if __name__ == "__main__":
    raise SystemExit(_main())
