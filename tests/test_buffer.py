from __future__ import annotations

from pylivemotion.models.report import PositionReport
from pylivemotion.motion.buffer import NetworkBuffer

T0 = 1_700_000_000_000


def _report(ts: int | None, *, lat: float = 10.0) -> PositionReport:
    return PositionReport(id="unit-1", lat=lat, lng=20.0, timestamp=ts)


def _drain(buffer: NetworkBuffer) -> list[int | None]:
    out: list[int | None] = []
    report = buffer.pop()
    while report is not None:
        out.append(report.timestamp)
        report = buffer.pop()
    return out


def test_out_of_order_reports_are_reordered() -> None:
    buffer = NetworkBuffer(clock=lambda: T0)
    for offset in (3_000, 1_000, 2_000):
        buffer.push(_report(T0 + offset))

    assert _drain(buffer) == [T0 + 1_000, T0 + 2_000, T0 + 3_000]


def test_equal_timestamps_keep_arrival_order() -> None:
    buffer = NetworkBuffer()
    buffer.push(_report(T0, lat=1.0))
    buffer.push(_report(T0, lat=2.0))

    first = buffer.pop()
    second = buffer.pop()
    assert first is not None and first.lat == 1.0
    assert second is not None and second.lat == 2.0


def test_report_older_than_watermark_is_dropped() -> None:
    buffer = NetworkBuffer()
    buffer.push(_report(T0 + 5_000))
    assert buffer.pop() is not None

    buffer.push(_report(T0 + 4_000))

    assert len(buffer) == 0
    assert buffer.dropped_count == 1
    assert buffer.pop() is None


def test_report_equal_to_watermark_is_kept() -> None:
    buffer = NetworkBuffer()
    buffer.push(_report(T0 + 5_000))
    buffer.pop()

    buffer.push(_report(T0 + 5_000))

    assert len(buffer) == 1


def test_capacity_evicts_oldest() -> None:
    buffer = NetworkBuffer(capacity=3)
    for offset in (1, 2, 3, 4, 5):
        buffer.push(_report(T0 + offset))

    assert len(buffer) == 3
    assert buffer.evicted_count == 2
    assert _drain(buffer) == [T0 + 3, T0 + 4, T0 + 5]


def test_missing_timestamp_stamped_with_clock() -> None:
    buffer = NetworkBuffer(clock=lambda: T0 + 2_500)
    buffer.push(_report(T0 + 3_000))
    buffer.push(_report(None))

    assert _drain(buffer) == [None, T0 + 3_000]
    assert buffer.last_processed_timestamp == T0 + 3_000


def test_latest_timestamp() -> None:
    buffer = NetworkBuffer()
    assert buffer.latest_timestamp() == 0

    buffer.push(_report(T0 + 2_000))
    buffer.push(_report(T0 + 7_000))
    assert buffer.latest_timestamp() == T0 + 7_000

    _drain(buffer)
    assert buffer.latest_timestamp() == T0 + 7_000


def test_pop_empty_returns_none() -> None:
    assert NetworkBuffer().pop() is None
