"""Per-entity jitter buffer.

Delivers reports in non-decreasing timestamp order despite out-of-order or
bursty arrival.  Ordering is best effort, not guaranteed delivery: reports
older than the last one handed out are dropped, and under sustained overload
the oldest buffered reports are evicted.
"""

from __future__ import annotations

import bisect
import itertools
import logging
import time
from collections.abc import Callable

from pylivemotion._constants import DEFAULT_BUFFER_CAPACITY
from pylivemotion.models.report import PositionReport

_logger = logging.getLogger(__name__)


def _now_ms() -> int:
    """Current epoch timestamp in milliseconds."""
    return int(time.time() * 1000)


class NetworkBuffer:
    """Timestamp-ordered queue of reports for a single entity.

    Reports without a timestamp are stamped with *clock* on arrival.
    """

    def __init__(
        self,
        *,
        capacity: int = DEFAULT_BUFFER_CAPACITY,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._capacity = capacity
        self._clock = clock
        self._entries: list[tuple[int, int, PositionReport]] = []
        self._sequence = itertools.count()
        self._last_processed_ts = 0
        self.dropped_count = 0
        self.evicted_count = 0

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, report: PositionReport) -> None:
        """Insert *report* in timestamp order, or drop it if already superseded."""
        ts = report.timestamp if report.timestamp is not None else self._clock()

        if ts < self._last_processed_ts:
            self.dropped_count += 1
            _logger.debug(
                "Dropped late report id=%s ts=%s watermark=%s",
                report.id,
                ts,
                self._last_processed_ts,
            )
            return

        # The sequence number keeps equal timestamps in arrival order.
        bisect.insort(self._entries, (ts, next(self._sequence), report))

        if len(self._entries) > self._capacity:
            evicted_ts, _, evicted = self._entries.pop(0)
            self.evicted_count += 1
            _logger.debug("Buffer full, evicted oldest report id=%s ts=%s", evicted.id, evicted_ts)

    def pop(self) -> PositionReport | None:
        """Remove and return the earliest report, or ``None`` when empty."""
        if not self._entries:
            return None
        ts, _, report = self._entries.pop(0)
        self._last_processed_ts = ts
        return report

    def latest_timestamp(self) -> int:
        """Newest buffered timestamp, or the last processed one when empty."""
        if not self._entries:
            return self._last_processed_ts
        return self._entries[-1][0]

    @property
    def last_processed_timestamp(self) -> int:
        return self._last_processed_ts
