"""
Trend Duration Tracker — how long pivot-to-pivot trends last.

A trend starts on the first pivot and ends on the first pivot in the
opposite direction. The closing pivot names the history its length goes
to: a long pivot that ends a short trend appends to the long history.
Histories are bounded (oldest evicted first) and averaged every bar.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Iterable

from indicators import Direction

logger = logging.getLogger(__name__)


def _mean(values: Iterable[int]) -> float:
    values = list(values)
    return sum(values) / len(values) if values else 0.0


@dataclass(frozen=True)
class TrendStats:
    """Trend outputs for one bar."""
    direction: Direction
    start_bar: int
    duration: int
    avg_long: float
    avg_short: float
    avg_overall: float
    exceeds_average: bool
    long_count: int
    short_count: int


class TrendState:
    """Mutable trend state owned by one tracker."""

    def __init__(self, capacity: int = 20):
        self.direction = Direction.NONE
        self.start_bar = 0
        self.long_durations: deque[int] = deque(maxlen=capacity)
        self.short_durations: deque[int] = deque(maxlen=capacity)


class TrendDurationTracker:

    def __init__(self, capacity: int = 20):
        self.capacity = capacity
        self.state = TrendState(capacity)

    def update(
        self, bar_index: int, long_pivot: bool, short_pivot: bool, commit: bool = True
    ) -> TrendStats:
        s = self.state
        direction = s.direction
        start_bar = s.start_bar
        long_hist: Iterable[int] = s.long_durations
        short_hist: Iterable[int] = s.short_durations

        if long_pivot and direction != Direction.LONG:
            if direction == Direction.SHORT:
                duration = bar_index - start_bar
                if duration > 0:
                    long_hist = self._appended(s.long_durations, duration, commit)
            direction, start_bar = Direction.LONG, bar_index
        elif short_pivot and direction != Direction.SHORT:
            if direction == Direction.LONG:
                duration = bar_index - start_bar
                if duration > 0:
                    short_hist = self._appended(s.short_durations, duration, commit)
            direction, start_bar = Direction.SHORT, bar_index

        if commit and direction != s.direction:
            logger.info(f"Bar {bar_index}: trend {s.direction.value} → {direction.value}")

        if commit:
            s.direction = direction
            s.start_bar = start_bar

        long_hist = list(long_hist)
        short_hist = list(short_hist)
        avg_long = _mean(long_hist)
        avg_short = _mean(short_hist)
        total = len(long_hist) + len(short_hist)
        avg_overall = (sum(long_hist) + sum(short_hist)) / total if total else 0.0

        current = bar_index - start_bar if direction != Direction.NONE else 0
        if direction == Direction.LONG:
            reference = avg_long
        elif direction == Direction.SHORT:
            reference = avg_short
        else:
            reference = 0.0

        return TrendStats(
            direction=direction,
            start_bar=start_bar,
            duration=current,
            avg_long=avg_long,
            avg_short=avg_short,
            avg_overall=avg_overall,
            exceeds_average=reference > 0 and current > reference,
            long_count=len(long_hist),
            short_count=len(short_hist),
        )

    def _appended(self, history: deque, duration: int, commit: bool) -> Iterable[int]:
        if commit:
            history.append(duration)
            return history
        preview = deque(history, maxlen=self.capacity)
        preview.append(duration)
        return preview
