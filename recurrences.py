"""
Streaming indicator recurrences with O(1) updates.

Every recurrence keeps only the state needed to produce its next value.
``update(..., commit=True)`` advances that state; ``commit=False`` computes
the value the recurrence *would* produce for a still-open bar without
touching the committed state, so an intra-bar revision can be evaluated any
number of times and the bar is only counted once, when it closes.

Seeding conventions:
  EMA / RMA  — seeded with the first input, no warmup window
  SMA        — mean of the inputs seen so far until the window is full
  RSI        — 50 on the first bar, Wilder-smoothed gains/losses after
  DMI / ADX  — Wilder chain (RMA of +DM, -DM, TR and DX)
"""

import math
from collections import deque
from dataclasses import dataclass
from typing import Optional

from exceptions import ConfigurationError


def _check_length(length: int, name: str):
    if isinstance(length, bool) or not isinstance(length, int) or length < 1:
        raise ConfigurationError(f"{name} length must be an integer >= 1, got {length!r}")


class ExponentialAverage:
    """
    Exponential smoothing: avg_t = avg_{t-1} + alpha * (x_t - avg_{t-1}).

    EMA uses alpha = 2 / (length + 1); Wilder's RMA uses alpha = 1 / length.
    """

    def __init__(self, length: int, alpha: Optional[float] = None):
        _check_length(length, "EMA")
        self.length = length
        self.alpha = alpha if alpha is not None else 2.0 / (length + 1)
        self._value: Optional[float] = None

    @classmethod
    def wilder(cls, length: int) -> "ExponentialAverage":
        _check_length(length, "RMA")
        return cls(length, alpha=1.0 / length)

    @property
    def value(self) -> Optional[float]:
        """Last committed output (None before the first closed bar)."""
        return self._value

    def update(self, x: float, commit: bool = True) -> float:
        if self._value is None:
            new = float(x)
        else:
            new = self._value + self.alpha * (x - self._value)
        if commit:
            self._value = new
        return new


class SimpleMovingAverage:
    """Mean of the last ``length`` inputs, via a bounded FIFO and running sum.

    The running sum is rebuilt from the window every ``length`` commits so
    rounding error cannot accumulate over a long stream.
    """

    def __init__(self, length: int):
        _check_length(length, "SMA")
        self.length = length
        self._window: deque[float] = deque()
        self._sum = 0.0
        self._commits = 0

    @property
    def value(self) -> Optional[float]:
        if not self._window:
            return None
        return self._sum / len(self._window)

    def update(self, x: float, commit: bool = True) -> float:
        full = len(self._window) == self.length
        evicted = self._window[0] if full else 0.0
        total = self._sum + x - evicted
        count = len(self._window) if full else len(self._window) + 1

        if commit:
            if full:
                self._window.popleft()
            self._window.append(float(x))
            self._commits += 1
            if self._commits % self.length == 0:
                self._sum = math.fsum(self._window)
            else:
                self._sum = total
        return total / count


class RelativeStrengthIndex:
    """
    Wilder RSI.

    RSI = 100 - 100 / (1 + avgGain / avgLoss), with
      avgGain == avgLoss == 0  ->  50
      avgLoss == 0             -> 100
    The first bar has no previous close and reports 50.
    """

    NEUTRAL = 50.0

    def __init__(self, length: int):
        _check_length(length, "RSI")
        self.length = length
        self._gain = ExponentialAverage.wilder(length)
        self._loss = ExponentialAverage.wilder(length)
        self._prev_close: Optional[float] = None

    @staticmethod
    def from_averages(avg_gain: float, avg_loss: float) -> float:
        if avg_loss == 0:
            return RelativeStrengthIndex.NEUTRAL if avg_gain == 0 else 100.0
        rs = avg_gain / avg_loss
        return 100.0 - 100.0 / (1.0 + rs)

    def update(self, close: float, commit: bool = True) -> float:
        if self._prev_close is None:
            if commit:
                self._prev_close = float(close)
            return self.NEUTRAL

        change = close - self._prev_close
        avg_gain = self._gain.update(max(change, 0.0), commit)
        avg_loss = self._loss.update(max(-change, 0.0), commit)
        if commit:
            self._prev_close = float(close)
        return self.from_averages(avg_gain, avg_loss)


class TrueRange:
    """max(high - low, |high - prevClose|, |low - prevClose|); high - low on the first bar."""

    def __init__(self):
        self._prev_close: Optional[float] = None

    def update(self, high: float, low: float, close: float, commit: bool = True) -> float:
        if self._prev_close is None:
            tr = high - low
        else:
            tr = max(high - low, abs(high - self._prev_close), abs(low - self._prev_close))
        if commit:
            self._prev_close = float(close)
        return tr


@dataclass(frozen=True)
class DMIValue:
    plus_di: float
    minus_di: float
    dx: float
    adx: float


class DirectionalMovementIndex:
    """
    +DI / -DI / ADX on the Wilder chain.

    +DM = upMove   if upMove > downMove and upMove > 0 else 0
    -DM = downMove if downMove > upMove and downMove > 0 else 0
    ±DI = 100 * RMA(±DM) / RMA(TR)        (0 when RMA(TR) is 0)
    DX  = 100 * |+DI - -DI| / (+DI + -DI)  (0 when the sum is 0)
    ADX = RMA(DX)
    """

    def __init__(self, length: int):
        _check_length(length, "DMI")
        self.length = length
        self._true_range = TrueRange()
        self._tr = ExponentialAverage.wilder(length)
        self._plus_dm = ExponentialAverage.wilder(length)
        self._minus_dm = ExponentialAverage.wilder(length)
        self._adx = ExponentialAverage.wilder(length)
        self._prev_high: Optional[float] = None
        self._prev_low: Optional[float] = None

    def update(self, high: float, low: float, close: float, commit: bool = True) -> DMIValue:
        if self._prev_high is None:
            up_move = down_move = 0.0
        else:
            up_move = high - self._prev_high
            down_move = self._prev_low - low

        plus_dm = up_move if up_move > down_move and up_move > 0 else 0.0
        minus_dm = down_move if down_move > up_move and down_move > 0 else 0.0

        tr = self._true_range.update(high, low, close, commit)
        smoothed_tr = self._tr.update(tr, commit)
        smoothed_plus = self._plus_dm.update(plus_dm, commit)
        smoothed_minus = self._minus_dm.update(minus_dm, commit)

        if smoothed_tr > 0:
            plus_di = 100.0 * smoothed_plus / smoothed_tr
            minus_di = 100.0 * smoothed_minus / smoothed_tr
        else:
            plus_di = minus_di = 0.0

        di_sum = plus_di + minus_di
        dx = 100.0 * abs(plus_di - minus_di) / di_sum if di_sum > 0 else 0.0
        adx = self._adx.update(dx, commit)

        if commit:
            self._prev_high = float(high)
            self._prev_low = float(low)
        return DMIValue(plus_di=plus_di, minus_di=minus_di, dx=dx, adx=adx)
