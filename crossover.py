"""
Crossover detection between two scalar series, one bar of lookback.
"""

from dataclasses import dataclass
from typing import Optional


def crossover(curr_a: float, curr_b: float, prev_a: float, prev_b: float) -> bool:
    """a crosses above b: now a > b, previously a <= b."""
    return curr_a > curr_b and prev_a <= prev_b


def crossunder(curr_a: float, curr_b: float, prev_a: float, prev_b: float) -> bool:
    """a crosses below b: now a < b, previously a >= b."""
    return curr_a < curr_b and prev_a >= prev_b


@dataclass(frozen=True)
class CrossEvent:
    crossover: bool = False
    crossunder: bool = False
    previous_a: Optional[float] = None

    @property
    def any_cross(self) -> bool:
        return self.crossover or self.crossunder


class CrossoverDetector:
    """
    Tracks the previous sample of a series pair.
    Reports no cross on the first bar of the stream.
    """

    def __init__(self):
        self._prev: Optional[tuple[float, float]] = None

    def update(self, a: float, b: float, commit: bool = True) -> CrossEvent:
        prev = self._prev
        if commit:
            self._prev = (a, b)
        if prev is None:
            return CrossEvent()
        prev_a, prev_b = prev
        return CrossEvent(
            crossover=crossover(a, b, prev_a, prev_b),
            crossunder=crossunder(a, b, prev_a, prev_b),
            previous_a=prev_a,
        )
