"""
Indicator bundle — the named indicators the signal gate consumes.
Composes the streaming recurrences with the parameters of one trading style.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from presets import EngineConfig
from recurrences import (
    DirectionalMovementIndex,
    ExponentialAverage,
    RelativeStrengthIndex,
    SimpleMovingAverage,
)

logger = logging.getLogger(__name__)


class Direction(Enum):
    LONG = "LONG"
    SHORT = "SHORT"
    NONE = "NONE"


@dataclass(frozen=True)
class IndicatorValues:
    """Indicator outputs for one bar."""
    super_fast_ema: float
    fast_ema: float
    slow_ema: float
    middle_ema: float        # (fast + slow) / 2
    volume_ma: float
    rsi: float
    plus_di: float
    minus_di: float
    adx: float


class IndicatorBundle:
    """
    SuperFast / Fast / Slow / Middle EMA, RSI, ADX with the DI pair and
    the volume moving average, all updated once per bar.
    """

    def __init__(self, engine_config: EngineConfig):
        p = engine_config.params
        self.super_fast = ExponentialAverage(p.super_fast_ema)
        self.fast = ExponentialAverage(p.fast_ema)
        self.slow = ExponentialAverage(p.slow_ema)
        self.volume_ma = SimpleMovingAverage(p.volume_ma_length)
        self.rsi = RelativeStrengthIndex(p.rsi_length)
        self.dmi = DirectionalMovementIndex(p.adx_length)

    def update(self, bar, commit: bool = True) -> IndicatorValues:
        close = bar.close
        fast = self.fast.update(close, commit)
        slow = self.slow.update(close, commit)
        dmi = self.dmi.update(bar.high, bar.low, close, commit)

        values = IndicatorValues(
            super_fast_ema=self.super_fast.update(close, commit),
            fast_ema=fast,
            slow_ema=slow,
            middle_ema=(fast + slow) / 2,
            volume_ma=self.volume_ma.update(bar.volume, commit),
            rsi=self.rsi.update(close, commit),
            plus_di=dmi.plus_di,
            minus_di=dmi.minus_di,
            adx=dmi.adx,
        )
        logger.debug(
            f"EMA {values.super_fast_ema:.4f}/{values.middle_ema:.4f} "
            f"RSI {values.rsi:.1f} ADX {values.adx:.1f} "
            f"(+DI {values.plus_di:.1f} / -DI {values.minus_di:.1f})"
        )
        return values
