"""
Signal gate — turns indicator values into pivot, reversal and RSI-edge signals.

Pivots:
  LONG  — SuperFast EMA crosses above the Middle EMA
  SHORT — SuperFast EMA crosses below the Middle EMA
Filtered pivots must also pass volume, trend-alignment, ADX-strength and
time-of-day filters. Reversal ("momentum peak") signals are threshold based
and independent of the pivots.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo

from crossover import CrossoverDetector
from indicators import IndicatorValues
from presets import EngineConfig, TradingStyle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StyleGate:
    require_di_alignment: bool
    adx_scale: float


STYLE_GATES: dict[TradingStyle, StyleGate] = {
    TradingStyle.SCALPING: StyleGate(require_di_alignment=True, adx_scale=1.0),
    TradingStyle.DAY_TRADING: StyleGate(require_di_alignment=False, adx_scale=0.75),
    TradingStyle.SWING_TRADING: StyleGate(require_di_alignment=False, adx_scale=0.6),
    TradingStyle.CUSTOM: StyleGate(require_di_alignment=False, adx_scale=1.0),
}

POTENTIAL_ADX_FACTOR = 0.8
POTENTIAL_VOLUME_FACTOR = 0.8


def bar_hour(timestamp: datetime, tz: tzinfo) -> int:
    """Hour of the bar in the reference timezone. Naive timestamps are UTC."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(tz).hour


def within_alert_window(timestamp: datetime, engine_config: EngineConfig) -> bool:
    return engine_config.within_window(bar_hour(timestamp, engine_config.tz))


@dataclass(frozen=True)
class SignalSet:
    """Every boolean the gate derives for one bar."""
    long_pivot: bool
    short_pivot: bool
    high_volume: bool
    trend_aligned_long: bool
    trend_aligned_short: bool
    adx_favorable: bool
    within_alert_window: bool
    filtered_long: bool
    filtered_short: bool
    strict_long: bool
    strict_short: bool
    potential_long: bool
    potential_short: bool
    overbought_alert: bool
    oversold_alert: bool
    reversal_onset: bool     # any_reversal true now, false on the previous bar

    @property
    def any_reversal(self) -> bool:
        return self.strict_long or self.strict_short or self.potential_long or self.potential_short


class SignalGate:
    """Evaluates the signal set; owns the crossover detectors it needs."""

    def __init__(self, engine_config: EngineConfig):
        self.config = engine_config
        self.params = engine_config.params
        self.style_gate = STYLE_GATES[engine_config.style]
        self._pivot_cross = CrossoverDetector()
        self._overbought_cross = CrossoverDetector()
        self._oversold_cross = CrossoverDetector()
        self._prev_any_reversal = False

    def _reversal_flags(self, v: IndicatorValues, volume: float) -> tuple[bool, bool, bool, bool]:
        p = self.params
        r = self.config.reversal_threshold_multiplier
        volume_spike = volume > v.volume_ma * p.volume_multiplier
        soft_volume_spike = volume > v.volume_ma * p.volume_multiplier * POTENTIAL_VOLUME_FACTOR
        soft_adx = v.adx >= POTENTIAL_ADX_FACTOR * p.adx_threshold

        strict_long = v.rsi <= p.rsi_oversold and v.adx >= p.adx_threshold and volume_spike
        strict_short = v.rsi >= p.rsi_overbought and v.adx >= p.adx_threshold and volume_spike

        potential_long = v.rsi <= p.rsi_oversold * r and soft_adx and soft_volume_spike
        potential_short = v.rsi >= p.rsi_overbought * r and soft_adx and soft_volume_spike
        return strict_long, strict_short, potential_long, potential_short

    def evaluate(self, bar, v: IndicatorValues, commit: bool = True) -> SignalSet:
        p = self.params
        pivot = self._pivot_cross.update(v.super_fast_ema, v.middle_ema, commit)

        high_volume = (not self.config.use_volume_filter
                       or bar.volume > v.volume_ma * p.volume_multiplier)
        if self.style_gate.require_di_alignment:
            trend_aligned_long = v.plus_di > v.minus_di
            trend_aligned_short = v.minus_di > v.plus_di
        else:
            trend_aligned_long = trend_aligned_short = True
        adx_favorable = v.adx > p.adx_threshold * self.style_gate.adx_scale
        in_window = within_alert_window(bar.timestamp, self.config)

        common = high_volume and adx_favorable and in_window
        filtered_long = pivot.crossover and trend_aligned_long and common
        filtered_short = pivot.crossunder and trend_aligned_short and common

        strict_long, strict_short, potential_long, potential_short = self._reversal_flags(v, bar.volume)
        any_reversal = strict_long or strict_short or potential_long or potential_short
        reversal_onset = any_reversal and not self._prev_any_reversal

        ob = self._overbought_cross.update(v.rsi, p.rsi_overbought, commit)
        os_ = self._oversold_cross.update(v.rsi, p.rsi_oversold, commit)
        overbought_alert = ob.crossunder and ob.previous_a > p.rsi_overbought
        oversold_alert = os_.crossover and os_.previous_a < p.rsi_oversold

        if commit:
            self._prev_any_reversal = any_reversal

        return SignalSet(
            long_pivot=pivot.crossover,
            short_pivot=pivot.crossunder,
            high_volume=high_volume,
            trend_aligned_long=trend_aligned_long,
            trend_aligned_short=trend_aligned_short,
            adx_favorable=adx_favorable,
            within_alert_window=in_window,
            filtered_long=filtered_long,
            filtered_short=filtered_short,
            strict_long=strict_long,
            strict_short=strict_short,
            potential_long=potential_long,
            potential_short=potential_short,
            overbought_alert=overbought_alert,
            oversold_alert=oversold_alert,
            reversal_onset=reversal_onset,
        )
