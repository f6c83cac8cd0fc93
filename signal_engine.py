"""
Signal Engine — runs the per-bar pipeline over one ordered bar stream.

bar → indicators → signal gate → alert cooldowns → trend statistics → result

Closed bars advance every piece of state. Open (still-forming) bars are
evaluated from the last closed state without changing it, so an intra-bar
revision can be re-evaluated any number of times.
"""

import logging
import math
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional

import pandas as pd

from alert_state import AlertPayload, AlertSnapshot, AlertStateMachine, SignalId
from exceptions import DataError
from indicators import IndicatorBundle, IndicatorValues
from presets import EngineConfig, config_from_env
from signal_gate import SignalGate, SignalSet
from trend_tracker import TrendDurationTracker, TrendStats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bar:
    """One OHLCV bar."""
    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float


class BarStatus(Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass
class BarResult:
    """Everything the engine exposes after one bar."""
    bar: Bar
    bar_index: int
    status: BarStatus
    closed: bool = True
    error: Optional[str] = None
    indicators: Optional[IndicatorValues] = None
    signals: Optional[SignalSet] = None
    alert: Optional[AlertSnapshot] = None
    trend: Optional[TrendStats] = None
    alerts: list[AlertPayload] = field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return self.status == BarStatus.ACCEPTED

    def to_record(self) -> dict:
        """Flatten into one row (used for DataFrame export)."""
        record = {
            "timestamp": self.bar.timestamp,
            "bar_index": self.bar_index,
            "status": self.status.value,
            "closed": self.closed,
            "error": self.error,
            "open": self.bar.open,
            "high": self.bar.high,
            "low": self.bar.low,
            "close": self.bar.close,
            "volume": self.bar.volume,
        }
        if not self.accepted:
            return record

        record.update(asdict(self.indicators))
        record.update(asdict(self.signals))
        record["any_reversal"] = self.signals.any_reversal
        record.update({
            "long_pivot_active": self.alert.long_pivot_active,
            "short_pivot_active": self.alert.short_pivot_active,
            "last_alert_type": self.alert.last_alert_type.value,
            "bars_since_last_alert": self.alert.bars_since_last_alert,
            "trend_direction": self.trend.direction.value,
            "trend_duration": self.trend.duration,
            "avg_long": self.trend.avg_long,
            "avg_short": self.trend.avg_short,
            "avg_overall": self.trend.avg_overall,
            "exceeds_average": self.trend.exceeds_average,
            "alerts": ",".join(p.signal_id.value for p in self.alerts),
        })
        return record


class SignalEngine:
    """One engine per bar stream. Owns all indicator, alert and trend state."""

    def __init__(self, engine_config: Optional[EngineConfig] = None):
        self.config = engine_config or config_from_env()
        self.indicators = IndicatorBundle(self.config)
        self.gate = SignalGate(self.config)
        self.alert_machine = AlertStateMachine(self.config.pivot_cooldown_bars)
        self.trend_tracker = TrendDurationTracker(self.config.trend_history_capacity)

        self.bar_index = 0                                 # closed bars so far
        self.last_result: Optional[BarResult] = None
        self._last_closed_ts: Optional[datetime] = None
        self._open_ts: Optional[datetime] = None

        p = self.config.params
        logger.info(
            f"SignalEngine ready: {self.config.style.value} | "
            f"EMA {p.super_fast_ema}/{p.fast_ema}/{p.slow_ema} | "
            f"RSI {p.rsi_length} ({p.rsi_oversold}/{p.rsi_overbought}) | "
            f"ADX {p.adx_length} > {p.adx_threshold} | "
            f"cooldown {self.config.pivot_cooldown_bars} bars"
        )

    # ── Validation ──────────────────────────────────────

    def _validate(self, bar: Bar):
        ts = bar.timestamp
        if ts is None:
            raise DataError("Bar has no timestamp")
        if not isinstance(ts, datetime):
            raise DataError(f"Bar timestamp must be a datetime, got {type(ts).__name__}")

        for name in ("open", "high", "low", "close", "volume"):
            value = getattr(bar, name)
            try:
                finite = value is not None and math.isfinite(value)
            except TypeError:
                finite = False
            if not finite:
                raise DataError(f"Bar {name} is missing or not finite: {value!r}")
            if value < 0:
                raise DataError(f"Bar {name} is negative: {value}")
        if bar.high < bar.low:
            raise DataError(f"Bar high {bar.high} is below low {bar.low}")

        try:
            if self._last_closed_ts is not None and ts <= self._last_closed_ts:
                raise DataError(
                    f"Non-monotonic timestamp {ts.isoformat()} "
                    f"(last closed bar {self._last_closed_ts.isoformat()})"
                )
            if self._open_ts is not None and ts != self._open_ts:
                raise DataError(
                    f"Bar {self._open_ts.isoformat()} is still open; "
                    f"close it before sending {ts.isoformat()}"
                )
        except TypeError:
            raise DataError("Cannot mix timezone-aware and naive timestamps") from None

    # ── Pipeline ────────────────────────────────────────

    def update(self, bar: Bar, closed: bool = True) -> BarResult:
        """
        Feed one bar. ``closed=False`` previews a still-forming bar.
        Bad bars come back with status REJECTED; state is left untouched.
        """
        try:
            self._validate(bar)
        except DataError as e:
            logger.warning(f"⛔ Rejected bar #{self.bar_index}: {e}")
            return BarResult(bar=bar, bar_index=self.bar_index,
                             status=BarStatus.REJECTED, closed=closed, error=str(e))

        commit = closed
        index = self.bar_index

        values = self.indicators.update(bar, commit)
        signals = self.gate.evaluate(bar, values, commit)
        alert = self.alert_machine.update(
            index,
            signals.long_pivot,
            signals.short_pivot,
            signals.filtered_long,
            signals.filtered_short,
            commit,
        )
        trend = self.trend_tracker.update(index, signals.long_pivot, signals.short_pivot, commit)
        payloads = self._payloads(bar, index, signals, alert)

        result = BarResult(
            bar=bar,
            bar_index=index,
            status=BarStatus.ACCEPTED,
            closed=closed,
            indicators=values,
            signals=signals,
            alert=alert,
            trend=trend,
            alerts=payloads,
        )

        if closed:
            self.bar_index += 1
            self._last_closed_ts = bar.timestamp
            self._open_ts = None
            for payload in payloads:
                logger.info(f"🔔 {payload.message}")
        else:
            self._open_ts = bar.timestamp
            logger.debug(f"Preview bar #{index} @ {bar.timestamp.isoformat()} close={bar.close}")

        self.last_result = result
        return result

    @staticmethod
    def _payloads(
        bar: Bar, index: int, signals: SignalSet, alert: AlertSnapshot
    ) -> list[AlertPayload]:
        fired: list[SignalId] = []
        if alert.long_pivot_active:
            fired.append(SignalId.SYZ_PIVOT_LONG)
        if alert.long_trend_pivot_active:
            fired.append(SignalId.TPIV_LONG)
        if alert.short_pivot_active:
            fired.append(SignalId.SYZ_PIVOT_SHORT)
        if alert.short_trend_pivot_active:
            fired.append(SignalId.TPIV_SHORT)
        if signals.reversal_onset:
            fired.append(SignalId.SYZYGY_MOMENTUM_PEAK)
        if signals.overbought_alert:
            fired.append(SignalId.OVERBOUGHT)
        if signals.oversold_alert:
            fired.append(SignalId.OVERSOLD)

        return [
            AlertPayload(signal_id=sid, timestamp=bar.timestamp, close=bar.close, bar_index=index)
            for sid in fired
        ]

    def run(self, bars: Iterable[Bar]) -> list[BarResult]:
        """Feed a sequence of closed bars; one result per bar."""
        results = [self.update(bar) for bar in bars]
        rejected = sum(1 for r in results if not r.accepted)
        if rejected:
            logger.warning(f"{rejected}/{len(results)} bars rejected")
        return results


def results_to_frame(results: Iterable[BarResult]) -> pd.DataFrame:
    """One row per bar result, indexed by bar timestamp."""
    frame = pd.DataFrame([r.to_record() for r in results])
    if frame.empty:
        return frame
    return frame.set_index("timestamp")
