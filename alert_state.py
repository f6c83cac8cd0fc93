"""
Alert state — per-direction pivot cooldowns and the "last alert" summary.

A raw pivot is *active* only when at least ``cooldown`` bars have passed
since the last active pivot in the same direction. The most recent active
pivot is remembered (type + bar index) until superseded.
"""

import dataclasses
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

logger = logging.getLogger(__name__)


class AlertType(Enum):
    NONE = "None"
    LONG_PIVOT = "Long Pivot"
    SHORT_PIVOT = "Short Pivot"
    LONG_TREND_PIVOT = "Long Trend Pivot"
    SHORT_TREND_PIVOT = "Short Trend Pivot"


class SignalId(Enum):
    SYZ_PIVOT_LONG = "SYZ_PIVOT_LONG"
    SYZ_PIVOT_SHORT = "SYZ_PIVOT_SHORT"
    SYZYGY_MOMENTUM_PEAK = "SYZYGY_MOMENTUM_PEAK"
    OVERBOUGHT = "OVERBOUGHT"
    OVERSOLD = "OVERSOLD"
    TPIV_LONG = "TPIV_LONG"
    TPIV_SHORT = "TPIV_SHORT"


@dataclass(frozen=True)
class AlertStyle:
    label: str
    color: str


_ALERT_STYLES = {
    SignalId.SYZ_PIVOT_LONG: AlertStyle("🟢 Pivot LONG", "#00C853"),
    SignalId.SYZ_PIVOT_SHORT: AlertStyle("🔴 Pivot SHORT", "#D50000"),
    SignalId.TPIV_LONG: AlertStyle("🚀 Trend Pivot LONG", "#2962FF"),
    SignalId.TPIV_SHORT: AlertStyle("🔻 Trend Pivot SHORT", "#FF6D00"),
    SignalId.SYZYGY_MOMENTUM_PEAK: AlertStyle("⚡ Momentum Peak", "#AA00FF"),
    SignalId.OVERBOUGHT: AlertStyle("🔥 RSI Overbought exit", "#FF1744"),
    SignalId.OVERSOLD: AlertStyle("🧊 RSI Oversold exit", "#00B0FF"),
}


def alert_style(signal_id: SignalId) -> AlertStyle:
    """Display label and colour for a signal id."""
    return _ALERT_STYLES[signal_id]


@dataclass(frozen=True)
class AlertPayload:
    """What an alert consumer receives when a signal fires."""
    signal_id: SignalId
    timestamp: datetime
    close: float
    bar_index: int

    @property
    def message(self) -> str:
        return f"{self.signal_id.value} @ {self.timestamp.isoformat()} close={self.close}"

    def to_dict(self) -> dict:
        return {
            "signal": self.signal_id.value,
            "timestamp": self.timestamp.isoformat(),
            "close": self.close,
            "bar_index": self.bar_index,
        }


@dataclass(frozen=True)
class AlertState:
    last_alert_type: AlertType = AlertType.NONE
    last_alert_bar_index: int = 0
    last_long_signal_bar: int = 0
    last_short_signal_bar: int = 0


@dataclass(frozen=True)
class AlertSnapshot:
    """Alert outputs for one bar."""
    long_pivot_active: bool
    short_pivot_active: bool
    long_trend_pivot_active: bool
    short_trend_pivot_active: bool
    last_alert_type: AlertType
    last_alert_bar_index: int
    bars_since_last_alert: int
    fired: bool


class AlertStateMachine:
    """Owns AlertState; mutated once per closed bar."""

    def __init__(self, cooldown_bars: int = 3):
        self.cooldown_bars = cooldown_bars
        self.state = AlertState()

    def update(
        self,
        bar_index: int,
        long_pivot: bool,
        short_pivot: bool,
        filtered_long: bool = False,
        filtered_short: bool = False,
        commit: bool = True,
    ) -> AlertSnapshot:
        state = self.state
        long_active = long_pivot and bar_index - state.last_long_signal_bar >= self.cooldown_bars
        short_active = short_pivot and bar_index - state.last_short_signal_bar >= self.cooldown_bars

        new_state = state
        if long_active:
            new_state = dataclasses.replace(new_state, last_long_signal_bar=bar_index)
        if short_active:
            new_state = dataclasses.replace(new_state, last_short_signal_bar=bar_index)

        fired = long_active or short_active
        if long_active:
            alert_type = AlertType.LONG_TREND_PIVOT if filtered_long else AlertType.LONG_PIVOT
        elif short_active:
            alert_type = AlertType.SHORT_TREND_PIVOT if filtered_short else AlertType.SHORT_PIVOT
        if fired:
            new_state = dataclasses.replace(
                new_state, last_alert_type=alert_type, last_alert_bar_index=bar_index
            )
        elif long_pivot or short_pivot:
            logger.debug(f"Bar {bar_index}: pivot suppressed by {self.cooldown_bars}-bar cooldown")

        if commit:
            self.state = new_state

        return AlertSnapshot(
            long_pivot_active=long_active,
            short_pivot_active=short_active,
            long_trend_pivot_active=long_active and filtered_long,
            short_trend_pivot_active=short_active and filtered_short,
            last_alert_type=new_state.last_alert_type,
            last_alert_bar_index=new_state.last_alert_bar_index,
            bars_since_last_alert=1 if fired else bar_index - new_state.last_alert_bar_index,
            fired=fired,
        )
