"""
Trading-style presets and the immutable engine configuration.

The preset table is fixed, versioned data: every style maps to one
StyleParams row. Custom starts from its own default row and accepts
explicit overrides. EngineConfig validates everything up front so that
no bad parameter can surface mid-stream.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from enum import Enum
from typing import Mapping, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import config
from exceptions import ConfigurationError

logger = logging.getLogger(__name__)

PRESET_TABLE_VERSION = "1.0"


class TradingStyle(Enum):
    SCALPING = "Scalping"
    DAY_TRADING = "Day Trading"
    SWING_TRADING = "Swing Trading"
    CUSTOM = "Custom"

    @classmethod
    def parse(cls, value: Union["TradingStyle", str]) -> "TradingStyle":
        """Accept the enum itself, its display value or its name."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for style in cls:
            if text.lower() in (style.value.lower(), style.name.lower()):
                return style
        raise ConfigurationError(
            f"Unknown trading style {value!r} "
            f"(expected one of: {', '.join(s.value for s in cls)})"
        )


@dataclass(frozen=True)
class StyleParams:
    """One column of the preset table."""
    fast_ema: int
    slow_ema: int
    super_fast_ema: int
    volume_ma_length: int
    volume_multiplier: float
    rsi_length: int
    adx_length: int
    rsi_overbought: float
    rsi_oversold: float
    adx_threshold: float


PRESETS: dict[TradingStyle, StyleParams] = {
    TradingStyle.SCALPING: StyleParams(
        fast_ema=21, slow_ema=50, super_fast_ema=8,
        volume_ma_length=20, volume_multiplier=2.0,
        rsi_length=14, adx_length=14,
        rsi_overbought=75, rsi_oversold=25, adx_threshold=25,
    ),
    TradingStyle.DAY_TRADING: StyleParams(
        fast_ema=21, slow_ema=50, super_fast_ema=9,
        volume_ma_length=20, volume_multiplier=1.5,
        rsi_length=14, adx_length=14,
        rsi_overbought=70, rsi_oversold=30, adx_threshold=30,
    ),
    TradingStyle.SWING_TRADING: StyleParams(
        fast_ema=50, slow_ema=200, super_fast_ema=20,
        volume_ma_length=30, volume_multiplier=1.3,
        rsi_length=21, adx_length=21,
        rsi_overbought=65, rsi_oversold=35, adx_threshold=25,
    ),
}

CUSTOM_DEFAULTS = StyleParams(
    fast_ema=50, slow_ema=200, super_fast_ema=9,
    volume_ma_length=20, volume_multiplier=1.5,
    rsi_length=14, adx_length=14,
    rsi_overbought=70, rsi_oversold=30, adx_threshold=40,
)

CustomOverrides = Union[StyleParams, Mapping[str, float]]


def resolve_style_params(
    style: Union[TradingStyle, str],
    custom: Optional[CustomOverrides] = None,
) -> StyleParams:
    """Look up the preset row for a style, merging overrides for Custom."""
    style = TradingStyle.parse(style)

    if style != TradingStyle.CUSTOM:
        if custom:
            raise ConfigurationError(
                f"Parameter overrides are only accepted for the Custom style, not {style.value}"
            )
        return PRESETS[style]

    if custom is None:
        return CUSTOM_DEFAULTS
    if isinstance(custom, StyleParams):
        return custom

    known = {f.name for f in dataclasses.fields(StyleParams)}
    unknown = sorted(set(custom) - known)
    if unknown:
        raise ConfigurationError(f"Unknown custom parameter(s): {', '.join(unknown)}")
    return dataclasses.replace(CUSTOM_DEFAULTS, **dict(custom))


@dataclass(frozen=True)
class TimeWindow:
    """
    Half-open hour window [start_hour, end_hour).
    When start_hour > end_hour the window wraps past midnight.
    """
    start_hour: int
    end_hour: int

    def contains(self, hour: int) -> bool:
        if self.start_hour <= self.end_hour:
            return self.start_hour <= hour < self.end_hour
        return hour >= self.start_hour or hour < self.end_hour


def _resolve_timezone(name: str) -> tzinfo:
    if name.strip().upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ConfigurationError(f"Unknown timezone {name!r}") from None


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class EngineConfig:
    """Everything the engine needs for one run. Immutable once built."""
    style: TradingStyle
    params: StyleParams
    use_volume_filter: bool = True
    reversal_threshold_multiplier: float = 0.8
    pivot_cooldown_bars: int = 3
    use_time_filter: bool = False
    primary_window: TimeWindow = TimeWindow(7, 11)
    enable_secondary_window: bool = False
    secondary_window: TimeWindow = TimeWindow(19, 2)
    timezone_name: str = "UTC"
    trend_history_capacity: int = 20
    tz: tzinfo = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self._validate()
        object.__setattr__(self, "tz", _resolve_timezone(self.timezone_name))

    def _validate(self):
        p = self.params
        for name in ("fast_ema", "slow_ema", "super_fast_ema",
                     "volume_ma_length", "rsi_length", "adx_length"):
            value = getattr(p, name)
            if not _is_int(value) or value < 1:
                raise ConfigurationError(f"{name} must be an integer >= 1, got {value!r}")

        if not p.volume_multiplier > 0:
            raise ConfigurationError(f"volume_multiplier must be > 0, got {p.volume_multiplier}")
        if not 0 < p.rsi_oversold < p.rsi_overbought < 100:
            raise ConfigurationError(
                f"RSI thresholds must satisfy 0 < oversold < overbought < 100, "
                f"got oversold={p.rsi_oversold} overbought={p.rsi_overbought}"
            )
        if not 0 <= p.adx_threshold <= 100:
            raise ConfigurationError(f"adx_threshold must be within [0, 100], got {p.adx_threshold}")

        if not 0.5 <= self.reversal_threshold_multiplier <= 1.0:
            raise ConfigurationError(
                f"reversal_threshold_multiplier must be within [0.5, 1.0], "
                f"got {self.reversal_threshold_multiplier}"
            )
        if not _is_int(self.pivot_cooldown_bars) or self.pivot_cooldown_bars < 0:
            raise ConfigurationError(
                f"pivot_cooldown_bars must be an integer >= 0, got {self.pivot_cooldown_bars!r}"
            )
        if not _is_int(self.trend_history_capacity) or self.trend_history_capacity < 1:
            raise ConfigurationError(
                f"trend_history_capacity must be an integer >= 1, got {self.trend_history_capacity!r}"
            )

        for label, window in (("primary", self.primary_window), ("secondary", self.secondary_window)):
            for hour in (window.start_hour, window.end_hour):
                if not _is_int(hour) or not 0 <= hour <= 23:
                    raise ConfigurationError(
                        f"{label} time window hours must be integers in [0, 23], got {hour!r}"
                    )

    def within_window(self, hour: int) -> bool:
        """Time-of-day filter for an hour already expressed in self.tz."""
        if not self.use_time_filter:
            return True
        if self.primary_window.contains(hour):
            return True
        return self.enable_secondary_window and self.secondary_window.contains(hour)


def build_config(
    style: Union[TradingStyle, str] = TradingStyle.DAY_TRADING,
    custom: Optional[CustomOverrides] = None,
    **options,
) -> EngineConfig:
    """
    Build a validated EngineConfig.

    Keyword options are the non-preset EngineConfig fields
    (use_volume_filter, pivot_cooldown_bars, primary_window, ...).
    """
    style = TradingStyle.parse(style)
    params = resolve_style_params(style, custom)
    try:
        return EngineConfig(style=style, params=params, **options)
    except TypeError as e:
        raise ConfigurationError(f"Invalid engine option: {e}") from None


def config_from_env(style: Optional[Union[TradingStyle, str]] = None) -> EngineConfig:
    """Build the EngineConfig described by config.py / the environment."""
    style = TradingStyle.parse(style or config.TRADING_STYLE)
    custom = None
    if style == TradingStyle.CUSTOM:
        custom = StyleParams(
            fast_ema=config.CUSTOM_FAST_EMA,
            slow_ema=config.CUSTOM_SLOW_EMA,
            super_fast_ema=config.CUSTOM_SUPER_FAST_EMA,
            volume_ma_length=config.CUSTOM_VOLUME_MA_LENGTH,
            volume_multiplier=config.CUSTOM_VOLUME_MULTIPLIER,
            rsi_length=config.CUSTOM_RSI_LENGTH,
            adx_length=config.CUSTOM_ADX_LENGTH,
            rsi_overbought=config.CUSTOM_RSI_OVERBOUGHT,
            rsi_oversold=config.CUSTOM_RSI_OVERSOLD,
            adx_threshold=config.CUSTOM_ADX_THRESHOLD,
        )

    engine_config = build_config(
        style,
        custom,
        use_volume_filter=config.USE_VOLUME_FILTER,
        reversal_threshold_multiplier=config.REVERSAL_THRESHOLD_MULTIPLIER,
        pivot_cooldown_bars=config.PIVOT_COOLDOWN_BARS,
        use_time_filter=config.USE_TIME_FILTER,
        primary_window=TimeWindow(config.START_HOUR, config.END_HOUR),
        enable_secondary_window=config.ENABLE_SECONDARY_WINDOW,
        secondary_window=TimeWindow(config.SECONDARY_START_HOUR, config.SECONDARY_END_HOUR),
        timezone_name=config.TIME_FILTER_TIMEZONE,
        trend_history_capacity=config.TREND_HISTORY_CAPACITY,
    )
    logger.info(f"Loaded {style.value} config (preset table v{PRESET_TABLE_VERSION})")
    return engine_config
