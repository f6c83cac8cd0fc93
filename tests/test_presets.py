from datetime import timezone

import pytest

import config
from exceptions import ConfigurationError
from presets import (
    CUSTOM_DEFAULTS,
    PRESETS,
    EngineConfig,
    StyleParams,
    TimeWindow,
    TradingStyle,
    build_config,
    config_from_env,
    resolve_style_params,
)


@pytest.mark.parametrize("style, expected", [
    (TradingStyle.SCALPING, (21, 50, 8, 20, 2.0, 14, 14, 75, 25, 25)),
    (TradingStyle.DAY_TRADING, (21, 50, 9, 20, 1.5, 14, 14, 70, 30, 30)),
    (TradingStyle.SWING_TRADING, (50, 200, 20, 30, 1.3, 21, 21, 65, 35, 25)),
    (TradingStyle.CUSTOM, (50, 200, 9, 20, 1.5, 14, 14, 70, 30, 40)),
])
def test_preset_table(style, expected):
    p = resolve_style_params(style)
    assert (
        p.fast_ema, p.slow_ema, p.super_fast_ema,
        p.volume_ma_length, p.volume_multiplier,
        p.rsi_length, p.adx_length,
        p.rsi_overbought, p.rsi_oversold, p.adx_threshold,
    ) == expected


def test_every_non_custom_style_has_a_preset():
    assert set(PRESETS) == set(TradingStyle) - {TradingStyle.CUSTOM}


@pytest.mark.parametrize("text", ["Day Trading", "day trading", "DAY_TRADING", " day_trading "])
def test_style_parse_accepts_value_and_name(text):
    assert TradingStyle.parse(text) == TradingStyle.DAY_TRADING


def test_style_parse_rejects_unknown():
    with pytest.raises(ConfigurationError):
        TradingStyle.parse("Position Trading")


def test_custom_overrides_merge_over_defaults():
    p = resolve_style_params("Custom", {"fast_ema": 12, "adx_threshold": 20})
    assert p.fast_ema == 12
    assert p.adx_threshold == 20
    assert p.slow_ema == CUSTOM_DEFAULTS.slow_ema


def test_custom_accepts_full_param_row():
    row = StyleParams(5, 10, 3, 10, 2.5, 7, 7, 80, 20, 15)
    assert resolve_style_params(TradingStyle.CUSTOM, row) is row


def test_custom_rejects_unknown_override():
    with pytest.raises(ConfigurationError):
        resolve_style_params("Custom", {"macd_fast": 12})


def test_overrides_rejected_for_presets():
    with pytest.raises(ConfigurationError):
        resolve_style_params("Scalping", {"fast_ema": 12})


def test_build_config_defaults():
    cfg = build_config("Scalping")
    assert cfg.style == TradingStyle.SCALPING
    assert cfg.pivot_cooldown_bars == 3
    assert cfg.trend_history_capacity == 20
    assert cfg.tz is timezone.utc


@pytest.mark.parametrize("custom, options", [
    ({"fast_ema": 0}, {}),
    ({"rsi_length": 2.5}, {}),
    ({"volume_multiplier": 0}, {}),
    ({"rsi_oversold": 70, "rsi_overbought": 30}, {}),
    ({"adx_threshold": 120}, {}),
    (None, {"reversal_threshold_multiplier": 0.4}),
    (None, {"reversal_threshold_multiplier": 1.1}),
    (None, {"pivot_cooldown_bars": -1}),
    (None, {"trend_history_capacity": 0}),
    (None, {"primary_window": TimeWindow(7, 24)}),
    (None, {"secondary_window": TimeWindow(-1, 2)}),
    (None, {"timezone_name": "Mars/Olympus_Mons"}),
    (None, {"no_such_option": True}),
])
def test_invalid_config_fails_fast(custom, options):
    with pytest.raises(ConfigurationError):
        build_config("Custom", custom, **options)


def test_time_window_half_open():
    window = TimeWindow(7, 11)
    assert not window.contains(6)
    assert window.contains(7)
    assert window.contains(10)
    assert not window.contains(11)


def test_time_window_wraps_midnight():
    sydney = TimeWindow(19, 2)
    assert sydney.contains(23)
    assert sydney.contains(1)
    assert not sydney.contains(2)
    assert not sydney.contains(10)


def test_within_window_combines_primary_and_secondary():
    cfg = build_config(
        "Day Trading",
        use_time_filter=True,
        primary_window=TimeWindow(7, 11),
        enable_secondary_window=True,
        secondary_window=TimeWindow(19, 2),
    )
    assert [h for h in range(24) if cfg.within_window(h)] == [0, 1, 7, 8, 9, 10, 19, 20, 21, 22, 23]


def test_time_filter_disabled_passes_every_hour():
    cfg = build_config("Day Trading", use_time_filter=False)
    assert all(cfg.within_window(h) for h in range(24))


def test_engine_config_is_immutable():
    cfg = build_config("Scalping")
    with pytest.raises(AttributeError):
        cfg.pivot_cooldown_bars = 10


def test_config_from_env(monkeypatch):
    monkeypatch.setattr(config, "TRADING_STYLE", "Swing Trading")
    monkeypatch.setattr(config, "PIVOT_COOLDOWN_BARS", 5)
    monkeypatch.setattr(config, "USE_TIME_FILTER", True)
    cfg = config_from_env()
    assert cfg.style == TradingStyle.SWING_TRADING
    assert cfg.params == PRESETS[TradingStyle.SWING_TRADING]
    assert cfg.pivot_cooldown_bars == 5
    assert cfg.use_time_filter


def test_config_from_env_custom_and_style_override(monkeypatch):
    monkeypatch.setattr(config, "TRADING_STYLE", "Scalping")
    monkeypatch.setattr(config, "CUSTOM_FAST_EMA", 13)
    cfg = config_from_env("Custom")
    assert cfg.style == TradingStyle.CUSTOM
    assert cfg.params.fast_ema == 13


@pytest.mark.parametrize("helper, raw", [
    (config._env_int, "three"),
    (config._env_float, "1.5x"),
    (config._env_bool, "maybe"),
])
def test_malformed_env_values(monkeypatch, helper, raw):
    monkeypatch.setenv("SYZ_TEST_VALUE", raw)
    with pytest.raises(ConfigurationError):
        helper("SYZ_TEST_VALUE", 1)


def test_env_helpers_fall_back_to_default(monkeypatch):
    monkeypatch.delenv("SYZ_TEST_VALUE", raising=False)
    assert config._env_int("SYZ_TEST_VALUE", 4) == 4
    assert config._env_bool("SYZ_TEST_VALUE", True) is True
    monkeypatch.setenv("SYZ_TEST_VALUE", "off")
    assert config._env_bool("SYZ_TEST_VALUE", True) is False


def test_engine_config_direct_construction_validates():
    with pytest.raises(ConfigurationError):
        EngineConfig(style=TradingStyle.CUSTOM, params=CUSTOM_DEFAULTS, pivot_cooldown_bars=True)


def test_time_window_equal_bounds_is_empty():
    assert not any(TimeWindow(9, 9).contains(h) for h in range(24))
