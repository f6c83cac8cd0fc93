"""
Central configuration for the Syzygy signal engine.
All settings are read from the environment (or .env) here for easy tuning.
"""

import os
from dotenv import load_dotenv

from exceptions import ConfigurationError

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ConfigurationError(f"{name}: expected a boolean, got {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name}: expected an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name}: expected a number, got {raw!r}") from None


# ── Telegram ────────────────────────────────────────────
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")
TELEGRAM_CHAT_ID = os.getenv("TELEGRAM_CHAT_ID", "")

# ── Trading Style ───────────────────────────────────────
# Scalping | Day Trading | Swing Trading | Custom
TRADING_STYLE = os.getenv("TRADING_STYLE", "Day Trading")

# ── Custom Style Parameters (used only when TRADING_STYLE=Custom) ──
CUSTOM_FAST_EMA = _env_int("CUSTOM_FAST_EMA", 50)
CUSTOM_SLOW_EMA = _env_int("CUSTOM_SLOW_EMA", 200)
CUSTOM_SUPER_FAST_EMA = _env_int("CUSTOM_SUPER_FAST_EMA", 9)
CUSTOM_VOLUME_MA_LENGTH = _env_int("CUSTOM_VOLUME_MA_LENGTH", 20)
CUSTOM_VOLUME_MULTIPLIER = _env_float("CUSTOM_VOLUME_MULTIPLIER", 1.5)
CUSTOM_RSI_LENGTH = _env_int("CUSTOM_RSI_LENGTH", 14)
CUSTOM_ADX_LENGTH = _env_int("CUSTOM_ADX_LENGTH", 14)
CUSTOM_RSI_OVERBOUGHT = _env_float("CUSTOM_RSI_OVERBOUGHT", 70)
CUSTOM_RSI_OVERSOLD = _env_float("CUSTOM_RSI_OVERSOLD", 30)
CUSTOM_ADX_THRESHOLD = _env_float("CUSTOM_ADX_THRESHOLD", 40)

# ── Filters ─────────────────────────────────────────────
USE_VOLUME_FILTER = _env_bool("USE_VOLUME_FILTER", True)
REVERSAL_THRESHOLD_MULTIPLIER = _env_float("REVERSAL_THRESHOLD_MULTIPLIER", 0.8)  # 0.5 – 1.0

# ── Alerts ──────────────────────────────────────────────
PIVOT_COOLDOWN_BARS = _env_int("PIVOT_COOLDOWN_BARS", 3)   # Min bars between same-direction pivots

# ── Time Filter ─────────────────────────────────────────
USE_TIME_FILTER = _env_bool("USE_TIME_FILTER", False)
START_HOUR = _env_int("START_HOUR", 7)                     # [start, end) in TIME_FILTER_TIMEZONE
END_HOUR = _env_int("END_HOUR", 11)
ENABLE_SECONDARY_WINDOW = _env_bool("ENABLE_SECONDARY_WINDOW", False)
SECONDARY_START_HOUR = _env_int("SECONDARY_START_HOUR", 19)  # Sydney session, wraps midnight
SECONDARY_END_HOUR = _env_int("SECONDARY_END_HOUR", 2)
TIME_FILTER_TIMEZONE = os.getenv("TIME_FILTER_TIMEZONE", "UTC")

# ── Trend Statistics ────────────────────────────────────
TREND_HISTORY_CAPACITY = 20       # Durations kept per direction

# ── Logging ─────────────────────────────────────────────
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
