"""
Main entry point — replays a CSV bar stream through the signal engine.

Usage:
  python main.py bars.csv
  python main.py bars.csv --style Scalping --output signals.csv --notify
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

import config
from data_loader import iter_bars, load_bars
from exceptions import ConfigurationError
from presets import config_from_env
from signal_engine import SignalEngine, results_to_frame
from telegram_bot import TelegramAlertNotifier

# ── Logging Setup ──────────────────────────────────────
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s │ %(levelname)-7s │ %(name)-18s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Replay OHLCV bars through the Syzygy signal engine",
    )
    parser.add_argument("bars", help="CSV with timestamp, open, high, low, close, volume")
    parser.add_argument(
        "--style", "-s",
        default=None,
        help="Trading style override (Scalping, Day Trading, Swing Trading, Custom)",
    )
    parser.add_argument("--output", "-o", default=None, help="Write per-bar outputs to this CSV")
    parser.add_argument("--notify", action="store_true", help="Send alerts to Telegram")
    return parser.parse_args(argv)


async def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)

    try:
        engine_config = config_from_env(args.style)
    except ConfigurationError as e:
        logger.error(f"❌ Configuration error: {e}")
        return 2

    engine = SignalEngine(engine_config)
    frame = load_bars(args.bars)
    results = engine.run(iter_bars(frame))
    payloads = [p for r in results for p in r.alerts]

    logger.info(f"📡 {len(payloads)} alert(s) over {engine.bar_index} closed bars")

    if args.output:
        results_to_frame(results).to_csv(args.output)
        logger.info(f"💾 Outputs written to {args.output}")

    if args.notify:
        notifier = TelegramAlertNotifier()
        if notifier.enabled:
            sent = await notifier.send_alerts(payloads)
            logger.info(f"📤 Sent {sent}/{len(payloads)} alerts")
        else:
            logger.warning("Telegram not configured (TELEGRAM_BOT_TOKEN / TELEGRAM_CHAT_ID)")

    last = engine.last_result
    if last is not None and last.accepted:
        t = last.trend
        logger.info(
            f"🏁 Last alert: {last.alert.last_alert_type.value} "
            f"({last.alert.bars_since_last_alert} bars ago) | "
            f"Trend: {t.direction.value} {t.duration} bars | "
            f"avg L/S/all {t.avg_long:.1f}/{t.avg_short:.1f}/{t.avg_overall:.1f}"
            f"{' ⚠️ above average' if t.exceeds_average else ''}"
        )
    return 0


def run():
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
