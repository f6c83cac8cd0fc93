"""
Telegram notifier — formats alert payloads and sends them to the configured chat.
"""

import logging
from typing import Iterable, Optional

from telegram import Bot
from telegram.constants import ParseMode

import config
from alert_state import AlertPayload, alert_style

logger = logging.getLogger(__name__)


class TelegramAlertNotifier:
    """Delivers engine alerts via Telegram."""

    def __init__(self, bot: Optional[Bot] = None, chat_id: Optional[str] = None):
        self._bot = bot
        self.chat_id = chat_id or config.TELEGRAM_CHAT_ID

    @property
    def enabled(self) -> bool:
        has_bot = self._bot is not None or bool(config.TELEGRAM_BOT_TOKEN)
        return has_bot and bool(self.chat_id)

    @property
    def bot(self) -> Bot:
        if self._bot is None:
            self._bot = Bot(token=config.TELEGRAM_BOT_TOKEN)
        return self._bot

    @staticmethod
    def format_alert(payload: AlertPayload) -> str:
        """Format an AlertPayload into a Telegram message with markdown."""
        style = alert_style(payload.signal_id)
        price = payload.close
        if price > 100:
            fmt = ",.2f"
        elif price > 1:
            fmt = ",.4f"
        else:
            fmt = ",.6f"

        return (
            f"{'━' * 30}\n"
            f"*{style.label}*\n"
            f"{'━' * 30}\n"
            f"\n"
            f"🏷 `{payload.signal_id.value}`\n"
            f"💰 *Close:* `{price:{fmt}}`\n"
            f"📍 *Bar:* #{payload.bar_index}\n"
            f"🕐 {payload.timestamp.strftime('%Y-%m-%d %H:%M %Z').strip()}\n"
            f"{'━' * 30}"
        )

    async def send_alert(self, payload: AlertPayload) -> bool:
        """Send one alert. Failures are logged, never raised."""
        if not self.enabled:
            logger.warning(f"Telegram not configured, skipping {payload.signal_id.value}")
            return False

        try:
            await self.bot.send_message(
                chat_id=self.chat_id,
                text=self.format_alert(payload),
                parse_mode=ParseMode.MARKDOWN,
            )
            logger.info(f"✅ Sent {payload.signal_id.value} alert (bar #{payload.bar_index})")
            return True
        except Exception as e:
            logger.error(f"Failed to send {payload.signal_id.value} alert: {e}")
            return False

    async def send_alerts(self, payloads: Iterable[AlertPayload]) -> int:
        """Send multiple alerts. Returns count of sent messages."""
        sent = 0
        for payload in payloads:
            if await self.send_alert(payload):
                sent += 1
        return sent
