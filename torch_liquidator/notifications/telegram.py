"""Telegram delivery for liquidation alerts and score-pass summaries.

Alerts (landed liquidations) go through the alert bot with sound on.
Score-pass summaries go through the log bot, muted, split on line
boundaries when a long high-risk list exceeds Telegram's message limit.
"""
import html
import logging
import ssl

import aiohttp
import certifi

from ..config import TelegramConfig

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org"
# sendMessage rejects longer texts
MAX_MESSAGE_LENGTH = 4096
# leaves room for the header and for entity expansion
MAX_ALERT_BODY = 600
REQUEST_TIMEOUT_SECONDS = 10
ALERT_TAG = "torch-liquidator"


def split_message(text: str, limit: int = MAX_MESSAGE_LENGTH) -> list[str]:
    """Split ``text`` into chunks of at most ``limit`` chars, preferring newlines."""
    chunks: list[str] = []
    current = ""
    for line in text.split("\n"):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current or not chunks:
        chunks.append(current)
    return chunks


def format_alert(message: str, subject: str = "") -> str:
    """Bold tagged header plus the escaped body, as HTML."""
    header = f"[{ALERT_TAG}] {subject}" if subject else f"[{ALERT_TAG}]"
    return f"<b>{html.escape(header)}</b>\n\n{html.escape(message)}"


class TelegramNotifier:
    """Notifier backed by two Telegram bots sharing one chat."""

    def __init__(self, config: TelegramConfig) -> None:
        self.alert_bot_token = config.alert_bot_token
        self.log_bot_token = config.log_bot_token
        self.chat_id = config.chat_id

    def _configured(self, bot_token: str) -> bool:
        if not bot_token or not self.chat_id:
            logger.warning("Telegram credentials not configured")
            return False
        return True

    async def _post(
        self,
        session: aiohttp.ClientSession,
        bot_token: str,
        text: str,
        silent: bool,
        parse_mode: str | None = None,
    ) -> bool:
        payload = {
            "chat_id": self.chat_id,
            "text": text,
            "disable_notification": silent,
        }
        if parse_mode:
            payload["parse_mode"] = parse_mode

        async with session.post(
            f"{TELEGRAM_API_URL}/bot{bot_token}/sendMessage",
            json=payload,
            timeout=aiohttp.ClientTimeout(total=REQUEST_TIMEOUT_SECONDS),
        ) as response:
            if response.status == 200:
                return True
            logger.error("Telegram rejected message: HTTP %s", response.status)
            return False

    async def _deliver(
        self,
        bot_token: str,
        chunks: list[str],
        silent: bool,
        parse_mode: str | None = None,
    ) -> bool:
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        async with aiohttp.ClientSession(connector=connector) as session:
            for chunk in chunks:
                if not await self._post(session, bot_token, chunk, silent, parse_mode):
                    return False
        return True

    async def send_alert(self, message: str, subject: str = "") -> bool:
        """Send a landed-liquidation alert with sound on."""
        if not self._configured(self.alert_bot_token):
            return False
        # truncate before escaping so no entity is cut in half
        text = format_alert(message[:MAX_ALERT_BODY], subject)
        if await self._deliver(self.alert_bot_token, [text], silent=False, parse_mode="HTML"):
            logger.info("Telegram alert sent: %s", subject or "(no subject)")
            return True
        return False

    async def send_log(self, message: str, silent: bool = True) -> bool:
        """Send a score-pass summary, split into several messages if needed."""
        if not self._configured(self.log_bot_token):
            return False
        chunks = split_message(message)
        if await self._deliver(self.log_bot_token, chunks, silent=silent):
            logger.debug("Telegram log sent in %d message(s)", len(chunks))
            return True
        return False
