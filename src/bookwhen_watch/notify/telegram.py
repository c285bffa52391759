"""
Telegram Bot API client.

Sends notifications via Telegram Bot API.
https://core.telegram.org/bots/api
"""

import logging
from typing import List, Optional

import requests

from bookwhen_watch.config import Settings, get_settings
from bookwhen_watch.notify.base import ChangeNotifier
from bookwhen_watch.notify.formatters import ChangeFormatter

logger = logging.getLogger(__name__)

# Telegram Bot API endpoint
TELEGRAM_API_URL = "https://api.telegram.org/bot{token}/sendMessage"


class TelegramNotifier(ChangeNotifier):
    """
    Telegram Bot API client for sending notifications.

    Uses Telegram's Bot API to send text messages to a configured
    chat (user, group, or channel). Messages are sent as plain text
    since class titles often contain Markdown characters.
    """

    # Telegram allows 4096 characters per message, leave some buffer
    MAX_LENGTH = 4000

    def __init__(
        self,
        token: Optional[str] = None,
        chat_id: Optional[str] = None,
        session: Optional[requests.Session] = None,
        settings: Optional[Settings] = None,
        formatter: Optional[ChangeFormatter] = None,
    ):
        """
        Initialize Telegram notifier.

        Args:
            token: Telegram Bot API token (from @BotFather)
            chat_id: Telegram chat ID (user, group, or channel)
            session: Optional requests session (e.g. a test double)
            settings: Optional settings instance, will use default if not provided
            formatter: Optional message formatter
        """
        super().__init__(formatter)

        if token is None or chat_id is None:
            settings = settings or get_settings()
            token = token or settings.telegram_bot_token
            chat_id = chat_id or settings.telegram_chat_id

        self.token = token
        self.chat_id = chat_id

        self.api_url = TELEGRAM_API_URL.format(token=self.token)
        self.session = session or requests.Session()

    def _post(self, text: str) -> bool:
        """Send a single message of at most MAX_LENGTH characters."""
        payload = {
            "chat_id": self.chat_id,
            "text": text,
            "disable_web_page_preview": True,
        }

        try:
            response = self.session.post(self.api_url, json=payload, timeout=30)

            if response.status_code == 200:
                data = response.json()
                if data.get("ok"):
                    message_id = data.get("result", {}).get("message_id", "unknown")
                    logger.info(f"Telegram message sent successfully: {message_id}")
                    return True
                else:
                    logger.error(f"Telegram API error: {data.get('description')}")
                    return False
            else:
                logger.error(
                    f"Telegram API error: {response.status_code} - {response.text}"
                )
                return False

        except requests.exceptions.Timeout:
            logger.error("Telegram API request timed out")
            return False
        except requests.exceptions.RequestException as e:
            logger.error(f"Telegram API request failed: {e}")
            return False

    def split_message(self, message: str) -> List[str]:
        """
        Split a long message into parts that fit Telegram's limit.

        Splits between lines so every event line arrives whole.
        """
        if len(message) <= self.MAX_LENGTH:
            return [message]

        parts = []
        current_part = ""

        for line in message.split("\n"):
            if len(current_part) + len(line) + 1 > self.MAX_LENGTH:
                if current_part:
                    parts.append(current_part.strip())
                current_part = line[:self.MAX_LENGTH]
            else:
                current_part += "\n" + line if current_part else line

        if current_part:
            parts.append(current_part.strip())

        return parts

    def send_message(self, message: str) -> bool:
        """
        Send a text message, splitting it if necessary.

        Args:
            message: The message text to send

        Returns:
            bool: True if all parts were sent successfully. Sending stops
            at the first part that fails.
        """
        parts = self.split_message(message)
        for i, part in enumerate(parts):
            if i > 0:
                part = f"(...continued)\n\n{part}"
            if not self._post(part):
                if i > 0:
                    logger.error(f"Stopped after {i} of {len(parts)} Telegram message parts")
                return False

        return True
