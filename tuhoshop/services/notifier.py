"""
Admin notification dispatcher.

Orders, contact messages and newsletter sign-ups are pushed to a Telegram
admin chat. Delivery is best effort: every public method logs failures and
returns False instead of raising, so callers never have to guard them.
"""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

from aiogram import Bot
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramAPIError
from aiogram.utils.token import TokenValidationError

from tuhoshop.core.config import TelegramConfig

from .notification_builder import (
    ONLINE_MESSAGE,
    build_contact_message,
    build_newsletter_message,
    build_order_message,
    resolve_order_items,
)

logger = logging.getLogger(__name__)


def resolve_chat_id(chat_id: str | int) -> str | int:
    """Numeric ids (including negative group/channel ids) are sent as int."""
    if isinstance(chat_id, int):
        return chat_id
    try:
        return int(str(chat_id).strip())
    except ValueError:
        return chat_id


class AdminNotifier(ABC):
    """Formats storefront events and hands them to a delivery channel."""

    enabled: bool = True

    @abstractmethod
    async def send_admin_message(self, text: str) -> bool:
        """Deliver an HTML message; True when the channel accepted it."""

    async def notify_order(self, order: Any, items: Any = None) -> bool:
        """Send the new-order summary.

        Returns True only if a complete message was delivered. When the stored
        items cannot be read the message still goes out with a placeholder line,
        but the dispatch is reported as failed.
        """
        order_id = getattr(order, "id", None)
        try:
            resolved = resolve_order_items(order, items)
            if not resolved.readable:
                logger.warning("Order #%s: items snapshot is unreadable, sending placeholder", order_id)
            message = build_order_message(order, resolved.lines)
            delivered = await self.send_admin_message(message)
        except Exception:
            logger.exception("Error sending order notification for order #%s", order_id)
            return False
        return delivered and resolved.readable

    async def notify_contact(self, contact: Any) -> bool:
        try:
            return await self.send_admin_message(build_contact_message(contact))
        except Exception:
            logger.exception("Error sending contact notification")
            return False

    async def notify_newsletter(self, email: str) -> bool:
        try:
            return await self.send_admin_message(build_newsletter_message(email))
        except Exception:
            logger.exception("Error sending newsletter notification")
            return False

    async def announce_online(self) -> bool:
        return await self.send_admin_message(ONLINE_MESSAGE)

    async def close(self) -> None:
        return None


class NullNotifier(AdminNotifier):
    """Stand-in used when the bot is not configured; every send is a no-op."""

    enabled = False

    def __init__(self, reason: str = "not configured") -> None:
        self.reason = reason

    async def send_admin_message(self, text: str) -> bool:
        logger.info("Telegram bot %s; admin message dropped", self.reason)
        return False


class TelegramNotifier(AdminNotifier):
    """Delivers messages through the Telegram Bot API."""

    def __init__(self, bot: Bot, chat_id: str | int) -> None:
        self._bot = bot
        self._chat_id = resolve_chat_id(chat_id)

    @property
    def chat_id(self) -> str | int:
        return self._chat_id

    async def send_admin_message(self, text: str) -> bool:
        logger.debug("Sending message to chat ID: %s", self._chat_id)
        try:
            await self._bot.send_message(
                chat_id=self._chat_id,
                text=text,
                parse_mode=ParseMode.HTML,
            )
        except (TelegramAPIError, asyncio.TimeoutError) as e:
            logger.error(f"Error sending Telegram notification: {e}")
            return False
        logger.info("Telegram notification sent successfully")
        return True

    async def close(self) -> None:
        await self._bot.session.close()


def build_notifier(config: TelegramConfig) -> AdminNotifier:
    """Create the notifier once at startup from configuration.

    Missing or invalid credentials give a NullNotifier for the life of the process.
    """
    if not config.bot_token:
        logger.warning("Telegram bot not initialized: missing TELEGRAM_BOT_TOKEN")
        return NullNotifier("token not provided")
    if not config.admin_chat_id:
        logger.warning("Telegram bot not initialized: missing TELEGRAM_ADMIN_CHAT_ID")
        return NullNotifier("admin chat ID not provided")

    try:
        bot = Bot(token=config.bot_token)
    except TokenValidationError as e:
        logger.error(f"Error initializing Telegram bot: {e}")
        return NullNotifier("token rejected")

    logger.info("Telegram bot initialized successfully")
    return TelegramNotifier(bot, config.admin_chat_id)
