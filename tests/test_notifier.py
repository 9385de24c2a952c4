"""
Tests for the admin notifier strategies.
"""
import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramBadRequest

from tuhoshop.core.config import TelegramConfig
from tuhoshop.domain import OrderLine
from tuhoshop.services.notification_builder import NO_PRODUCTS_LINE, ONLINE_MESSAGE
from tuhoshop.services.notifier import (
    NullNotifier,
    TelegramNotifier,
    build_notifier,
    resolve_chat_id,
)

VALID_TOKEN = "123456:ABC-DEF1234ghIkl-zyx57W2v1u123ew11"


def _order(items='[{"name": "Granola", "price": 80000, "quantity": 2}]'):
    return SimpleNamespace(
        id=1,
        name="Nguyen A",
        phone="0909000000",
        address="Hanoi",
        items=items,
        total=160000,
        status="pending",
    )


@pytest.fixture
def bot():
    fake = MagicMock()
    fake.send_message = AsyncMock()
    fake.session.close = AsyncMock()
    return fake


class TestResolveChatId:
    @pytest.mark.parametrize(
        "raw, expected",
        [("12345", 12345), ("-1001234567890", -1001234567890), (" 42 ", 42), (99, 99), ("@shop_admins", "@shop_admins")],
    )
    def test_resolve(self, raw, expected):
        assert resolve_chat_id(raw) == expected


class TestTelegramNotifier:
    @pytest.mark.asyncio
    async def test_sends_html_to_numeric_chat(self, bot):
        notifier = TelegramNotifier(bot, "-100200")

        assert await notifier.notify_order(_order()) is True

        kwargs = bot.send_message.await_args.kwargs
        assert kwargs["chat_id"] == -100200
        assert kwargs["parse_mode"] == ParseMode.HTML
        assert "• 2 × Granola — 160.000 VND" in kwargs["text"]

    @pytest.mark.asyncio
    async def test_invalid_items_send_placeholder_and_report_failure(self, bot):
        notifier = TelegramNotifier(bot, "1")

        result = await notifier.notify_order(_order(items="[not json"))

        assert result is False
        bot.send_message.assert_awaited_once()
        assert NO_PRODUCTS_LINE in bot.send_message.await_args.kwargs["text"]

    @pytest.mark.asyncio
    async def test_typed_lines_skip_reparsing(self, bot):
        notifier = TelegramNotifier(bot, "1")
        lines = [OrderLine(name="Honey", price=120000, quantity=1)]

        assert await notifier.notify_order(_order(items="[not json"), lines) is True
        assert "Honey" in bot.send_message.await_args.kwargs["text"]

    @pytest.mark.asyncio
    async def test_api_error_is_absorbed(self, bot):
        bot.send_message.side_effect = TelegramBadRequest(method=MagicMock(), message="chat not found")
        notifier = TelegramNotifier(bot, "1")

        assert await notifier.notify_order(_order()) is False

    @pytest.mark.asyncio
    async def test_timeout_is_absorbed(self, bot):
        bot.send_message.side_effect = asyncio.TimeoutError()
        notifier = TelegramNotifier(bot, "1")

        assert await notifier.send_admin_message("hi") is False

    @pytest.mark.asyncio
    async def test_unexpected_error_never_escapes(self, bot):
        bot.send_message.side_effect = RuntimeError("boom")
        notifier = TelegramNotifier(bot, "1")

        assert await notifier.notify_order(_order()) is False
        assert await notifier.notify_contact(SimpleNamespace()) is False

    @pytest.mark.asyncio
    async def test_announce_online_and_close(self, bot):
        notifier = TelegramNotifier(bot, "1")

        assert await notifier.announce_online() is True
        assert bot.send_message.await_args.kwargs["text"] == ONLINE_MESSAGE

        await notifier.close()
        bot.session.close.assert_awaited_once()


class TestNullNotifier:
    @pytest.mark.asyncio
    async def test_every_send_is_a_noop(self):
        notifier = NullNotifier()

        assert notifier.enabled is False
        assert await notifier.notify_order(_order()) is False
        assert await notifier.notify_newsletter("a@b.c") is False


class TestBuildNotifier:
    def test_missing_token(self):
        notifier = build_notifier(TelegramConfig(bot_token=None, admin_chat_id="1"))

        assert isinstance(notifier, NullNotifier)
        assert notifier.reason == "token not provided"

    def test_missing_chat_id(self):
        notifier = build_notifier(TelegramConfig(bot_token=VALID_TOKEN, admin_chat_id=None))

        assert isinstance(notifier, NullNotifier)
        assert notifier.reason == "admin chat ID not provided"

    def test_malformed_token(self):
        notifier = build_notifier(TelegramConfig(bot_token="not a token", admin_chat_id="1"))

        assert isinstance(notifier, NullNotifier)

    @pytest.mark.asyncio
    async def test_configured(self):
        notifier = build_notifier(TelegramConfig(bot_token=VALID_TOKEN, admin_chat_id="-100555"))

        assert isinstance(notifier, TelegramNotifier)
        assert notifier.enabled is True
        assert notifier.chat_id == -100555
        await notifier.close()
