"""
Admin notification templates.

Messages are Telegram HTML; every customer-supplied value is escaped.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo

from tuhoshop.core.sanitize import escape_html
from tuhoshop.domain.order_lines import OrderLine, coerce_lines, parse_line_items

SHOP_TIMEZONE = ZoneInfo("Asia/Ho_Chi_Minh")
NO_PRODUCTS_LINE = "<i>Không có sản phẩm</i>"
ONLINE_MESSAGE = (
    "🔔 TUHOTUHO E-commerce Bot is now online and ready to receive order notifications."
)


def format_vnd(amount: Any) -> str:
    """160000 -> '160.000 VND'."""
    try:
        value = float(amount)
    except (TypeError, ValueError):
        value = 0.0
    return f"{value:,.0f}".replace(",", ".") + " VND"


def format_timestamp(moment: datetime | None = None) -> str:
    """Vietnamese style 'HH:MM:SS dd/mm/yyyy' in shop local time."""
    moment = moment or datetime.now(SHOP_TIMEZONE)
    if moment.tzinfo is None:
        # Database timestamps come back naive in UTC
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(SHOP_TIMEZONE)
    return moment.strftime("%H:%M:%S %d/%m/%Y")


@dataclass(slots=True)
class ResolvedItems:
    lines: list[OrderLine]
    readable: bool


def resolve_order_items(order: Any, items: Any = None) -> ResolvedItems:
    """Pick the line items to display for an order.

    The caller's in-memory list wins; otherwise the stored ``items`` snapshot is
    re-parsed. An unreadable snapshot resolves to no lines and ``readable=False``.
    """
    if isinstance(items, list):
        return ResolvedItems(lines=coerce_lines(items), readable=True)

    decoded = parse_line_items(getattr(order, "items", None))
    if decoded is None:
        return ResolvedItems(lines=[], readable=False)
    return ResolvedItems(lines=coerce_lines(decoded), readable=True)


def format_order_line(line: OrderLine) -> str:
    return f"• {line.quantity} × {escape_html(line.name)} — {format_vnd(line.line_total)}"


def build_order_message(order: Any, lines: list[OrderLine], now: datetime | None = None) -> str:
    items_block = "\n".join(format_order_line(line) for line in lines) or NO_PRODUCTS_LINE
    return (
        f"🛒 <b>Đơn Hàng Mới #{order.id}</b>\n\n"
        f"<b>Khách hàng:</b> {escape_html(order.name)}\n"
        f"<b>SĐT:</b> {escape_html(order.phone)}\n"
        f"<b>Địa chỉ:</b> {escape_html(order.address)}\n\n"
        f"<b>Chi tiết đơn hàng:</b>\n{items_block}\n\n"
        f"<b>Tổng tiền:</b> {format_vnd(order.total)}\n"
        f"<b>Trạng thái:</b> {escape_html(order.status)}\n"
        f"<b>Ngày đặt:</b> {format_timestamp(now)}\n"
    )


def build_contact_message(contact: Any) -> str:
    phone = getattr(contact, "phone", None)
    return (
        "📧 <b>Liên Hệ Mới</b>\n\n"
        f"<b>Họ tên:</b> {escape_html(contact.name)}\n"
        f"<b>Email:</b> {escape_html(contact.email)}\n"
        + (f"<b>SĐT:</b> {escape_html(phone)}\n" if phone else "")
        + f"<b>Chủ đề:</b> {escape_html(contact.subject)}\n"
        f"<b>Nội dung:</b>\n{escape_html(contact.message)}\n"
        f"<b>Thời gian:</b> {format_timestamp(getattr(contact, 'created_at', None))}\n"
    )


def build_newsletter_message(email: str, now: datetime | None = None) -> str:
    return (
        "📬 <b>Đăng Ký Nhận Tin Mới</b>\n\n"
        f"<b>Email:</b> {escape_html(email)}\n"
        f"<b>Thời gian:</b> {format_timestamp(now)}\n"
    )
