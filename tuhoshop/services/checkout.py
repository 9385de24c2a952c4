"""Checkout: turn the current cart into an order on the backend."""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import aiohttp
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from tuhoshop.cart.storage import RedisSlotStorage
from tuhoshop.cart.store import CartStore
from tuhoshop.core.config import Settings
from tuhoshop.core.exceptions import OrderSubmissionError
from tuhoshop.core.notices import Notice, NoticeSink, log_notice

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 2
MIN_PHONE_LENGTH = 5
MIN_ADDRESS_LENGTH = 5

EMPTY_CART_NOTICE = Notice(
    title="Your cart is empty",
    description="Please add some items to your cart before checking out.",
    variant="destructive",
)
ORDER_PLACED_NOTICE = Notice(
    title="Order placed successfully!",
    description="We'll send you a confirmation email shortly.",
)
ORDER_FAILED_NOTICE = Notice(
    title="Failed to place order",
    description="Please try again later or contact support.",
    variant="destructive",
)


class CheckoutForm(BaseModel):
    """Customer details collected by the checkout form."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=MIN_NAME_LENGTH)
    phone: str = Field(min_length=MIN_PHONE_LENGTH)
    address: str = Field(min_length=MIN_ADDRESS_LENGTH)
    email: str | None = None

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str | None) -> str | None:
        if not value:
            return None
        if "@" not in value:
            raise ValueError("Invalid email address")
        return value


@dataclass
class CheckoutResult:
    success: bool
    order: dict[str, Any] | None = None
    errors: dict[str, str] = field(default_factory=dict)
    notice: Notice | None = None


class OrderApiClient:
    """Thin aiohttp client for the order endpoint."""

    ORDERS_PATH = "/api/orders"

    def __init__(self, base_url: str, timeout: float = 15.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def create_order(self, payload: dict[str, Any]) -> dict[str, Any]:
        """POST the order once; non-2xx or non-object answers raise OrderSubmissionError.

        A body that is not JSON at all surfaces as ValueError from ``resp.json()``.
        """
        async with aiohttp.ClientSession(timeout=self._timeout) as session:
            async with session.post(self._base_url + self.ORDERS_PATH, json=payload) as resp:
                if resp.status >= 400:
                    body = await resp.text()
                    raise OrderSubmissionError(resp.status, body)
                body = await resp.json()
                if not isinstance(body, dict):
                    raise OrderSubmissionError(resp.status, body)
                return body


class CheckoutService:
    """Bridges the cart and the order endpoint for one checkout surface."""

    def __init__(
        self,
        cart: CartStore,
        client: OrderApiClient,
        notify: NoticeSink | None = None,
    ) -> None:
        self._cart = cart
        self._client = client
        self._notify = notify or log_notice
        self.is_open = False
        self.is_submitting = False
        self.form_values: dict[str, Any] = {}

    def open(self) -> bool:
        """Show the checkout surface; refused while the cart is empty."""
        if self._cart.is_empty:
            self._notify(EMPTY_CART_NOTICE)
            return False
        self.is_open = True
        return True

    def close(self) -> None:
        self.is_open = False

    @property
    def cart(self) -> CartStore:
        return self._cart

    def reset_form(self) -> None:
        self.form_values = {}

    def build_payload(self, form: CheckoutForm) -> dict[str, Any]:
        payload = form.model_dump(exclude_none=True)
        payload["items"] = self._cart.to_json()
        payload["total"] = self._cart.calculate_total()
        return payload

    async def submit(self, data: Mapping[str, Any]) -> CheckoutResult:
        self.form_values = dict(data)
        try:
            form = CheckoutForm.model_validate(self.form_values)
        except ValidationError as e:
            errors = {
                ".".join(str(part) for part in err["loc"]): err["msg"] for err in e.errors()
            }
            return CheckoutResult(success=False, errors=errors)

        if self._cart.is_empty:
            self._notify(EMPTY_CART_NOTICE)
            return CheckoutResult(success=False, notice=EMPTY_CART_NOTICE)

        self.is_submitting = True
        try:
            order = await self._client.create_order(self.build_payload(form))
        except (aiohttp.ClientError, asyncio.TimeoutError, OrderSubmissionError, ValueError) as e:
            logger.error(f"Error placing order: {e}")
            self._notify(ORDER_FAILED_NOTICE)
            return CheckoutResult(success=False, notice=ORDER_FAILED_NOTICE)
        finally:
            self.is_submitting = False

        self._cart.clear_cart()
        self.reset_form()
        self.close()
        self._notify(ORDER_PLACED_NOTICE)
        logger.info("Order #%s placed", order.get("id"))
        return CheckoutResult(success=True, order=order, notice=ORDER_PLACED_NOTICE)


def create_checkout(
    settings: Settings,
    session_id: str,
    notify: NoticeSink | None = None,
) -> CheckoutService:
    """Wire a cart and checkout for one shopper session from settings."""
    storage = RedisSlotStorage(session_id, redis_url=settings.redis_url)
    cart = CartStore(storage, slot=settings.cart_slot, notify=notify)
    client = OrderApiClient(settings.checkout.api_base_url, timeout=settings.checkout.timeout)
    return CheckoutService(cart, client, notify=notify)
