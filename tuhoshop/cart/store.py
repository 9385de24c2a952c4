"""Client-side cart state persisted to a durable storage slot."""
from __future__ import annotations

import json
import logging
from dataclasses import replace

from tuhoshop.core.exceptions import ValidationException
from tuhoshop.core.notices import Notice, NoticeSink, log_notice

from .models import CartItem
from .storage import SlotStorage

logger = logging.getLogger(__name__)

DEFAULT_SLOT = "cart"

ITEM_REMOVED_NOTICE = Notice(title="Item removed", description="Item removed from your cart")


class CartStore:
    """Authoritative view of the in-progress cart and its visibility flag.

    The slot is read once on construction and rewritten after every mutation.
    """

    def __init__(
        self,
        storage: SlotStorage,
        slot: str = DEFAULT_SLOT,
        notify: NoticeSink | None = None,
    ) -> None:
        self._storage = storage
        self._slot = slot
        self._notify = notify or log_notice
        self._items: list[CartItem] = self._load()
        self.is_open = False

    def _load(self) -> list[CartItem]:
        try:
            raw = self._storage.get(self._slot)
        except Exception as exc:
            logger.error("Failed to read saved cart: %s", exc)
            return []
        if not raw:
            return []
        try:
            decoded = json.loads(raw)
            if not isinstance(decoded, list):
                raise ValueError(f"expected a list, got {type(decoded).__name__}")
            return [CartItem.from_dict(entry) for entry in decoded]
        except Exception as exc:
            logger.error("Failed to parse saved cart, starting empty: %r", exc)
            return []

    def _persist(self) -> None:
        self._storage.set(self._slot, self.to_json())

    def _index_of(self, item_id: int | str) -> int:
        for idx, item in enumerate(self._items):
            if item.id == item_id:
                return idx
        return -1

    @property
    def items(self) -> list[CartItem]:
        return [replace(item) for item in self._items]

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self._items)

    def toggle_visibility(self) -> bool:
        self.is_open = not self.is_open
        return self.is_open

    def add_item(self, item: CartItem) -> None:
        """Add a line; an existing id gets its quantity incremented instead."""
        if item.quantity < 1:
            raise ValidationException(f"Quantity must be at least 1, got {item.quantity}")

        idx = self._index_of(item.id)
        if idx != -1:
            self._items[idx].quantity += item.quantity
        else:
            self._items.append(replace(item))
        self._persist()

    def update_quantity(self, item_id: int | str, quantity: int) -> None:
        """Set the exact quantity; non-positive values remove the line."""
        if quantity <= 0:
            self.remove_item(item_id)
            return

        idx = self._index_of(item_id)
        if idx == -1:
            return
        self._items[idx].quantity = quantity
        self._persist()

    def remove_item(self, item_id: int | str) -> None:
        self._items = [item for item in self._items if item.id != item_id]
        self._persist()
        self._notify(ITEM_REMOVED_NOTICE)

    def clear_cart(self) -> None:
        self._items = []
        self._persist()

    def calculate_total(self) -> float:
        return sum(item.price * item.quantity for item in self._items)

    def to_json(self) -> str:
        """Serialized snapshot of the cart, as stored and as sent with an order."""
        return json.dumps([item.to_dict() for item in self._items], ensure_ascii=False)
