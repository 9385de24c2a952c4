"""Cart line item."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class CartItem:
    """Single product (or product variant) line in the cart."""

    id: int | str
    name: str
    price: float
    image: str
    quantity: int = 1
    variant: str | None = None

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "image": self.image,
            "quantity": int(self.quantity),
        }
        if self.variant:
            data["variant"] = self.variant
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CartItem:
        """Build an item from stored data; raises on missing or non-numeric fields."""
        item_id = data["id"]
        if not isinstance(item_id, (int, str)) or isinstance(item_id, bool):
            raise ValueError(f"Invalid cart item id: {item_id!r}")
        quantity = int(data["quantity"])
        if quantity < 1:
            raise ValueError(f"Invalid cart item quantity: {quantity}")
        return cls(
            id=item_id,
            name=str(data["name"]),
            price=float(data["price"]),
            image=str(data.get("image", "")),
            quantity=quantity,
            variant=data.get("variant"),
        )
