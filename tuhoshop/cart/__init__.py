"""Shopping cart: line items, durable slot storage and the cart store."""
from .models import CartItem
from .storage import MemorySlotStorage, RedisSlotStorage, SlotStorage
from .store import CartStore

__all__ = ["CartItem", "CartStore", "MemorySlotStorage", "RedisSlotStorage", "SlotStorage"]
