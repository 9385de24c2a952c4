"""Domain types shared by the cart, the API and the notifier."""
from .order_lines import OrderLine, coerce_line, coerce_lines, parse_line_items, serialize_lines

__all__ = [
    "OrderLine",
    "coerce_line",
    "coerce_lines",
    "parse_line_items",
    "serialize_lines",
]
