"""Typed order line items and tolerant parsing of serialized cart snapshots."""
from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class OrderLine(BaseModel):
    """One cart line as it travels with an order."""

    model_config = ConfigDict(extra="ignore")

    id: int | str | None = None
    name: str = Field(min_length=1)
    price: float = Field(ge=0, allow_inf_nan=False)
    quantity: int = Field(ge=1)
    image: str | None = None
    variant: str | None = None

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


def serialize_lines(lines: list[OrderLine]) -> str:
    """Serialize typed lines into the text snapshot stored with the order."""
    return json.dumps(
        [line.model_dump(exclude_none=True) for line in lines],
        ensure_ascii=False,
    )


def parse_line_items(raw: Any) -> list[Any] | None:
    """Parse a serialized items snapshot.

    Returns the decoded list, or None when the value is not JSON or not an array.
    """
    if not isinstance(raw, (str, bytes, bytearray)):
        return None
    try:
        decoded = json.loads(raw)
    except (TypeError, ValueError):
        return None
    if not isinstance(decoded, list):
        return None
    return decoded


def coerce_line(entry: Any) -> OrderLine | None:
    """Validate a single entry; malformed entries yield None."""
    if isinstance(entry, OrderLine):
        return entry
    if not isinstance(entry, dict):
        return None
    try:
        return OrderLine.model_validate(entry)
    except ValidationError as e:
        logger.debug("Dropping malformed order line %r: %s", entry, e.error_count())
        return None


def coerce_lines(entries: list[Any]) -> list[OrderLine]:
    """Keep only the well-formed entries of a decoded snapshot."""
    lines = []
    for entry in entries:
        line = coerce_line(entry)
        if line is not None:
            lines.append(line)
    return lines
