"""User-facing notices (toasts) raised by the cart and checkout flows."""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

logger = logging.getLogger(__name__)

NoticeVariant = Literal["default", "destructive"]


@dataclass(frozen=True, slots=True)
class Notice:
    title: str
    description: str = ""
    variant: NoticeVariant = "default"


NoticeSink = Callable[[Notice], None]


def log_notice(notice: Notice) -> None:
    """Default sink: nobody is listening, so just log it."""
    level = logging.WARNING if notice.variant == "destructive" else logging.INFO
    logger.log(level, "notice: %s - %s", notice.title, notice.description)


class NoticeCollector:
    """Sink that keeps every notice it receives, handy for UI layers and tests."""

    def __init__(self) -> None:
        self.notices: list[Notice] = []

    def __call__(self, notice: Notice) -> None:
        self.notices.append(notice)

    @property
    def last(self) -> Notice | None:
        return self.notices[-1] if self.notices else None

    def clear(self) -> None:
        self.notices.clear()
