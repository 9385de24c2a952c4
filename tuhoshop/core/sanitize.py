"""Helpers for safe handling of customer-supplied text."""
from __future__ import annotations

import html
import re


def escape_html(text: object | None) -> str:
    """Escape HTML special characters for Telegram HTML parse mode.

    Example:
        >>> escape_html("<b>Nguyen</b>")
        '&lt;b&gt;Nguyen&lt;/b&gt;'
    """
    if text is None:
        return ""
    return html.escape(str(text), quote=False)


def sanitize_text_input(text: str | None, max_length: int = 1000) -> str:
    """Strip control characters and cap the length of free text."""
    if not text:
        return ""

    text = str(text).strip()
    text = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]", "", text)

    if len(text) > max_length:
        text = text[:max_length]

    return text
