"""Custom exceptions for the TUHOTUHO storefront."""
from __future__ import annotations

from typing import Any


class TuhoShopException(Exception):
    """Base exception for all storefront errors."""

    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)
        self.message = message


class DatabaseException(TuhoShopException):
    """Database-related errors."""

    pass


class NotFoundException(TuhoShopException):
    """Requested record does not exist."""

    def __init__(self, resource: str, key: Any) -> None:
        super().__init__(f"{resource} not found")
        self.resource = resource
        self.key = key


class ValidationException(TuhoShopException):
    """Input validation errors."""

    pass


class ConfigurationException(TuhoShopException):
    """Configuration errors."""

    pass


class OrderSubmissionError(TuhoShopException):
    """The order endpoint answered with a non-success status."""

    def __init__(self, status: int, body: Any = None) -> None:
        super().__init__(f"Order endpoint returned HTTP {status}")
        self.status = status
        self.body = body
