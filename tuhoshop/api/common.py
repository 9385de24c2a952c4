"""Request-scoped access to the services wired in ``create_api_app``."""
from __future__ import annotations

from fastapi import HTTPException, Request

from tuhoshop.db import AsyncCatalogRepository, AsyncContactRepository, AsyncOrderRepository
from tuhoshop.services.notifier import AdminNotifier


def _state_attr(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(status_code=500, detail=f"{name} not initialized")
    return value


def get_orders(request: Request) -> AsyncOrderRepository:
    return _state_attr(request, "orders")


def get_contacts(request: Request) -> AsyncContactRepository:
    return _state_attr(request, "contacts")


def get_catalog(request: Request) -> AsyncCatalogRepository:
    return _state_attr(request, "catalog")


def get_notifier(request: Request) -> AdminNotifier:
    return _state_attr(request, "notifier")


__all__ = ["get_catalog", "get_contacts", "get_notifier", "get_orders"]
