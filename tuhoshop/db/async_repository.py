"""Awaitable facades over the sync repositories.

SQLAlchemy sessions here are synchronous; each call is pushed to an anyio
worker thread so a slow query never blocks the event loop.
"""
from __future__ import annotations

from functools import partial
from typing import Any, Callable, TypeVar

import anyio

from .models import Category, ContactSubmission, Order, Product, ProductImage, Testimonial
from .repository import CatalogRepository, ContactRepository, OrderRepository

T = TypeVar("T")


async def run_sync(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    return await anyio.to_thread.run_sync(partial(func, *args, **kwargs))


class AsyncOrderRepository:
    def __init__(self, repository: OrderRepository) -> None:
        self._repository = repository

    async def create_order(self, **fields: Any) -> Order:
        return await run_sync(self._repository.create_order, **fields)


class AsyncContactRepository:
    def __init__(self, repository: ContactRepository) -> None:
        self._repository = repository

    async def create_contact(self, **fields: Any) -> ContactSubmission:
        return await run_sync(self._repository.create_contact, **fields)


class AsyncCatalogRepository:
    def __init__(self, repository: CatalogRepository) -> None:
        self._repository = repository

    async def list_categories(self) -> list[Category]:
        return await run_sync(self._repository.list_categories)

    async def get_category(self, slug: str) -> Category:
        return await run_sync(self._repository.get_category, slug)

    async def list_products(self, *, page: int, limit: int) -> tuple[list[Product], int]:
        return await run_sync(self._repository.list_products, page=page, limit=limit)

    async def list_products_by_category(self, category_id: int) -> list[Product]:
        return await run_sync(self._repository.list_products_by_category, category_id)

    async def get_product(self, slug: str) -> Product:
        return await run_sync(self._repository.get_product, slug)

    async def list_featured_products(self, limit: int) -> list[Product]:
        return await run_sync(self._repository.list_featured_products, limit)

    async def list_product_images(self, product_id: int) -> list[ProductImage]:
        return await run_sync(self._repository.list_product_images, product_id)

    async def list_testimonials(self) -> list[Testimonial]:
        return await run_sync(self._repository.list_testimonials)
