"""Persistence operations for orders, contact submissions and the catalog."""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from tuhoshop.core.exceptions import DatabaseException, NotFoundException

from .models import Category, ContactSubmission, Order, Product, ProductImage, Testimonial

logger = logging.getLogger(__name__)


class BaseRepository:
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def _add(self, instance: Any) -> Any:
        with self._session_factory() as session:
            try:
                session.add(instance)
                session.commit()
                session.refresh(instance)
            except SQLAlchemyError as e:
                session.rollback()
                raise DatabaseException(
                    f"Failed to save {type(instance).__name__}: {e}"
                ) from e
        return instance


class OrderRepository(BaseRepository):
    """Orders are written once and never updated here."""

    def create_order(
        self,
        *,
        name: str,
        phone: str,
        address: str,
        items: str,
        total: float,
        email: str | None = None,
    ) -> Order:
        order = Order(
            name=name,
            email=email,
            phone=phone,
            address=address,
            items=items,
            total=total,
        )
        order = self._add(order)
        logger.info("Order #%s created (total=%s)", order.id, order.total)
        return order

    def count_orders(self) -> int:
        try:
            with self._session_factory() as session:
                return int(session.scalar(select(func.count()).select_from(Order)) or 0)
        except SQLAlchemyError as e:
            raise DatabaseException(f"Failed to count orders: {e}") from e


class ContactRepository(BaseRepository):
    DEFAULT_SUBJECT = "Contact Form Submission"

    def create_contact(
        self,
        *,
        name: str,
        email: str,
        message: str,
        phone: str | None = None,
        subject: str | None = None,
    ) -> ContactSubmission:
        contact = ContactSubmission(
            name=name,
            email=email,
            phone=phone,
            subject=subject or self.DEFAULT_SUBJECT,
            message=message,
        )
        return self._add(contact)


class CatalogRepository(BaseRepository):
    """Read-only access to categories, products and testimonials."""

    def _scalars(self, statement) -> list[Any]:
        try:
            with self._session_factory() as session:
                return list(session.scalars(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseException(f"Catalog query failed: {e}") from e

    def _one_by_slug(self, model: Any, slug: str, resource: str) -> Any:
        rows = self._scalars(select(model).where(model.slug == slug).limit(1))
        if not rows:
            raise NotFoundException(resource, slug)
        return rows[0]

    def list_categories(self) -> list[Category]:
        return self._scalars(select(Category).order_by(Category.id))

    def get_category(self, slug: str) -> Category:
        return self._one_by_slug(Category, slug, "Category")

    def list_products(self, *, page: int = 1, limit: int = 10) -> tuple[list[Product], int]:
        """One page of products plus the total product count."""
        try:
            with self._session_factory() as session:
                total = int(session.scalar(select(func.count()).select_from(Product)) or 0)
                rows = session.scalars(
                    select(Product).order_by(Product.id).offset((page - 1) * limit).limit(limit)
                ).all()
        except SQLAlchemyError as e:
            raise DatabaseException(f"Catalog query failed: {e}") from e
        return list(rows), total

    def list_products_by_category(self, category_id: int) -> list[Product]:
        return self._scalars(
            select(Product).where(Product.category_id == category_id).order_by(Product.id)
        )

    def get_product(self, slug: str) -> Product:
        return self._one_by_slug(Product, slug, "Product")

    def list_featured_products(self, limit: int = 8) -> list[Product]:
        # Random pick on every call, like a shop-window rotation
        return self._scalars(select(Product).order_by(func.random()).limit(limit))

    def list_product_images(self, product_id: int) -> list[ProductImage]:
        return self._scalars(
            select(ProductImage)
            .where(ProductImage.product_id == product_id)
            .order_by(ProductImage.display_order, ProductImage.id)
        )

    def list_testimonials(self) -> list[Testimonial]:
        return self._scalars(select(Testimonial).order_by(Testimonial.id))
