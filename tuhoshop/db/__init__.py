from .async_repository import AsyncCatalogRepository, AsyncContactRepository, AsyncOrderRepository
from .database import Database, create_database
from .models import Base, Category, ContactSubmission, Order, Product, ProductImage, Testimonial
from .repository import CatalogRepository, ContactRepository, OrderRepository

__all__ = [
    "AsyncCatalogRepository",
    "AsyncContactRepository",
    "AsyncOrderRepository",
    "Base",
    "CatalogRepository",
    "Category",
    "ContactRepository",
    "ContactSubmission",
    "Database",
    "Order",
    "OrderRepository",
    "Product",
    "ProductImage",
    "Testimonial",
    "create_database",
]
