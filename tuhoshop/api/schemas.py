from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

from tuhoshop.core.sanitize import sanitize_text_input
from tuhoshop.domain.order_lines import OrderLine, serialize_lines

MAX_CONTACT_MESSAGE_LENGTH = 5000

RequiredName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
RequiredPhone = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def _optional_email(value: Any) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    if not value:
        return None
    if "@" not in value:
        raise ValueError("Invalid email address")
    return value


class OrderCreate(BaseModel):
    """Incoming order.

    ``items`` is normally the cart snapshot as a string and is stored verbatim.
    A JSON array is also accepted; it is validated into typed lines first.
    """

    name: RequiredName
    email: str | None = None
    phone: RequiredPhone
    address: RequiredText
    items: str | list[OrderLine]
    total: float = Field(ge=0, allow_inf_nan=False)

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, value: Any) -> str | None:
        return _optional_email(value)

    @field_validator("total", mode="before")
    @classmethod
    def _numeric_total(cls, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("total must be a number")
        return value

    def serialized_items(self) -> str:
        if isinstance(self.items, list):
            return serialize_lines(self.items)
        return self.items

    def line_items(self) -> list[OrderLine] | None:
        """Typed lines when the client sent an array, else None."""
        return self.items if isinstance(self.items, list) else None

    def to_row(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "items": self.serialized_items(),
            "total": self.total,
        }


class OrderRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str | None = None
    phone: str
    address: str
    items: str
    total: float
    status: str
    created_at: datetime = Field(serialization_alias="createdAt")


class ContactCreate(BaseModel):
    name: RequiredName
    email: RequiredName
    phone: str | None = None
    message: RequiredText

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if "@" not in value:
            raise ValueError("Invalid email address")
        return value

    @field_validator("message")
    @classmethod
    def _clean_message(cls, value: str) -> str:
        return sanitize_text_input(value, max_length=MAX_CONTACT_MESSAGE_LENGTH)


class NewsletterCreate(BaseModel):
    email: RequiredName

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if "@" not in value:
            raise ValueError("Invalid email address")
        return value


class SuccessResponse(BaseModel):
    success: bool = True
    message: str


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    message: str
    errors: list[FieldError] = Field(default_factory=list)


class CatalogModel(BaseModel):
    """Catalog rows read from the ORM and rendered with camelCase keys."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=AliasGenerator(serialization_alias=to_camel),
    )


class CategoryRecord(CatalogModel):
    id: int
    name: str
    slug: str
    image: str


class ProductRecord(CatalogModel):
    id: int
    name: str
    slug: str
    description: str
    price: float
    old_price: float | None = None
    image: str
    category_id: int
    rating: float | None = None
    is_new: bool | None = None
    is_organic: bool | None = None
    is_bestseller: bool | None = None
    details: list[Any] | None = None
    discount: int | None = None
    created_at: datetime | None = None


class ProductImageRecord(CatalogModel):
    id: int
    product_id: int
    image_path: str
    is_main: bool | None = None
    display_order: int | None = None


class TestimonialRecord(CatalogModel):
    id: int
    name: str
    avatar: str
    rating: int
    comment: str


class Pagination(CatalogModel):
    total: int
    page: int
    limit: int
    total_pages: int


class ProductPage(CatalogModel):
    products: list[ProductRecord]
    pagination: Pagination
