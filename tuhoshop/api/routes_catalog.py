"""Read-only catalog endpoints the storefront fills its pages and cart from."""
from __future__ import annotations

import math

from fastapi import APIRouter, Depends, Path, Query

from tuhoshop.db import AsyncCatalogRepository

from .common import get_catalog
from .schemas import (
    CategoryRecord,
    ErrorResponse,
    Pagination,
    ProductImageRecord,
    ProductPage,
    ProductRecord,
    TestimonialRecord,
)

router = APIRouter()

NOT_FOUND = {404: {"model": ErrorResponse}}
BAD_REQUEST = {400: {"model": ErrorResponse}}


def _products(rows) -> list[ProductRecord]:
    return [ProductRecord.model_validate(row) for row in rows]


@router.get("/categories", response_model=list[CategoryRecord])
async def list_categories(catalog: AsyncCatalogRepository = Depends(get_catalog)):
    rows = await catalog.list_categories()
    return [CategoryRecord.model_validate(row) for row in rows]


@router.get("/categories/{slug}", response_model=CategoryRecord, responses=NOT_FOUND)
async def get_category(slug: str, catalog: AsyncCatalogRepository = Depends(get_catalog)):
    return CategoryRecord.model_validate(await catalog.get_category(slug))


@router.get("/products", response_model=ProductPage, responses=BAD_REQUEST)
async def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    catalog: AsyncCatalogRepository = Depends(get_catalog),
):
    rows, total = await catalog.list_products(page=page, limit=limit)
    return ProductPage(
        products=_products(rows),
        pagination=Pagination(
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit),
        ),
    )


# Registered before /products/{slug} so "category" is not read as a slug
@router.get("/products/category/{category_id}", response_model=list[ProductRecord], responses=BAD_REQUEST)
async def list_products_by_category(
    category_id: int = Path(...),
    catalog: AsyncCatalogRepository = Depends(get_catalog),
):
    return _products(await catalog.list_products_by_category(category_id))


@router.get("/products/{product_id}/images", response_model=list[ProductImageRecord], responses=BAD_REQUEST)
async def list_product_images(
    product_id: int = Path(...),
    catalog: AsyncCatalogRepository = Depends(get_catalog),
):
    rows = await catalog.list_product_images(product_id)
    return [ProductImageRecord.model_validate(row) for row in rows]


@router.get("/products/{slug}", response_model=ProductRecord, responses=NOT_FOUND)
async def get_product(slug: str, catalog: AsyncCatalogRepository = Depends(get_catalog)):
    return ProductRecord.model_validate(await catalog.get_product(slug))


@router.get("/featured-products", response_model=ProductPage, responses=BAD_REQUEST)
async def list_featured_products(
    limit: int = Query(8, ge=1, le=50),
    catalog: AsyncCatalogRepository = Depends(get_catalog),
):
    products = _products(await catalog.list_featured_products(limit))
    return ProductPage(
        products=products,
        pagination=Pagination(total=len(products), page=1, limit=limit, total_pages=1),
    )


@router.get("/testimonials", response_model=list[TestimonialRecord])
async def list_testimonials(catalog: AsyncCatalogRepository = Depends(get_catalog)):
    rows = await catalog.list_testimonials()
    return [TestimonialRecord.model_validate(row) for row in rows]
