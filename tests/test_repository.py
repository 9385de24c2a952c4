import pytest

from tuhoshop.core.exceptions import DatabaseException, NotFoundException
from tuhoshop.db import (
    AsyncCatalogRepository,
    AsyncOrderRepository,
    ContactRepository,
    Database,
)


def test_create_order_defaults(order_repo):
    order = order_repo.create_order(
        name="Nguyen A", phone="0909000000", address="Hanoi", items="[]", total=0
    )

    assert order.status == "pending"
    assert order.created_at is not None
    assert order_repo.count_orders() == 1


def test_contact_defaults_subject(database):
    contact = ContactRepository(database.session_factory).create_contact(
        name="Tran B", email="b@example.com", message="Hi"
    )

    assert contact.id is not None
    assert contact.subject == ContactRepository.DEFAULT_SUBJECT


def test_write_without_schema_raises_database_exception():
    bare = Database("sqlite://")
    repo = ContactRepository(bare.session_factory)

    with pytest.raises(DatabaseException):
        repo.create_contact(name="x", email="x@y.z", message="m")
    bare.close()


class TestCatalogRepository:
    def test_product_defaults(self, shelf):
        product = shelf.get_product("muesli")

        assert product.rating == 5
        assert product.is_organic is True
        assert product.is_new is False
        assert product.details == []

    def test_missing_slug_raises_not_found(self, shelf):
        with pytest.raises(NotFoundException) as excinfo:
            shelf.get_category("tra")

        assert excinfo.value.message == "Category not found"
        assert excinfo.value.key == "tra"

    def test_pages_are_ordered_by_id(self, shelf):
        rows, total = shelf.list_products(page=2, limit=2)

        assert total == 3
        assert [row.slug for row in rows] == ["honey"]

    def test_products_by_category(self, shelf):
        assert [row.slug for row in shelf.list_products_by_category(1)] == ["granola", "muesli"]
        assert shelf.list_products_by_category(99) == []

    def test_images_follow_display_order(self, shelf):
        paths = [row.image_path for row in shelf.list_product_images(3)]

        assert paths == ["/img/h-a.jpg", "/img/h-b.jpg"]

    def test_featured_respects_limit(self, shelf):
        rows = shelf.list_featured_products(2)

        assert len(rows) == 2
        assert {row.slug for row in rows} <= {"granola", "muesli", "honey"}


class TestAsyncRepositories:
    async def test_catalog_calls_run_off_the_loop(self, shelf):
        catalog = AsyncCatalogRepository(shelf)

        _, total = await catalog.list_products(page=1, limit=10)
        assert total == 3
        assert (await catalog.get_product("honey")).price == 120000
        with pytest.raises(NotFoundException):
            await catalog.get_product("tea")

    async def test_order_writes(self, order_repo):
        orders = AsyncOrderRepository(order_repo)

        order = await orders.create_order(
            name="Nguyen A", phone="0909000000", address="Hanoi", items="[]", total=0
        )

        assert order.id is not None
        assert order_repo.count_orders() == 1
