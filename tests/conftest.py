"""Shared pytest fixtures for storefront tests."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from tuhoshop.api import create_api_app
from tuhoshop.cart import CartItem, CartStore, MemorySlotStorage
from tuhoshop.core.config import ApiConfig, CheckoutConfig, Settings, TelegramConfig
from tuhoshop.core.notices import NoticeCollector
from tuhoshop.db import CatalogRepository, Category, Database, OrderRepository, Product, ProductImage, Testimonial
from tuhoshop.services.notifier import AdminNotifier


class RecordingNotifier(AdminNotifier):
    """Notifier that keeps every admin message instead of sending it."""

    def __init__(self, deliver: bool = True) -> None:
        self.deliver = deliver
        self.messages: list[str] = []
        self.closed = False

    async def send_admin_message(self, text: str) -> bool:
        self.messages.append(text)
        return self.deliver

    async def close(self) -> None:
        self.closed = True


@pytest.fixture()
def settings() -> Settings:
    """Settings for an in-process API with rate limiting off."""
    return Settings(
        database_url="sqlite://",
        redis_url=None,
        environment="test",
        api=ApiConfig(rate_limit_disabled=True),
        telegram=TelegramConfig(bot_token=None, admin_chat_id=None, announce_online=True),
        checkout=CheckoutConfig(),
    )


@pytest.fixture()
def database():
    """Fresh in-memory SQLite database with the schema created."""
    db = Database("sqlite://")
    db.init_schema()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def order_repo(database: Database) -> OrderRepository:
    return OrderRepository(database.session_factory)


@pytest.fixture()
def shelf(database: Database) -> CatalogRepository:
    """Two categories with three products; the honey has two gallery images."""
    with database.session_factory() as session:
        session.add_all(
            [
                Category(id=1, name="Ngũ cốc", slug="ngu-coc", image="/img/c1.jpg"),
                Category(id=2, name="Mật ong", slug="mat-ong", image="/img/c2.jpg"),
                Product(id=1, name="Granola", slug="granola", description="Yến mạch nướng", price=80000,
                        old_price=95000, image="/img/p1.jpg", category_id=1, is_new=True, discount=15),
                Product(id=2, name="Muesli", slug="muesli", description="d", price=65000,
                        image="/img/p2.jpg", category_id=1),
                Product(id=3, name="Honey", slug="honey", description="d", price=120000,
                        image="/img/p3.jpg", category_id=2, details=["500ml", "Hà Giang"]),
                ProductImage(product_id=3, image_path="/img/h-b.jpg", display_order=2),
                ProductImage(product_id=3, image_path="/img/h-a.jpg", display_order=1, is_main=True),
                Testimonial(name="Lan", avatar="/img/lan.jpg", rating=5, comment="Ngon"),
            ]
        )
        session.commit()
    return CatalogRepository(database.session_factory)


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def api_app(settings, database, notifier):
    return create_api_app(settings=settings, database=database, notifier=notifier)


@pytest.fixture()
def client(api_app) -> TestClient:
    """HTTP client for the API; lifespan events are not triggered."""
    return TestClient(api_app)


@pytest.fixture()
def notices() -> NoticeCollector:
    return NoticeCollector()


@pytest.fixture()
def cart(notices) -> CartStore:
    return CartStore(MemorySlotStorage(), notify=notices)


@pytest.fixture()
def granola() -> CartItem:
    return CartItem(id="1", name="Granola", price=80000, image="/img/granola.jpg")


@pytest.fixture()
async def aiohttp_client():
    """Minimal aiohttp_client fixture to avoid pytest-aiohttp dependency."""
    clients: list[object] = []

    async def _make_client(app):
        from aiohttp.test_utils import TestClient as AiohttpTestClient
        from aiohttp.test_utils import TestServer

        server = TestServer(app)
        client = AiohttpTestClient(server)
        await client.start_server()
        clients.append(client)
        return client

    try:
        yield _make_client
    finally:
        for client in clients:
            await client.close()
