"""Environment-driven configuration objects for the storefront backend."""
from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from tuhoshop.core.exceptions import ConfigurationException

DEFAULT_DATABASE_URL = "sqlite:///./tuhoshop.db"


def _str_to_bool(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"true", "1", "yes", "y"}


def _normalize_database_url(url: str) -> str:
    # Hosting providers hand out postgres:// URLs; SQLAlchemy wants a driver name
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def _env_number(name: str, default: str, cast):
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigurationException(f"{name} must be a number, got {raw!r}") from e


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass(slots=True)
class TelegramConfig:
    bot_token: str | None
    admin_chat_id: str | None
    announce_online: bool = True


@dataclass(slots=True)
class ApiConfig:
    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: list[str] = field(default_factory=list)
    rate_limit: str = "100/minute"
    rate_limit_disabled: bool = False
    rate_limit_storage: str | None = None


@dataclass(slots=True)
class CheckoutConfig:
    api_base_url: str = "http://localhost:5000"
    timeout: float = 15.0


@dataclass(slots=True)
class Settings:
    database_url: str
    redis_url: str | None
    environment: str
    api: ApiConfig
    telegram: TelegramConfig
    checkout: CheckoutConfig
    cart_slot: str = "cart"
    sentry_dsn: str | None = None

    @property
    def is_dev(self) -> bool:
        return self.environment in ("development", "dev", "local", "test")


def load_settings() -> Settings:
    """Load environment variables once and expose typed settings.

    Unlike the bot token of a polling bot, Telegram credentials are optional here:
    without them order notifications are disabled, orders are still accepted.
    """
    load_dotenv()

    database_url = _normalize_database_url(os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL)

    telegram = TelegramConfig(
        bot_token=(os.getenv("TELEGRAM_BOT_TOKEN") or "").strip() or None,
        admin_chat_id=(os.getenv("TELEGRAM_ADMIN_CHAT_ID") or "").strip() or None,
        announce_online=_str_to_bool(os.getenv("TELEGRAM_ANNOUNCE_ONLINE", "true")),
    )

    api = ApiConfig(
        host=os.getenv("HOST", "0.0.0.0"),
        port=_env_number("PORT", "5000", int),
        cors_origins=_split_csv(os.getenv("CORS_ALLOWED_ORIGINS")),
        rate_limit=os.getenv("RATE_LIMIT_DEFAULT", "100/minute"),
        rate_limit_disabled=_str_to_bool(os.getenv("RATE_LIMIT_DISABLED")),
        rate_limit_storage=os.getenv("RATE_LIMIT_REDIS_URL") or None,
    )

    checkout = CheckoutConfig(
        api_base_url=os.getenv("ORDER_API_BASE_URL", f"http://localhost:{api.port}"),
        timeout=_env_number("ORDER_API_TIMEOUT", "15", float),
    )

    return Settings(
        database_url=database_url,
        redis_url=os.getenv("REDIS_URL") or None,
        environment=os.getenv("ENVIRONMENT", "production").strip().lower(),
        api=api,
        telegram=telegram,
        checkout=checkout,
        cart_slot=os.getenv("CART_STORAGE_SLOT", "cart"),
        sentry_dsn=os.getenv("SENTRY_DSN") or None,
    )
