"""Durable key-value slots for client cart state."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import redis

logger = logging.getLogger(__name__)


class SlotStorage(ABC):
    """Key-value storage holding serialized values under named slots."""

    @abstractmethod
    def get(self, slot: str) -> str | None:
        """Return the raw value stored under ``slot`` or None."""

    @abstractmethod
    def set(self, slot: str, value: str) -> None:
        """Store ``value`` under ``slot``, replacing what was there."""

    @abstractmethod
    def delete(self, slot: str) -> None:
        """Drop ``slot`` entirely."""


class MemorySlotStorage(SlotStorage):
    """Process-local slots; survives nothing but the process itself."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._slots: dict[str, str] = dict(initial or {})

    def get(self, slot: str) -> str | None:
        return self._slots.get(slot)

    def set(self, slot: str, value: str) -> None:
        self._slots[slot] = value

    def delete(self, slot: str) -> None:
        self._slots.pop(slot, None)


class RedisSlotStorage(SlotStorage):
    """Slots persisted in Redis, one namespace per client session.

    Redis errors switch the instance to an in-memory copy so the cart keeps
    working for the rest of the session.
    """

    SLOT_EXPIRY_SECONDS = 30 * 24 * 60 * 60

    def __init__(
        self,
        namespace: str,
        redis_url: str | None = None,
        client: redis.Redis | None = None,
    ) -> None:
        self._namespace = namespace
        self._client = client if client is not None else self._init_client(redis_url)
        self._memory = MemorySlotStorage()

    @staticmethod
    def _init_client(redis_url: str | None) -> redis.Redis | None:
        if not redis_url:
            logger.warning("REDIS_URL is not set; cart slots use in-memory fallback")
            return None
        try:
            client = redis.from_url(
                redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
            client.ping()
        except redis.RedisError as exc:
            logger.warning("Redis slot storage init failed, fallback to in-memory: %s", exc)
            return None
        logger.info("Redis cart slot storage enabled")
        return client

    @property
    def is_durable(self) -> bool:
        return self._client is not None

    def _key(self, slot: str) -> str:
        return f"tuhoshop:{self._namespace}:{slot}"

    def _switch_to_memory_fallback(self, reason: Exception) -> None:
        logger.warning("Redis slot storage fallback to memory mode: %s", reason)
        self._client = None

    def get(self, slot: str) -> str | None:
        if self._client is None:
            return self._memory.get(slot)
        try:
            return self._client.get(self._key(slot))
        except redis.RedisError as exc:
            self._switch_to_memory_fallback(exc)
            return self._memory.get(slot)

    def set(self, slot: str, value: str) -> None:
        if self._client is not None:
            try:
                self._client.setex(self._key(slot), self.SLOT_EXPIRY_SECONDS, value)
                return
            except redis.RedisError as exc:
                self._switch_to_memory_fallback(exc)
        self._memory.set(slot, value)

    def delete(self, slot: str) -> None:
        if self._client is not None:
            try:
                self._client.delete(self._key(slot))
                return
            except redis.RedisError as exc:
                self._switch_to_memory_fallback(exc)
        self._memory.delete(slot)
