"""
Cart snapshot storage.

A snapshot is a JSON array of cart line records stored under one key per
owner. Reads never fail: an absent key is an empty cart, and unreadable
content is logged and treated as empty. Writes raise CartStorageError.
"""
import asyncio
import json
import os
import re
from decimal import InvalidOperation
from pathlib import Path
from typing import Optional

from electromart.db import get_redis, redis_configured
from electromart.errors import CartStorageError
from electromart.logging import get_logger, sanitize_id_for_logging
from .models import Cart

logger = get_logger(__name__)


def _decode_snapshot(key: str, raw: Optional[str]) -> Cart:
    if raw is None or not raw.strip():
        return Cart()
    try:
        return Cart.from_list(json.loads(raw))
    except (json.JSONDecodeError, InvalidOperation, KeyError, TypeError, ValueError) as e:
        logger.warning(f"Corrupted cart snapshot for {sanitize_id_for_logging(key)}: {e}")
        return Cart()


class CartStore:
    """Durable key-value slot for cart snapshots."""

    async def load(self, key: str) -> Cart:
        raise NotImplementedError

    async def save(self, key: str, cart: Cart) -> None:
        raise NotImplementedError


class RedisCartStore(CartStore):
    """Upstash Redis backed store. Snapshots have no TTL."""

    def __init__(self, redis=None):
        self._redis = redis  # Lazy initialization

    @property
    def redis(self):
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    async def load(self, key: str) -> Cart:
        try:
            raw = await self.redis.get(key)
        except Exception as e:
            # Treated like corruption: the customer gets an empty cart, not an error
            logger.warning(f"Failed to read cart snapshot from Redis: {e}")
            return Cart()
        return _decode_snapshot(key, raw)

    async def save(self, key: str, cart: Cart) -> None:
        try:
            await self.redis.set(key, json.dumps(cart.to_list()))
        except Exception as e:
            logger.error(f"Failed to save cart to Redis: {e}")
            raise CartStorageError() from e


class FileCartStore(CartStore):
    """One JSON file per key under a local directory."""

    def __init__(self, storage_dir: str | Path = "data/carts"):
        self.storage_dir = Path(storage_dir)

    def _file_path(self, key: str) -> Path:
        safe_name = re.sub(r"[^A-Za-z0-9_.-]", "_", key)
        return self.storage_dir / f"{safe_name}.json"

    def _read(self, key: str) -> Optional[str]:
        path = self._file_path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def _write(self, key: str, payload: str) -> None:
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        path = self._file_path(key)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        os.replace(tmp_path, path)

    async def load(self, key: str) -> Cart:
        try:
            raw = await asyncio.to_thread(self._read, key)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read cart file: {e}")
            return Cart()
        return _decode_snapshot(key, raw)

    async def save(self, key: str, cart: Cart) -> None:
        payload = json.dumps(cart.to_list(), indent=2, ensure_ascii=False)
        try:
            await asyncio.to_thread(self._write, key, payload)
        except OSError as e:
            logger.error(f"Failed to write cart file: {e}")
            raise CartStorageError() from e


_cart_store: Optional[CartStore] = None


def get_cart_store() -> CartStore:
    """
    Get the configured cart store (singleton).

    CART_STORE=redis|file selects the backend; without it Redis is used
    when Upstash credentials are present.
    """
    global _cart_store
    if _cart_store is None:
        backend = os.environ.get("CART_STORE", "").lower()
        if backend == "redis" or (not backend and redis_configured()):
            _cart_store = RedisCartStore()
        else:
            _cart_store = FileCartStore(os.environ.get("CART_STORAGE_DIR", "data/carts"))
        logger.info(f"Cart store: {type(_cart_store).__name__}")
    return _cart_store
