"""
Supabase Database Service

Backend collaborator for the storefront: product reads, stock writes and
email/password auth, delegated to repositories.

Usage:
    from electromart.services.database import get_database

    # After init_database() at startup:
    db = get_database()
    stock = await db.get_product_stock("42")

Error contract:
- ProductNotFoundError / OutOfStockError / InvalidCredentialsError /
  RegistrationError / ConfigurationError pass through unchanged
- anything else raised by the client becomes BackendUnavailableError
"""

import asyncio
import functools
import os
from typing import Any, Dict, List, Optional

from supabase import AuthError
from supabase._async.client import AsyncClient

from electromart.db import get_supabase
from electromart.errors import (
    BackendUnavailableError,
    ConfigurationError,
    ElectroMartError,
    InvalidCredentialsError,
    OutOfStockError,
    RegistrationError,
)
from electromart.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging
from electromart.services.catalog import ProductFilter, apply_filter
from electromart.services.models import ROLE_ADMIN, ROLE_USER, AuthUser, Product
from electromart.services.repositories import AuthRepository, ProductRepository

logger = get_logger(__name__)


def _backend_call(func):
    """Convert unexpected client failures into BackendUnavailableError."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except ElectroMartError:
            raise
        except Exception as e:
            logger.error(f"Backend call {func.__name__} failed: {e}", exc_info=True)
            raise BackendUnavailableError() from e

    return wrapper


class Database:
    """
    Supabase-backed data access for products and users.

    Must be created via `Database.create()` or `init_database()`.
    """

    def __init__(self, client: AsyncClient):
        self.client = client
        self._products_repo = ProductRepository(self.client)
        self._auth_repo = AuthRepository(self.client)

    @classmethod
    async def create(cls) -> "Database":
        client = await get_supabase()
        return cls(client)

    # ==================== PRODUCTS ====================

    @_backend_call
    async def list_products(self, product_filter: Optional[ProductFilter] = None) -> List[Product]:
        products = await self._products_repo.get_all()
        return apply_filter(products, product_filter)

    @_backend_call
    async def get_product_by_id(self, product_id: str) -> Optional[Product]:
        return await self._products_repo.get_by_id(product_id)

    @_backend_call
    async def get_product_stock(self, product_id: str) -> int:
        return await self._products_repo.get_stock(product_id)

    @_backend_call
    async def decrement_stock(self, product_id: str, new_quantity: int) -> bool:
        """Set stock to `new_quantity`. The caller computes live - requested."""
        return await self._products_repo.set_stock(product_id, new_quantity)

    @_backend_call
    async def buy_product(self, product_id: str) -> int:
        """Single-unit purchase. Returns the remaining stock."""
        stock = await self._products_repo.get_stock(product_id)
        if stock <= 0:
            raise OutOfStockError()
        new_quantity = stock - 1
        await self._products_repo.set_stock(product_id, new_quantity)
        return new_quantity

    # ==================== ADMIN ====================

    @_backend_call
    async def create_product(self, title: str, price: Any, image: Optional[str], quantity: int) -> Product:
        data: Dict[str, Any] = {
            "title": title,
            "price": float(price),
            "image": image,
            "quantity": int(quantity),
        }
        product = await self._products_repo.create(data)
        logger.info(f"Product created: {sanitize_id_for_logging(product.id)}")
        return product

    @_backend_call
    async def delete_product(self, product_id: str) -> bool:
        return await self._products_repo.delete(product_id)

    @_backend_call
    async def update_product_quantity(self, product_id: str, quantity: int) -> bool:
        return await self._products_repo.set_stock(product_id, int(quantity))

    # ==================== AUTH ====================

    @_backend_call
    async def authenticate(self, email: str, password: str) -> AuthUser:
        """
        Sign in with email/password and resolve the role.

        The single admin is identified by ADMIN_UUID; everyone else is a user.
        """
        try:
            user = await self._auth_repo.sign_in(email, password)
        except AuthError as e:
            logger.warning(f"Sign-in rejected for {sanitize_string_for_logging(email)}: {e}")
            raise InvalidCredentialsError() from e
        if user is None:
            raise InvalidCredentialsError()

        admin_uuid = os.environ.get("ADMIN_UUID")
        if not admin_uuid:
            logger.error("ADMIN_UUID is not set")
            raise ConfigurationError("Server configuration error: Missing admin UUID")

        role = ROLE_ADMIN if str(user.id) == admin_uuid else ROLE_USER
        return AuthUser(id=str(user.id), email=user.email or email, role=role)

    @_backend_call
    async def register(self, email: str, password: str) -> AuthUser:
        if not email or not password:
            raise RegistrationError("Email and password are required")
        try:
            user = await self._auth_repo.sign_up(email, password)
        except AuthError as e:
            raise RegistrationError(str(e)) from e
        if user is None:
            raise RegistrationError()
        logger.info(f"User registered: {sanitize_id_for_logging(str(user.id))}")
        return AuthUser(id=str(user.id), email=user.email or email, role=ROLE_USER)


# Singleton instance
_db: Optional[Database] = None
_db_lock: Optional[asyncio.Lock] = None


def _get_lock() -> asyncio.Lock:
    global _db_lock
    if _db_lock is None:
        _db_lock = asyncio.Lock()
    return _db_lock


async def init_database() -> Database:
    """Initialize the database singleton (FastAPI lifespan or lazily)."""
    global _db
    if _db is not None:
        return _db

    async with _get_lock():
        if _db is None:
            logger.info("Initializing async Supabase client...")
            _db = await Database.create()
            logger.info("Async Supabase client initialized")
    return _db


def get_database() -> Database:
    """
    Get database instance (sync accessor).

    Raises:
        RuntimeError: If init_database() has not run
    """
    if _db is None:
        raise RuntimeError("Database not initialized. Call 'await init_database()' at startup.")
    return _db


def close_database() -> None:
    global _db
    _db = None
