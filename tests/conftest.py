"""Pytest configuration and fixtures"""
import os
import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, Mock

# Set test environment variables
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test_key")
os.environ.setdefault("ADMIN_UUID", "admin-uuid-0001")
os.environ.setdefault("CART_STORE", "file")

from electromart.cart import FileCartStore  # noqa: E402
from electromart.services.models import Product  # noqa: E402


@pytest.fixture
def mock_supabase_client():
    """Mock async Supabase client: every builder call chains, execute() is awaited."""
    client = Mock()

    table_mock = Mock()
    table_mock.select.return_value = table_mock
    table_mock.insert.return_value = table_mock
    table_mock.update.return_value = table_mock
    table_mock.delete.return_value = table_mock
    table_mock.eq.return_value = table_mock
    table_mock.limit.return_value = table_mock
    table_mock.order.return_value = table_mock
    table_mock.execute = AsyncMock(return_value=Mock(data=[]))

    client.table.return_value = table_mock
    client.auth.sign_in_with_password = AsyncMock()
    client.auth.sign_up = AsyncMock()

    return client


@pytest.fixture
def cart_store(tmp_path):
    """File-backed cart store in a temp directory"""
    return FileCartStore(tmp_path / "carts")


@pytest.fixture
def sample_product_row():
    """Sample products table row"""
    return {
        "id": 42,
        "title": "Noise Cancelling Headphones",
        "price": 199.99,
        "image": "https://cdn.example.com/headphones.png",
        "quantity": 7,
        "created_at": "2025-01-01T00:00:00Z",
    }


@pytest.fixture
def make_product():
    """Factory for Product models"""
    def _make(product_id="sku1", title="USB-C Cable", price="10.00", quantity=5, image="cable.png"):
        return Product(id=product_id, title=title, price=Decimal(price), quantity=quantity, image=image)
    return _make


@pytest.fixture
def mock_backend():
    """Backend collaborator with an in-test stock table"""
    stock = {}
    backend = Mock()
    backend.stock = stock

    async def get_product_stock(product_id):
        from electromart.errors import ProductNotFoundError
        if product_id not in stock:
            raise ProductNotFoundError(product_id)
        return stock[product_id]

    async def decrement_stock(product_id, new_quantity):
        stock[product_id] = new_quantity
        return True

    backend.get_product_stock = AsyncMock(side_effect=get_product_stock)
    backend.decrement_stock = AsyncMock(side_effect=decrement_stock)
    return backend
