"""Tests for the Supabase database service and repositories"""
import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, Mock

from electromart.errors import (
    BackendUnavailableError,
    ConfigurationError,
    InvalidCredentialsError,
    OutOfStockError,
    ProductNotFoundError,
    RegistrationError,
)
from electromart.services import database as database_module
from electromart.services.catalog import ProductFilter, SortOption
from electromart.services.database import Database, get_database
from electromart.services.models import ROLE_ADMIN, ROLE_USER
from electromart.services.repositories import ProductRepository


def _table(client):
    return client.table.return_value


class TestProductRepository:

    @pytest.mark.asyncio
    async def test_get_by_id(self, mock_supabase_client, sample_product_row):
        _table(mock_supabase_client).execute.return_value = Mock(data=[sample_product_row])

        product = await ProductRepository(mock_supabase_client).get_by_id("42")

        assert product.id == "42"
        assert product.price == Decimal("199.99")
        _table(mock_supabase_client).eq.assert_called_with("id", "42")

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, mock_supabase_client):
        assert await ProductRepository(mock_supabase_client).get_by_id("nope") is None

    @pytest.mark.asyncio
    async def test_get_stock_unknown_product(self, mock_supabase_client):
        with pytest.raises(ProductNotFoundError):
            await ProductRepository(mock_supabase_client).get_stock("nope")

    @pytest.mark.asyncio
    async def test_set_stock_reports_match(self, mock_supabase_client):
        table = _table(mock_supabase_client)
        table.execute.return_value = Mock(data=[{"id": 42, "quantity": 3}])

        assert await ProductRepository(mock_supabase_client).set_stock("42", 3) is True
        table.update.assert_called_with({"quantity": 3})

    @pytest.mark.asyncio
    async def test_set_stock_no_rows(self, mock_supabase_client):
        assert await ProductRepository(mock_supabase_client).set_stock("42", 3) is False


class TestDatabaseProducts:

    @pytest.mark.asyncio
    async def test_get_product_stock(self, mock_supabase_client):
        _table(mock_supabase_client).execute.return_value = Mock(data=[{"quantity": 7}])
        db = Database(mock_supabase_client)

        assert await db.get_product_stock("42") == 7

    @pytest.mark.asyncio
    async def test_not_found_passes_through(self, mock_supabase_client):
        db = Database(mock_supabase_client)
        with pytest.raises(ProductNotFoundError):
            await db.get_product_stock("42")

    @pytest.mark.asyncio
    async def test_transport_error_becomes_backend_unavailable(self, mock_supabase_client):
        _table(mock_supabase_client).execute.side_effect = ConnectionError("timeout")
        db = Database(mock_supabase_client)

        with pytest.raises(BackendUnavailableError):
            await db.get_product_stock("42")

    @pytest.mark.asyncio
    async def test_decrement_stock_writes_new_quantity(self, mock_supabase_client):
        table = _table(mock_supabase_client)
        table.execute.return_value = Mock(data=[{"id": 42}])

        assert await Database(mock_supabase_client).decrement_stock("42", 5) is True
        table.update.assert_called_with({"quantity": 5})

    @pytest.mark.asyncio
    async def test_buy_product_decrements_by_one(self, mock_supabase_client):
        table = _table(mock_supabase_client)
        table.execute.side_effect = [Mock(data=[{"quantity": 4}]), Mock(data=[{"id": 42}])]

        assert await Database(mock_supabase_client).buy_product("42") == 3
        table.update.assert_called_with({"quantity": 3})

    @pytest.mark.asyncio
    async def test_buy_product_out_of_stock(self, mock_supabase_client):
        _table(mock_supabase_client).execute.return_value = Mock(data=[{"quantity": 0}])

        with pytest.raises(OutOfStockError):
            await Database(mock_supabase_client).buy_product("42")

    @pytest.mark.asyncio
    async def test_list_products_applies_filter(self, mock_supabase_client):
        _table(mock_supabase_client).execute.return_value = Mock(data=[
            {"id": 1, "title": "Phone", "price": 500, "quantity": 2},
            {"id": 2, "title": "Phone Case", "price": 20, "quantity": 9},
            {"id": 3, "title": "Laptop", "price": 1200, "quantity": 1},
        ])
        db = Database(mock_supabase_client)

        products = await db.list_products(ProductFilter(search="phone", sort=SortOption.PRICE_ASC))

        assert [p.id for p in products] == ["2", "1"]

    @pytest.mark.asyncio
    async def test_create_product(self, mock_supabase_client, sample_product_row):
        table = _table(mock_supabase_client)
        table.execute.return_value = Mock(data=[sample_product_row])

        product = await Database(mock_supabase_client).create_product(
            "Noise Cancelling Headphones", Decimal("199.99"), None, 7
        )

        assert product.id == "42"
        inserted = table.insert.call_args[0][0]
        assert inserted["price"] == 199.99
        assert inserted["quantity"] == 7

    @pytest.mark.asyncio
    async def test_delete_missing_product(self, mock_supabase_client):
        assert await Database(mock_supabase_client).delete_product("42") is False


class TestDatabaseAuth:

    @pytest.mark.asyncio
    async def test_admin_role_from_admin_uuid(self, mock_supabase_client, monkeypatch):
        monkeypatch.setenv("ADMIN_UUID", "admin-uuid-0001")
        mock_supabase_client.auth.sign_in_with_password.return_value = Mock(
            user=Mock(id="admin-uuid-0001", email="boss@example.com")
        )

        user = await Database(mock_supabase_client).authenticate("boss@example.com", "pw")

        assert user.role == ROLE_ADMIN
        assert user.is_admin

    @pytest.mark.asyncio
    async def test_regular_user_role(self, mock_supabase_client, monkeypatch):
        monkeypatch.setenv("ADMIN_UUID", "admin-uuid-0001")
        mock_supabase_client.auth.sign_in_with_password.return_value = Mock(
            user=Mock(id="user-uuid-0002", email="ann@example.com")
        )

        user = await Database(mock_supabase_client).authenticate("ann@example.com", "pw")

        assert user.role == ROLE_USER
        assert user.id == "user-uuid-0002"

    @pytest.mark.asyncio
    async def test_no_user_is_invalid_credentials(self, mock_supabase_client):
        mock_supabase_client.auth.sign_in_with_password.return_value = Mock(user=None)

        with pytest.raises(InvalidCredentialsError):
            await Database(mock_supabase_client).authenticate("ann@example.com", "bad")

    @pytest.mark.asyncio
    async def test_missing_admin_uuid(self, mock_supabase_client, monkeypatch):
        monkeypatch.delenv("ADMIN_UUID", raising=False)
        mock_supabase_client.auth.sign_in_with_password.return_value = Mock(
            user=Mock(id="user-uuid-0002", email="ann@example.com")
        )

        with pytest.raises(ConfigurationError):
            await Database(mock_supabase_client).authenticate("ann@example.com", "pw")

    @pytest.mark.asyncio
    async def test_register_requires_email_and_password(self, mock_supabase_client):
        with pytest.raises(RegistrationError):
            await Database(mock_supabase_client).register("ann@example.com", "")
        mock_supabase_client.auth.sign_up.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_register(self, mock_supabase_client):
        mock_supabase_client.auth.sign_up.return_value = Mock(
            user=Mock(id="user-uuid-0003", email="new@example.com")
        )

        user = await Database(mock_supabase_client).register("new@example.com", "secret")

        assert user.role == ROLE_USER
        mock_supabase_client.auth.sign_up.assert_awaited_once_with(
            {"email": "new@example.com", "password": "secret"}
        )


class TestDatabaseSingleton:

    def test_get_database_before_init(self, monkeypatch):
        monkeypatch.setattr(database_module, "_db", None)
        with pytest.raises(RuntimeError):
            get_database()

    @pytest.mark.asyncio
    async def test_init_database_once(self, monkeypatch, mock_supabase_client):
        monkeypatch.setattr(database_module, "_db", None)
        monkeypatch.setattr(database_module, "_db_lock", None)
        fake_get_supabase = AsyncMock(return_value=mock_supabase_client)
        monkeypatch.setattr(database_module, "get_supabase", fake_get_supabase)

        first = await database_module.init_database()
        second = await database_module.init_database()

        assert first is second
        assert get_database() is first
        fake_get_supabase.assert_awaited_once()
        database_module.close_database()
