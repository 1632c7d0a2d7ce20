"""Product Repository - catalog rows and their stock column.

All methods use async/await with supabase-py v2.
"""
from typing import Any, Dict, List, Optional

from electromart.errors import ProductNotFoundError
from electromart.services.models import Product
from .base import BaseRepository


class ProductRepository(BaseRepository):
    """Product database operations."""

    async def get_all(self) -> List[Product]:
        result = await self.client.table("products").select("*").execute()
        return [Product(**p) for p in result.data or []]

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        result = await self.client.table("products").select("*").eq("id", product_id).limit(1).execute()
        return Product(**result.data[0]) if result.data else None

    async def get_stock(self, product_id: str) -> int:
        """Current available units. Raises ProductNotFoundError for unknown ids."""
        result = await self.client.table("products").select("quantity").eq("id", product_id).limit(1).execute()
        if not result.data:
            raise ProductNotFoundError(product_id)
        return int(result.data[0].get("quantity") or 0)

    async def set_stock(self, product_id: str, quantity: int) -> bool:
        """Overwrite the stock column (last write wins, no compare-and-swap)."""
        result = await self.client.table("products").update(
            {"quantity": quantity}
        ).eq("id", product_id).execute()
        return len(result.data or []) > 0

    async def create(self, data: Dict[str, Any]) -> Product:
        result = await self.client.table("products").insert(data).execute()
        return Product(**result.data[0])

    async def delete(self, product_id: str) -> bool:
        result = await self.client.table("products").delete().eq("id", product_id).execute()
        return len(result.data or []) > 0
