"""Catalog filtering and sorting for the product listing."""
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from electromart.services.models import Product


class SortOption(str, Enum):
    DEFAULT = "default"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"


class ProductFilter(BaseModel):
    search: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    sort: SortOption = SortOption.DEFAULT


def apply_filter(products: List[Product], product_filter: Optional[ProductFilter]) -> List[Product]:
    """
    Filter by title substring (case-insensitive) and price bounds, then sort.

    The default sort keeps backend order.
    """
    if product_filter is None:
        return list(products)

    result = list(products)
    if product_filter.search:
        needle = product_filter.search.lower()
        result = [p for p in result if needle in p.title.lower()]
    if product_filter.min_price is not None:
        result = [p for p in result if p.price >= product_filter.min_price]
    if product_filter.max_price is not None:
        result = [p for p in result if p.price <= product_filter.max_price]

    sort = product_filter.sort
    if sort == SortOption.PRICE_ASC:
        result.sort(key=lambda p: p.price)
    elif sort == SortOption.PRICE_DESC:
        result.sort(key=lambda p: p.price, reverse=True)
    elif sort == SortOption.NAME_ASC:
        result.sort(key=lambda p: p.title.lower())
    elif sort == SortOption.NAME_DESC:
        result.sort(key=lambda p: p.title.lower(), reverse=True)
    return result
