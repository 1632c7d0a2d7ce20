"""
Products API Router

Public catalog endpoints and the single-unit "Buy Now" purchase.
"""
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from electromart.auth import verify_session
from electromart.errors import ERROR_PRODUCT_NOT_FOUND, ElectroMartError
from electromart.money import to_float
from electromart.services.catalog import ProductFilter, SortOption
from electromart.services.database import get_database
from .deps import to_http_exception
from .models import BuyProductRequest


router = APIRouter(tags=["products"])


def _product_response(product) -> dict:
    return {
        "id": product.id,
        "title": product.title,
        "price": to_float(product.price),
        "image": product.image,
        "quantity": product.quantity,
    }


@router.get("/api/products")
async def get_products(
    search: Optional[str] = None,
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
    sort: SortOption = SortOption.DEFAULT,
):
    """List products with optional search, price range and sort."""
    db = get_database()
    product_filter = ProductFilter(search=search, min_price=min_price, max_price=max_price, sort=sort)
    try:
        products = await db.list_products(product_filter)
    except ElectroMartError as e:
        raise to_http_exception(e)
    return {"products": [_product_response(p) for p in products], "count": len(products)}


@router.get("/api/products/{product_id}")
async def get_product(product_id: str):
    db = get_database()
    try:
        product = await db.get_product_by_id(product_id)
    except ElectroMartError as e:
        raise to_http_exception(e)
    if not product:
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)
    return _product_response(product)


@router.post("/api/products/buy")
async def buy_product(request: BuyProductRequest, user=Depends(verify_session)):
    """Buy one unit immediately, bypassing the cart."""
    db = get_database()
    try:
        new_quantity = await db.buy_product(request.id)
    except ElectroMartError as e:
        raise to_http_exception(e)
    return {"message": "Purchase successful", "newQuantity": new_quantity}
