"""
Cart Router

Shopping cart endpoints. All mutations go through the owner's CartManager.

Response format:
- items: cart lines in cart order
- items_count: total units (not lines)
- cart_total: sum of price x quantity
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from electromart.auth import verify_session
from electromart.cart import CapturedCeiling, CartManager, clamp_notice, get_cart_manager
from electromart.errors import ERROR_PRODUCT_NOT_FOUND, ERROR_PRODUCT_OUT_OF_STOCK, ElectroMartError
from electromart.money import to_float
from electromart.services.database import get_database
from .deps import to_http_exception
from .models import AddToCartRequest, UpdateCartItemRequest


router = APIRouter(prefix="/api/cart", tags=["cart"])


def _format_cart_response(manager: CartManager, notice: Optional[str] = None) -> dict:
    return {
        "items": [
            {
                "id": line.id,
                "title": line.title,
                "price": to_float(line.price),
                "image": line.image,
                "quantity": line.quantity,
                "max_quantity": line.max_quantity,
                "line_total": to_float(line.line_total),
            }
            for line in manager.lines
        ],
        "items_count": manager.item_count(),
        "cart_total": to_float(manager.total()),
        "checkout_in_progress": manager.is_settling,
        "notice": notice,
    }


@router.get("")
async def get_cart(user=Depends(verify_session)):
    manager = await get_cart_manager(user.id)
    return _format_cart_response(manager)


@router.get("/count")
async def get_cart_items_count(user=Depends(verify_session)):
    manager = await get_cart_manager(user.id)
    return {"count": manager.item_count()}


@router.post("/add")
async def add_to_cart(request: AddToCartRequest, user=Depends(verify_session)):
    """Add one unit, capturing the product's current stock as the ceiling."""
    db = get_database()
    try:
        product = await db.get_product_by_id(request.product_id)
    except ElectroMartError as e:
        raise to_http_exception(e)
    if not product:
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)
    if not product.in_stock:
        raise HTTPException(status_code=400, detail=ERROR_PRODUCT_OUT_OF_STOCK)

    manager = await get_cart_manager(user.id)
    try:
        await manager.add_line(product, CapturedCeiling(product.quantity))
    except ElectroMartError as e:
        raise to_http_exception(e)
    return _format_cart_response(manager)


@router.patch("/item")
async def update_quantity(request: UpdateCartItemRequest, user=Depends(verify_session)):
    """Set a line's quantity (below 1 removes it, above the ceiling is clamped)."""
    manager = await get_cart_manager(user.id)
    try:
        result = await manager.set_quantity(request.product_id, request.quantity)
    except ElectroMartError as e:
        raise to_http_exception(e)

    notice = None
    if result is not None and result.was_clamped:
        notice = clamp_notice(result.effective)
    return _format_cart_response(manager, notice=notice)


@router.delete("/item/{product_id}")
async def remove_from_cart(product_id: str, user=Depends(verify_session)):
    manager = await get_cart_manager(user.id)
    try:
        await manager.remove_line(product_id)
    except ElectroMartError as e:
        raise to_http_exception(e)
    return _format_cart_response(manager)


@router.post("/clear")
async def clear_cart(user=Depends(verify_session)):
    manager = await get_cart_manager(user.id)
    try:
        await manager.clear()
    except ElectroMartError as e:
        raise to_http_exception(e)
    return _format_cart_response(manager)
