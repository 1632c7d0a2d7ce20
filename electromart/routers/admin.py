"""
Admin Products Router

Product management for the admin role.
"""
from fastapi import APIRouter, Depends, HTTPException

from electromart.auth import verify_admin
from electromart.errors import ERROR_PRODUCT_NOT_FOUND, ElectroMartError
from electromart.logging import get_logger, sanitize_id_for_logging
from electromart.money import to_float
from electromart.services.database import get_database
from .deps import to_http_exception
from .models import CreateProductRequest, UpdateQuantityRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/products")
async def admin_get_products(admin=Depends(verify_admin)):
    db = get_database()
    try:
        products = await db.list_products()
    except ElectroMartError as e:
        raise to_http_exception(e)
    return {
        "products": [
            {
                "id": p.id,
                "title": p.title,
                "price": to_float(p.price),
                "image": p.image,
                "quantity": p.quantity,
            }
            for p in products
        ]
    }


@router.post("/products")
async def admin_create_product(request: CreateProductRequest, admin=Depends(verify_admin)):
    db = get_database()
    try:
        product = await db.create_product(request.title, request.price, request.image, request.quantity)
    except ElectroMartError as e:
        raise to_http_exception(e)
    return {"message": "Product added successfully", "id": product.id}


@router.delete("/products/{product_id}")
async def admin_delete_product(product_id: str, admin=Depends(verify_admin)):
    db = get_database()
    try:
        deleted = await db.delete_product(product_id)
    except ElectroMartError as e:
        raise to_http_exception(e)
    if not deleted:
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)
    logger.info(f"Admin {sanitize_id_for_logging(admin.id)} deleted product {sanitize_id_for_logging(product_id)}")
    return {"message": "Product deleted successfully"}


@router.patch("/products/{product_id}/quantity")
async def admin_update_quantity(product_id: str, request: UpdateQuantityRequest, admin=Depends(verify_admin)):
    db = get_database()
    try:
        updated = await db.update_product_quantity(product_id, request.quantity)
    except ElectroMartError as e:
        raise to_http_exception(e)
    if not updated:
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)
    return {"message": "Quantity updated successfully"}
