"""
Checkout Router

Runs settlement for the signed-in user's cart. Form errors, stock conflicts
and backend failures all come back as a 200 result with a `state`; only a
cart that is already settling is rejected (409).
"""
from fastapi import APIRouter, Depends

from electromart.auth import verify_session
from electromart.cart import get_cart_manager
from electromart.checkout import CheckoutForm, CheckoutService
from electromart.errors import ElectroMartError
from electromart.logging import get_logger, sanitize_id_for_logging
from electromart.services.database import get_database
from .deps import to_http_exception

logger = get_logger(__name__)

router = APIRouter(tags=["checkout"])


@router.post("/api/checkout")
async def submit_checkout(form: CheckoutForm, user=Depends(verify_session)):
    manager = await get_cart_manager(user.id)
    service = CheckoutService(get_database())
    try:
        result = await service.submit_checkout(manager, form)
    except ElectroMartError as e:
        raise to_http_exception(e)

    logger.info(f"Checkout for {sanitize_id_for_logging(user.id)}: {result.state.value}")
    return result.to_dict()
