"""Checkout package: form validation and stock settlement."""
from .models import CheckoutForm, CheckoutResult, OrderSummary, SettlementState, StockConflict
from .service import CheckoutService, Settlement, build_order_summary, generate_order_id

__all__ = [
    "CheckoutForm",
    "CheckoutResult",
    "OrderSummary",
    "SettlementState",
    "StockConflict",
    "CheckoutService",
    "Settlement",
    "build_order_summary",
    "generate_order_id",
]
