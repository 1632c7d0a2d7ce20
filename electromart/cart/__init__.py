"""Cart package: models, reconciliation, storage, and manager."""
from .models import CapturedCeiling, Cart, CartLine, LiveStock
from .reconcile import ReconcileResult, clamp_notice, reconcile
from .service import CartManager, get_cart_manager, reset_cart_managers
from .storage import CartStore, FileCartStore, RedisCartStore, get_cart_store

__all__ = [
    "CapturedCeiling",
    "LiveStock",
    "Cart",
    "CartLine",
    "ReconcileResult",
    "reconcile",
    "clamp_notice",
    "CartManager",
    "get_cart_manager",
    "reset_cart_managers",
    "CartStore",
    "FileCartStore",
    "RedisCartStore",
    "get_cart_store",
]
