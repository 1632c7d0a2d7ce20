"""
Stock reconciliation for cart quantity edits.

The ceiling is the stock captured when the product was added to the cart. It
is never refreshed here, so it can lag behind the backend: a customer may
keep a quantity that is no longer available and only learn about it at
checkout, where live stock is checked again.
"""
from typing import NamedTuple

from .models import CapturedCeiling


class ReconcileResult(NamedTuple):
    effective: int
    was_clamped: bool


def reconcile(requested: int, max_quantity: CapturedCeiling) -> ReconcileResult:
    """Clamp a requested quantity to the captured ceiling."""
    if requested > max_quantity:
        return ReconcileResult(effective=int(max_quantity), was_clamped=True)
    return ReconcileResult(effective=requested, was_clamped=False)


def clamp_notice(max_quantity: CapturedCeiling) -> str:
    """User-facing notice shown when a quantity edit was clamped."""
    return f"Sorry, only {max_quantity} units available in stock."
