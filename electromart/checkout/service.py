"""
Checkout Settlement Service

Drains a cart against live backend stock, one line at a time, in cart order.

Settlement is sequential and non-transactional: when a line fails, lines
settled before it keep their decrement. The result lists those line ids and
the line that failed, so the caller can see exactly what was applied.
"""
import os
import random
from decimal import Decimal
from typing import Iterable, List, Optional

from electromart.cart.models import CartLine, LiveStock
from electromart.cart.service import CartManager
from electromart.errors import (
    ERROR_CART_EMPTY,
    ERROR_CHECKOUT_FAILED,
    CartStorageError,
    ElectroMartError,
    ProductNotFoundError,
)
from electromart.logging import get_logger, sanitize_id_for_logging
from electromart.money import add, percent_of, round_money, to_decimal
from .models import CheckoutForm, CheckoutResult, OrderSummary, SettlementState, StockConflict

logger = get_logger(__name__)

ORDER_ID_PREFIX = "EM-"
DEFAULT_TAX_RATE = "0.08"

# Allowed transitions; committed and aborted are final
_TRANSITIONS = {
    SettlementState.IDLE: {SettlementState.VALIDATING},
    SettlementState.VALIDATING: {SettlementState.IDLE, SettlementState.SETTLING},
    SettlementState.SETTLING: {SettlementState.COMMITTED, SettlementState.ABORTED},
    SettlementState.COMMITTED: set(),
    SettlementState.ABORTED: set(),
}


def generate_order_id() -> str:
    """EM- plus a random 6-digit number. Uniqueness is not checked."""
    return f"{ORDER_ID_PREFIX}{random.randint(100000, 999999)}"


def get_tax_rate() -> Decimal:
    return to_decimal(os.environ.get("ELECTROMART_TAX_RATE", DEFAULT_TAX_RATE))


def build_order_summary(lines: Iterable[CartLine], tax_rate: Decimal) -> OrderSummary:
    """Subtotal, tax and grand total for the lines. Shipping is free."""
    subtotal = round_money(sum((line.line_total for line in lines), Decimal("0")))
    tax = percent_of(subtotal, tax_rate)
    shipping = Decimal("0.00")
    return OrderSummary(
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        total=round_money(add(add(subtotal, tax), shipping)),
    )


class Settlement:
    """Tracks one checkout attempt through its states."""

    def __init__(self) -> None:
        self.state = SettlementState.IDLE
        self.history: List[SettlementState] = [SettlementState.IDLE]

    def advance(self, target: SettlementState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Invalid settlement transition {self.state.value} -> {target.value}")
        self.state = target
        self.history.append(target)


class CheckoutService:
    """
    Runs checkout for one cart.

    `db` is the backend collaborator: it must provide
    `get_product_stock(id)` and `decrement_stock(id, new_quantity)`.
    """

    def __init__(self, db, tax_rate: Optional[Decimal] = None):
        self.db = db
        self.tax_rate = tax_rate if tax_rate is not None else get_tax_rate()

    async def submit_checkout(self, manager: CartManager, form: CheckoutForm) -> CheckoutResult:
        settlement = Settlement()
        settlement.advance(SettlementState.VALIDATING)

        errors = form.validate_fields()
        if manager.item_count() == 0:
            errors["cart"] = ERROR_CART_EMPTY
        if errors:
            settlement.advance(SettlementState.IDLE)
            return CheckoutResult(state=settlement.state, errors=errors)

        settled: List[str] = []

        async with manager.settlement():
            # Lines as stored once the cart is held, not as first seen
            lines = manager.lines
            if not lines:
                settlement.advance(SettlementState.IDLE)
                return CheckoutResult(state=settlement.state, errors={"cart": ERROR_CART_EMPTY})

            summary = build_order_summary(lines, self.tax_rate)
            settlement.advance(SettlementState.SETTLING)
            for line in lines:
                failure = await self._settle_line(line)
                if failure is not None:
                    settlement.advance(SettlementState.ABORTED)
                    failure.settled = settled
                    failure.summary = summary
                    if settled:
                        logger.warning(
                            f"Checkout aborted for {sanitize_id_for_logging(manager.owner_id)} "
                            f"after {len(settled)} settled line(s); decrements are not rolled back"
                        )
                    return failure
                settled.append(line.id)

            settlement.advance(SettlementState.COMMITTED)
            order_id = generate_order_id()
            result = CheckoutResult(
                state=settlement.state,
                order_id=order_id,
                settled=settled,
                summary=summary,
            )
            try:
                await manager.clear_settled()
            except CartStorageError as e:
                logger.error(f"Order {order_id} committed but cart was not cleared: {e}")
                result.message = "Your order was placed, but your cart could not be emptied."

        logger.info(f"Order {order_id} committed ({len(settled)} line(s))")
        return result

    async def _settle_line(self, line: CartLine) -> Optional[CheckoutResult]:
        """Check live stock and decrement one line. Returns an aborted result on failure."""
        try:
            live = LiveStock(await self.db.get_product_stock(line.id))
        except ProductNotFoundError:
            live = LiveStock(0)
        except ElectroMartError as e:
            logger.error(f"Stock read failed for {sanitize_id_for_logging(line.id)}: {e}")
            return CheckoutResult(
                state=SettlementState.ABORTED, failed_line=line.id, message=ERROR_CHECKOUT_FAILED
            )

        if live < line.quantity:
            conflict = StockConflict(
                line=line.id,
                title=line.title,
                requested=line.quantity,
                available=live,
            )
            return CheckoutResult(
                state=SettlementState.ABORTED,
                failed_line=line.id,
                conflict=conflict,
                message=conflict.message,
            )

        try:
            applied = await self.db.decrement_stock(line.id, live - line.quantity)
        except ElectroMartError as e:
            logger.error(f"Stock write failed for {sanitize_id_for_logging(line.id)}: {e}")
            applied = False
        if not applied:
            return CheckoutResult(
                state=SettlementState.ABORTED, failed_line=line.id, message=ERROR_CHECKOUT_FAILED
            )
        return None
