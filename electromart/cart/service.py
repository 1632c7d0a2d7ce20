"""Cart manager: owned cart state with write-through persistence."""
import asyncio
import weakref
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import AsyncIterator, List, Optional

from electromart.db import RedisKeys
from electromart.errors import CartLockedError
from electromart.logging import get_logger, sanitize_id_for_logging
from .models import CapturedCeiling, Cart, CartLine
from .reconcile import ReconcileResult, reconcile
from .storage import CartStore, get_cart_store

logger = get_logger(__name__)


class CartManager:
    """
    Holds one owner's cart in memory and mirrors it to a CartStore.

    Rules:
    - Adding a product already in the cart bumps its quantity by one; the
      captured ceiling is only enforced when the quantity is edited.
    - A quantity below 1 removes the line.
    - Every mutation re-reads the stored snapshot, applies the change and
      writes the full snapshot before returning. The new state is written
      first and only then swapped in, so memory never runs ahead of the store.
    - While checkout settlement runs, mutations raise CartLockedError.
      Settlement holds the mutation lock, so a mutation already in flight
      finishes before settlement reads the lines.
    """

    def __init__(self, owner_id: str, store: CartStore):
        self.owner_id = owner_id
        self.store = store
        self.key = RedisKeys.cart_key(owner_id)
        self._cart = Cart()
        self._mutation_lock = asyncio.Lock()
        self._settling = False

    async def load(self) -> Cart:
        """Replace in-memory state with the stored snapshot."""
        self._cart = await self.store.load(self.key)
        return self._cart

    @property
    def lines(self) -> List[CartLine]:
        """Snapshot of the current lines, in cart order."""
        return list(self._cart.lines)

    @property
    def is_settling(self) -> bool:
        return self._settling

    def item_count(self) -> int:
        return self._cart.item_count

    def total(self) -> Decimal:
        return self._cart.total

    def _ensure_unlocked(self) -> None:
        if self._settling:
            raise CartLockedError()

    async def _commit(self, lines: List[CartLine]) -> None:
        new_cart = Cart(lines=lines)
        await self.store.save(self.key, new_cart)
        self._cart = new_cart

    async def add_line(self, product, captured_max_quantity: CapturedCeiling) -> CartLine:
        """Add one unit of a product, capturing its stock ceiling on first add."""
        self._ensure_unlocked()
        async with self._mutation_lock:
            await self.load()
            lines = [CartLine(**vars(line)) for line in self._cart.lines]
            existing = next((line for line in lines if line.id == product.id), None)
            if existing:
                existing.quantity += 1
                added = existing
            else:
                added = CartLine(
                    id=product.id,
                    title=product.title,
                    price=product.price,
                    image=product.image or "",
                    quantity=1,
                    max_quantity=captured_max_quantity,
                )
                lines.append(added)
            await self._commit(lines)
        logger.debug(
            f"Cart {sanitize_id_for_logging(self.owner_id)}: "
            f"{sanitize_id_for_logging(product.id)} -> {added.quantity}"
        )
        return added

    async def remove_line(self, product_id: str) -> None:
        """Remove a line. Removing an absent id still rewrites the snapshot."""
        self._ensure_unlocked()
        async with self._mutation_lock:
            await self.load()
            await self._commit([line for line in self._cart.lines if line.id != product_id])

    async def set_quantity(self, product_id: str, requested: int) -> Optional[ReconcileResult]:
        """
        Set a line's quantity, clamped to its captured ceiling.

        Returns the reconciliation result, or None when the line was removed
        (requested < 1) or is not in the cart.
        """
        if requested < 1:
            await self.remove_line(product_id)
            return None

        self._ensure_unlocked()
        async with self._mutation_lock:
            await self.load()
            current = self._cart.find(product_id)
            if current is None:
                return None
            result = reconcile(requested, current.max_quantity)
            lines = [
                CartLine(**{**vars(line), "quantity": result.effective}) if line.id == product_id
                else line
                for line in self._cart.lines
            ]
            await self._commit(lines)
        return result

    async def clear(self) -> None:
        self._ensure_unlocked()
        async with self._mutation_lock:
            await self._commit([])

    @asynccontextmanager
    async def settlement(self) -> AsyncIterator["CartManager"]:
        """
        Hold the cart against mutation while checkout settles it.

        New mutations are rejected as soon as this is entered; one already
        holding the mutation lock is waited for, and the stored snapshot is
        re-read before the body runs.
        """
        self._ensure_unlocked()
        self._settling = True
        try:
            async with self._mutation_lock:
                await self.load()
                yield self
        finally:
            self._settling = False

    async def clear_settled(self) -> None:
        """Empty the cart from inside settlement(), after a committed checkout."""
        if not self._settling or not self._mutation_lock.locked():
            raise RuntimeError("clear_settled() must be called inside settlement()")
        await self._commit([])


# Managers stay registered only while a request holds them. The next request
# gets a fresh manager that starts from the stored snapshot.
_cart_managers: "weakref.WeakValueDictionary[str, CartManager]" = weakref.WeakValueDictionary()


async def get_cart_manager(owner_id: str, store: Optional[CartStore] = None) -> CartManager:
    """
    Get the cart manager for an owner with its stored snapshot loaded.

    Concurrent requests for one owner share the same manager and therefore
    the same settlement lock. The snapshot is re-read on every call, so
    writes made by other processes are visible.
    """
    manager = _cart_managers.get(owner_id)
    if manager is None:
        manager = _cart_managers.setdefault(owner_id, CartManager(owner_id, store or get_cart_store()))
    await manager.load()
    return manager


def reset_cart_managers() -> None:
    """Drop all registered managers (process shutdown, tests)."""
    _cart_managers.clear()
