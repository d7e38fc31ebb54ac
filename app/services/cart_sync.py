# app/services/cart_sync.py
"""
Cart synchronizer.

Keeps an ordered in-memory list of cart lines for one user consistent with
the remote `cart_items` table:

  - load() replaces local state wholesale with what the store holds.
  - add_item / update_quantity / remove_item / clear mutate local state
    first (optimistic), then write through to the store.
  - If a write fails, the local mutation is reverted and WriteError is
    raised, so local state never drifts from the store.

Totals are derived on every read: total_price asks the catalog for the
live price of each product, nothing is cached.
"""
import logging
import uuid
from typing import Protocol

from app.core.errors import FetchError, WriteError
from app.models.cart import CartLine

logger = logging.getLogger(__name__)


class CartStore(Protocol):
    def list_lines(self, user_id: uuid.UUID) -> list[CartLine]: ...

    def upsert(self, user_id: uuid.UUID, product_id: uuid.UUID, quantity: int) -> None: ...

    def delete(self, user_id: uuid.UUID, product_id: uuid.UUID) -> None: ...

    def delete_all(self, user_id: uuid.UUID) -> None: ...


class ProductCatalog(Protocol):
    def get_product(self, product_id: uuid.UUID): ...

    def price_of(self, product_id: uuid.UUID) -> float | None: ...


class CartSynchronizer:
    def __init__(self, user_id: uuid.UUID, store: CartStore, catalog: ProductCatalog):
        self.user_id = user_id
        self.store = store
        self.catalog = catalog
        self._lines: list[CartLine] = []

    # ---- reads ----

    @property
    def lines(self) -> list[CartLine]:
        """Copy of the current lines, in insertion order."""
        return [CartLine(line.product_id, line.quantity) for line in self._lines]

    def get_line(self, product_id: uuid.UUID) -> CartLine | None:
        for line in self._lines:
            if line.product_id == product_id:
                return line
        return None

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self._lines)

    @property
    def total_price(self) -> float:
        total = 0.0
        for line in self._lines:
            price = self.catalog.price_of(line.product_id)
            if price is None:
                continue
            total += line.quantity * price
        return round(total, 2)

    # ---- operations ----

    def load(self) -> list[CartLine]:
        """
        Replace local state with the store's rows for this user.

        Lines whose product no longer exists in the catalog are dropped.

        Raises:
            FetchError: the store could not be read. Local state is left
            empty, never stale.
        """
        self._lines = []
        try:
            remote = self.store.list_lines(self.user_id)
        except FetchError:
            logger.warning("Cart load failed for user %s", self.user_id)
            raise

        merged: list[CartLine] = []
        for line in remote:
            if line.quantity <= 0 or self.catalog.price_of(line.product_id) is None:
                continue
            existing = next((m for m in merged if m.product_id == line.product_id), None)
            if existing:
                existing.quantity += line.quantity
            else:
                merged.append(CartLine(line.product_id, line.quantity))
        self._lines = merged
        return self.lines

    def add_item(self, product_id: uuid.UUID, quantity: int = 1) -> CartLine:
        """
        Add `quantity` units of a product.

        An existing line is incremented; otherwise a new line is appended.
        """
        if quantity <= 0:
            raise ValueError("quantity must be >= 1")

        snapshot = self.lines
        line = self.get_line(product_id)
        if line:
            line.quantity += quantity
        else:
            line = CartLine(product_id, quantity)
            self._lines.append(line)

        self._write(snapshot, self.store.upsert, self.user_id, product_id, line.quantity)
        return CartLine(line.product_id, line.quantity)

    def update_quantity(self, product_id: uuid.UUID, new_quantity: int) -> CartLine | None:
        """
        Set a line's quantity. Zero or less removes the line.

        Returns the updated line, or None when the line is gone.

        Raises:
            KeyError: the product is not in the cart.
        """
        if new_quantity <= 0:
            self.remove_item(product_id)
            return None

        line = self.get_line(product_id)
        if line is None:
            raise KeyError(product_id)

        snapshot = self.lines
        line.quantity = new_quantity
        self._write(snapshot, self.store.upsert, self.user_id, product_id, new_quantity)
        return CartLine(line.product_id, line.quantity)

    def remove_item(self, product_id: uuid.UUID) -> None:
        snapshot = self.lines
        self._lines = [line for line in self._lines if line.product_id != product_id]
        self._write(snapshot, self.store.delete, self.user_id, product_id)

    def clear(self) -> None:
        snapshot = self.lines
        self._lines = []
        self._write(snapshot, self.store.delete_all, self.user_id)

    # ---- internal helpers ----

    def _write(self, snapshot: list[CartLine], op, *args) -> None:
        try:
            op(*args)
        except WriteError:
            logger.warning(
                "Cart write %s failed for user %s, reverting local change",
                getattr(op, "__name__", op),
                self.user_id,
            )
            self._lines = snapshot
            raise
