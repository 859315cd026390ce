"""
Cart Aggregator

One vendor's cart: a product-id keyed list of CartItems with a derived total.

Every mutation changes the in-memory items first and then writes the whole
cart to the store. Cart writes are best-effort: a failed write is logged and
the in-memory cart stays authoritative for the rest of the request.
"""

from __future__ import annotations

import dataclasses
from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from sevakart.buisness.core.record_store import RecordStore, get_record_store
from sevakart.buisness.errors import DomainValidationError, PersistenceError
from sevakart.buisness.ordering.cart_item import CartItem
from sevakart.data.ordering.cart_entry import CartEntry
from sevakart.utils.logger import get_logger

logger = get_logger("sevakart.buisness.ordering.cart_context")


class CartContext:
    """
    Cart for a single vendor.

    Use `CartContext.load(vendor_id)` to restore a persisted cart. A context
    without a vendor id works in memory only and never writes.
    """

    def __init__(self, vendor_id: Optional[str] = None, items: Iterable[CartItem] = (),
                 store: RecordStore | None = None):
        self.vendor_id = vendor_id
        self._items: List[CartItem] = list(items)
        self._store = store

    @property
    def store(self) -> RecordStore:
        if self._store is None:
            self._store = get_record_store()
        return self._store

    @classmethod
    def load(cls, vendor_id: Optional[str], store: RecordStore | None = None) -> CartContext:
        """
        Restore the persisted cart for `vendor_id`.

        No vendor id gives an empty cart. A failed read is logged and also
        gives an empty cart.
        """
        context = cls(vendor_id=vendor_id, store=store)
        if not vendor_id:
            return context

        try:
            entries = context.store.query_by(CartEntry, 'vendor_id', vendor_id)
        except SQLAlchemyError as e:
            context.store.session.rollback()
            logger.error(f"Could not load cart for vendor {vendor_id}: {e}")
            return context

        entries.sort(key=lambda entry: (entry.position, entry.id))
        context._items = [CartItem.from_entry(entry) for entry in entries]
        logger.debug(f"Loaded cart for vendor {vendor_id} with {len(context._items)} items")
        return context

    # ========== Reads ==========

    @property
    def items(self) -> List[CartItem]:
        return list(self._items)

    @property
    def total(self) -> float:
        """Sum of price x quantity over the cart; never stored."""
        return sum(item.subtotal for item in self._items)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self._items)

    def is_empty(self) -> bool:
        return not self._items

    def find(self, product_id) -> Optional[CartItem]:
        product_id = str(product_id)
        for item in self._items:
            if item.product_id == product_id:
                return item
        return None

    # ========== Mutations ==========

    def add_to_cart(self, product, quantity: int = 1) -> CartItem:
        """
        Add `quantity` of a product.

        An item already in the cart has its quantity increased; otherwise a
        snapshot of the product is appended. Stock is not checked.
        """
        if quantity is None or quantity < 1:
            raise DomainValidationError("Quantity must be at least 1")

        item = self.find(product.id)
        if item is not None:
            item.quantity += quantity
        else:
            item = CartItem.from_product(product, quantity)
            self._items.append(item)

        self._persist()
        return item

    def remove_from_cart(self, product_id) -> None:
        product_id = str(product_id)
        self._items = [item for item in self._items if item.product_id != product_id]
        self._persist()

    def update_quantity(self, product_id, quantity: int) -> None:
        """Set an item's quantity; zero or less removes it. Unknown ids are ignored."""
        if quantity <= 0:
            self.remove_from_cart(product_id)
            return

        item = self.find(product_id)
        if item is None:
            return
        item.quantity = quantity
        self._persist()

    def clear_cart(self) -> None:
        self._items = []
        self._persist()

    def replace(self, items: Iterable[CartItem]) -> None:
        """
        Replace the whole cart (used by reorder). The previous contents are
        dropped, not merged; items in `items` sharing a product id are
        combined into one with the summed quantity.
        """
        merged = {}
        for item in items:
            existing = merged.get(str(item.product_id))
            if existing is None:
                merged[str(item.product_id)] = dataclasses.replace(item)
            else:
                existing.quantity += item.quantity
        self._items = list(merged.values())
        self._persist()

    def _persist(self) -> None:
        if not self.vendor_id:
            return

        entries = [item.to_entry(self.vendor_id, position) for position, item in enumerate(self._items)]
        try:
            self.store.replace_where(CartEntry, 'vendor_id', self.vendor_id, entries)
        except PersistenceError as e:
            logger.error(f"Cart write for vendor {self.vendor_id} failed, keeping local cart: {e}")

    def to_dict(self) -> dict:
        return {
            'vendor_id': self.vendor_id,
            'items': [item.to_dict() for item in self._items],
            'total': self.total,
            'item_count': self.item_count,
        }
