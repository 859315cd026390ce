"""
Order Committer

Creates orders from raw line items, from a cart, from a previous order and
from a low inventory item. Totals and supplier attribution are always
computed here from the line items; callers cannot supply them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from numbers import Number
from typing import Iterable, List, Optional

from sevakart.buisness.catalog.catalog_index import CatalogIndex
from sevakart.buisness.catalog.product_resolver import names_match, resolve_reorder_item
from sevakart.buisness.core.identity import Identity
from sevakart.buisness.core.record_store import RecordStore, get_record_store
from sevakart.buisness.errors import (
    DomainValidationError,
    OrderConflictError,
    ProductNotFoundError,
    RecordConflictError,
)
from sevakart.buisness.ordering.cart_context import CartContext
from sevakart.buisness.ordering.state_machine import OrderStateMachine
from sevakart.data.ordering.order import MULTIPLE_SUPPLIERS, Order, OrderLineItem
from sevakart.utils.logger import get_logger

logger = get_logger("sevakart.buisness.ordering.order_factory")


@dataclass(frozen=True)
class OrderLineDraft:
    """A line item before it is written into an order."""

    name: str
    qty: int
    price: float
    supplier_id: Optional[str] = None

    @property
    def subtotal(self) -> float:
        return self.qty * self.price

    @classmethod
    def from_mapping(cls, data: Mapping) -> OrderLineDraft:
        """Build a draft from request data; accepts `supplierId` or `supplier_id`."""
        supplier_id = data.get('supplierId', data.get('supplier_id'))
        return cls(
            name=data.get('name'),
            qty=data.get('qty', data.get('quantity')),
            price=data.get('price'),
            supplier_id=supplier_id or None,
        )

    @classmethod
    def from_cart_item(cls, item) -> OrderLineDraft:
        return cls(name=item.name, qty=item.quantity, price=item.price, supplier_id=item.supplier_id or None)

    @classmethod
    def from_line_item(cls, line: OrderLineItem) -> OrderLineDraft:
        return cls(name=line.name, qty=line.qty, price=line.price, supplier_id=line.supplier_id or None)


def compute_total(lines: Iterable) -> float:
    """Sum of qty x price."""
    return sum(line.qty * line.price for line in lines)


def attribute_suppliers(lines: Iterable) -> str:
    """
    The single distinct non-empty supplier id across `lines`.

    Returns MULTIPLE_SUPPLIERS when there is more than one, and also when
    no line carries a supplier id at all.
    """
    supplier_ids = {line.supplier_id for line in lines if line.supplier_id}
    if len(supplier_ids) == 1:
        return next(iter(supplier_ids))
    return MULTIPLE_SUPPLIERS


def validate_lines(lines: List[OrderLineDraft]) -> None:
    """
    Reject a line list before anything is written.

    Raises:
        DomainValidationError: If the list is empty or any line is malformed
    """
    if not lines:
        raise DomainValidationError("An order needs at least one line item")

    for number, line in enumerate(lines, start=1):
        if not isinstance(line.name, str) or not line.name.strip():
            raise DomainValidationError(f"Line {number}: name is required")
        if isinstance(line.qty, bool) or not isinstance(line.qty, int) or line.qty < 1:
            raise DomainValidationError(f"Line {number}: quantity must be a whole number of at least 1")
        if isinstance(line.price, bool) or not isinstance(line.price, Number) or line.price < 0:
            raise DomainValidationError(f"Line {number}: price must be a number of at least 0")


class OrderFactory:
    """
    Commits orders on behalf of a vendor.

    Every write here is awaited: a store failure propagates to the caller
    and nothing is reported as placed.
    """

    def __init__(self, identity: Identity | None = None, *, store: RecordStore | None = None,
                 catalog: CatalogIndex | None = None):
        self.identity = identity
        self.store = store or get_record_store()
        self.catalog = catalog or CatalogIndex(self.store)

    def _vendor_id(self, fallback: Optional[str] = None) -> str:
        if self.identity is not None:
            return self.identity.id
        if fallback:
            return fallback
        raise DomainValidationError("A vendor identity is required to place an order")

    def place_order(self, lines: Iterable, status: str = OrderStateMachine.INITIAL_STATE,
                    vendor_id: Optional[str] = None) -> Order:
        """
        Commit a new order.

        Args:
            lines: OrderLineDraft instances or mappings with name/qty/price/supplierId
            status: Initial status (must be a known order status)
            vendor_id: Owning vendor when no identity is attached to the factory

        Returns:
            Order: The committed order with its store-assigned id

        Raises:
            DomainValidationError: If the lines, status or vendor are invalid
            PersistenceError: If the store could not commit the order
        """
        drafts = []
        for number, line in enumerate(lines, start=1):
            if isinstance(line, OrderLineDraft):
                drafts.append(line)
            elif isinstance(line, Mapping):
                drafts.append(OrderLineDraft.from_mapping(line))
            else:
                raise DomainValidationError(f"Line {number}: must be an object")
        validate_lines(drafts)
        if not OrderStateMachine.is_valid_status(status):
            raise DomainValidationError(f"Unknown order status '{status}'")
        vendor = vendor_id or self._vendor_id()

        order = Order(
            vendor_id=vendor,
            total=compute_total(drafts),
            status=status,
            supplier=attribute_suppliers(drafts),
            date=datetime.utcnow(),
        )
        order.items = [
            OrderLineItem(
                line_number=number,
                name=draft.name.strip(),
                qty=draft.qty,
                price=draft.price,
                supplier_id=draft.supplier_id,
            )
            for number, draft in enumerate(drafts, start=1)
        ]

        self.store.create(order)
        logger.info(f"Placed order {order.id} for vendor {vendor}: {len(drafts)} lines, "
                    f"total {order.total}, supplier {order.supplier}")
        return order

    def place_order_from_cart(self, cart: CartContext) -> Order:
        """Checkout: commit the cart as an order, then clear the cart."""
        if cart.is_empty():
            raise DomainValidationError("Cannot check out an empty cart")

        lines = [OrderLineDraft.from_cart_item(item) for item in cart.items]
        order = self.place_order(lines, vendor_id=cart.vendor_id or self._vendor_id())
        cart.clear_cart()
        return order

    def reorder(self, source_order: Order, cart: CartContext | None = None) -> Order:
        """
        Place a copy of a previous order.

        Each line is resolved against the live catalog by name and supplier.
        The vendor's cart is replaced (not merged) with the resolved items and
        a new order is committed from the original lines, keeping their frozen
        prices and quantities.
        """
        vendor = self._vendor_id(fallback=source_order.vendor_id)
        products = self.catalog.list_products()
        items = [resolve_reorder_item(line, products) for line in source_order.items]

        if cart is None:
            cart = CartContext.load(vendor, store=self.store)
        cart.replace(items)

        lines = [OrderLineDraft.from_line_item(line) for line in source_order.items]
        order = self.place_order(lines, vendor_id=vendor)
        logger.info(f"Reordered order {source_order.id} as order {order.id}")
        return order

    def find_open_order_with(self, vendor_id: str, name: str) -> tuple[Order | None, List[OrderLineItem]]:
        """Most recent open order of `vendor_id` holding a line named `name`, with every matching line."""
        orders = [
            order for order in self.store.query_by(Order, 'vendor_id', vendor_id)
            if order.status == OrderStateMachine.ORDERED
        ]
        orders.sort(key=lambda order: (order.date, order.id), reverse=True)
        for order in orders:
            lines = [line for line in order.items if names_match(line.name, name)]
            if lines:
                return order, lines
        return None, []

    def reorder_from_inventory(self, inventory_item, quantity: int) -> Order:
        """
        Reorder stock for an inventory item.

        If an open order already holds the item, every line with that name has
        its quantity set to `quantity` and the order is re-saved under the same
        id. Otherwise a new single-line order is placed for the catalog product
        with the same name.

        Raises:
            DomainValidationError: If quantity is below 1
            ProductNotFoundError: If neither an open order nor a catalog product matches
            OrderConflictError: If the open order changed while it was being updated
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise DomainValidationError("Reorder quantity must be a whole number of at least 1")

        vendor = self._vendor_id(fallback=inventory_item.vendor_id)
        order, lines = self.find_open_order_with(vendor, inventory_item.name)

        if order is not None:
            for line in lines:
                line.qty = quantity
            order.total = compute_total(order.items)
            # Touch the header so the version check always covers the line change
            order.updated_at = datetime.utcnow()
            try:
                self.store.save(order)
            except RecordConflictError as e:
                raise OrderConflictError(f"Order {order.id} was changed while reordering") from e
            logger.info(f"Updated open order {order.id}: {len(lines)} '{inventory_item.name}' line(s) "
                        f"set to qty {quantity}")
            return order

        product = self.catalog.find_by_name(inventory_item.name)
        if product is None:
            logger.warning(f"Reorder for '{inventory_item.name}' failed: no open order and no catalog product")
            raise ProductNotFoundError(f"Product '{inventory_item.name}' not found in catalog")

        logger.info(f"No open order for '{inventory_item.name}', placing new order")
        return self.place_order(
            [OrderLineDraft(name=product.name, qty=quantity, price=product.price, supplier_id=product.supplier_id)],
            vendor_id=vendor,
        )
