"""
Inventory Monitor

Classifies a vendor's stock, values it against the live catalog and triggers
reorders for items that run low. Inventory is vendor bookkeeping only; order
placement never changes it.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from sevakart.buisness.catalog.product_resolver import resolve_product
from sevakart.buisness.core.identity import Identity
from sevakart.buisness.core.record_store import RecordStore, get_record_store
from sevakart.buisness.errors import DomainValidationError, RecordNotFoundError
from sevakart.buisness.ordering.order_factory import OrderFactory
from sevakart.data.catalog.product import UNITS, Product
from sevakart.data.inventory.inventory_item import InventoryItem
from sevakart.utils.logger import get_logger

logger = get_logger("sevakart.buisness.inventory.inventory_monitor")

STATUS_GOOD = 'good'
STATUS_LOW = 'low'
STATUS_CRITICAL = 'critical'

CRITICAL_MAX = 2
LOW_MAX = 5

# Unit price used to value items with no matching catalog product
FALLBACK_UNIT_PRICE = 50

DEFAULT_REORDER_QUANTITY = 5


def classify(stock: int) -> str:
    """critical at 2 or less, low at 3 to 5, good above 5."""
    if isinstance(stock, bool) or not isinstance(stock, int):
        raise DomainValidationError("Stock must be a whole number")
    if stock < 0:
        raise DomainValidationError("Stock cannot be negative")
    if stock <= CRITICAL_MAX:
        return STATUS_CRITICAL
    if stock <= LOW_MAX:
        return STATUS_LOW
    return STATUS_GOOD


def needs_reorder(item) -> bool:
    return classify(item.current_stock) != STATUS_GOOD


def total_value(items: Iterable, products: Iterable[Product]) -> float:
    """
    Sum of current_stock x unit price.

    Unit price comes from the catalog product with the same name
    (case-insensitive), falling back to FALLBACK_UNIT_PRICE.
    """
    products = list(products)
    value = 0.0
    for item in items:
        product = resolve_product(products, item.name)
        price = product.price if product is not None else FALLBACK_UNIT_PRICE
        value += item.current_stock * price
    return value


class InventoryMonitor:
    """Vendor-scoped inventory bookkeeping and reorder trigger."""

    def __init__(self, vendor_id: str, *, identity: Identity | None = None, store: RecordStore | None = None):
        if not vendor_id:
            raise DomainValidationError("A vendor is required to manage inventory")
        self.vendor_id = vendor_id
        self.identity = identity
        self.store = store or get_record_store()

    @classmethod
    def for_identity(cls, identity: Identity, *, store: RecordStore | None = None) -> InventoryMonitor:
        if identity is None or not identity.is_vendor:
            raise DomainValidationError("Only vendors keep inventory")
        return cls(identity.id, identity=identity, store=store)

    # ========== Reads ==========

    def items(self) -> List[InventoryItem]:
        return self.store.query_by(InventoryItem, 'vendor_id', self.vendor_id)

    def get_item(self, item_id: int) -> InventoryItem:
        item = self.store.get(InventoryItem, item_id)
        if item is None or item.vendor_id != self.vendor_id:
            raise RecordNotFoundError(f"Inventory item {item_id} not found")
        return item

    def low_stock_items(self) -> List[InventoryItem]:
        return [item for item in self.items() if classify(item.current_stock) == STATUS_LOW]

    def critical_stock_items(self) -> List[InventoryItem]:
        return [item for item in self.items() if classify(item.current_stock) == STATUS_CRITICAL]

    def items_needing_reorder(self) -> List[InventoryItem]:
        return [item for item in self.items() if needs_reorder(item)]

    def total_value(self) -> float:
        return total_value(self.items(), self.store.all(Product))

    def summary(self) -> Dict[str, Any]:
        items = self.items()
        statuses = [classify(item.current_stock) for item in items]
        return {
            'total_items': len(items),
            'good': statuses.count(STATUS_GOOD),
            'low': statuses.count(STATUS_LOW),
            'critical': statuses.count(STATUS_CRITICAL),
            'total_value': total_value(items, self.store.all(Product)),
        }

    # ========== Writes ==========

    @staticmethod
    def _validate(fields: Dict[str, Any]) -> None:
        if 'name' in fields:
            name = fields['name']
            if not isinstance(name, str) or not name.strip():
                raise DomainValidationError("Item name is required")
        if 'unit' in fields and fields['unit'] not in UNITS:
            raise DomainValidationError(f"Unit must be one of: {', '.join(UNITS)}")
        if 'current_stock' in fields:
            classify(fields['current_stock'])

    def add_item(self, *, name: str, current_stock: int, unit: str = 'kg') -> InventoryItem:
        self._validate({'name': name, 'current_stock': current_stock, 'unit': unit})
        item = InventoryItem(
            vendor_id=self.vendor_id,
            name=name.strip(),
            current_stock=current_stock,
            unit=unit,
            status=classify(current_stock),
        )
        self.store.create(item)
        logger.info(f"Vendor {self.vendor_id} added inventory item {item.id} '{item.name}' ({item.status})")
        return item

    def update_item(self, item_id: int, fields: Dict[str, Any]) -> InventoryItem:
        """Update name, unit or stock; status is always recomputed from stock."""
        item = self.get_item(item_id)
        updates = {key: fields[key] for key in ('name', 'current_stock', 'unit') if key in fields}
        self._validate(updates)
        if 'name' in updates:
            updates['name'] = updates['name'].strip()
        updates['status'] = classify(updates.get('current_stock', item.current_stock))

        item = self.store.update(InventoryItem, item.id, updates)
        logger.debug(f"Inventory item {item.id} updated: stock {item.current_stock}, status {item.status}")
        return item

    def delete_item(self, item_id: int) -> None:
        item = self.get_item(item_id)
        self.store.delete(InventoryItem, item.id)
        logger.info(f"Vendor {self.vendor_id} deleted inventory item {item_id}")

    def reorder(self, item_id: int, quantity: Optional[int] = None):
        """
        Reorder stock for one inventory item.

        Returns:
            Order: The updated open order or the newly placed order

        Raises:
            ProductNotFoundError: If no open order or catalog product matches the item
        """
        item = self.get_item(item_id)
        if quantity is None:
            quantity = DEFAULT_REORDER_QUANTITY
        factory = OrderFactory(self.identity, store=self.store)
        order = factory.reorder_from_inventory(item, quantity)
        logger.info(f"Reorder for inventory item {item.id} '{item.name}' -> order {order.id}")
        return order
