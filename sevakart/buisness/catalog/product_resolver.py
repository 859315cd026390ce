"""
Name-based correlation between catalog products and records that only carry
a product name (order line items, inventory items).

Orders and inventory do not hold product foreign keys; they are matched to
the live catalog here, case-insensitively on the trimmed name.
"""

from __future__ import annotations

from typing import Iterable, Optional
from uuid import uuid4

from sevakart.buisness.ordering.cart_item import CartItem

# Defaults used when a historical line no longer matches a catalog product
REORDER_FALLBACK_UNIT = 'unit'
REORDER_FALLBACK_CATEGORY = 'Reordered'
REORDER_FALLBACK_SUPPLIER = 'Previous Supplier'
REORDER_FALLBACK_STOCK = 100


def normalize_name(name: Optional[str]) -> str:
    return (name or '').strip().lower()


def names_match(left: Optional[str], right: Optional[str]) -> bool:
    return normalize_name(left) == normalize_name(right)


def resolve_product(products: Iterable, name: str, supplier_id: Optional[str] = None):
    """
    First product whose name matches `name`.

    When `supplier_id` is given only that supplier's products are considered.
    Empty and missing supplier ids are treated as the same value.
    """
    for product in products:
        if not names_match(product.name, name):
            continue
        if supplier_id is not None and (product.supplier_id or '') != (supplier_id or ''):
            continue
        return product
    return None


def synthetic_product_id() -> str:
    return f"reorder-{uuid4().hex[:12]}"


def resolve_reorder_item(line, products: Iterable) -> CartItem:
    """
    Turn a historical order line into a cart item against the live catalog.

    The line's frozen name, price and quantity are kept. Descriptive fields
    come from the matching product (same name and supplier) or, when nothing
    matches, from the reorder fallback defaults.
    """
    product = resolve_product(products, line.name, line.supplier_id or '')
    if product is not None:
        return CartItem(
            product_id=str(product.id),
            name=line.name,
            price=line.price,
            quantity=line.qty,
            unit=product.unit,
            category=product.category,
            supplier=product.supplier,
            supplier_id=line.supplier_id or '',
            stock=product.stock,
            image=product.image,
        )

    return CartItem(
        product_id=synthetic_product_id(),
        name=line.name,
        price=line.price,
        quantity=line.qty,
        unit=REORDER_FALLBACK_UNIT,
        category=REORDER_FALLBACK_CATEGORY,
        supplier=REORDER_FALLBACK_SUPPLIER,
        supplier_id=line.supplier_id or '',
        stock=REORDER_FALLBACK_STOCK,
        image=None,
    )
