"""
Catalog Index

Search and category filtering are pure functions over a product list.
CatalogView owns the "currently displayed" list for whoever renders it.
"""

from __future__ import annotations

from typing import List, Optional

from sevakart.buisness.catalog.category_registry import ALL_CATEGORIES, CategoryRegistry
from sevakart.buisness.catalog.product_resolver import resolve_product
from sevakart.buisness.core.record_store import RecordStore, get_record_store
from sevakart.data.catalog.product import Product


def search(products: List[Product], query: Optional[str]) -> List[Product]:
    """
    Products whose name, category or supplier label contains `query`
    (case-insensitive). A blank query returns every product.
    """
    needle = (query or '').strip().lower()
    if not needle:
        return list(products)
    return [
        p for p in products
        if needle in (p.name or '').lower()
        or needle in (p.category or '').lower()
        or needle in (p.supplier or '').lower()
    ]


def filter_by_category(products: List[Product], category: Optional[str]) -> List[Product]:
    """Products in `category`; "all" or blank returns every product."""
    if not category or category == ALL_CATEGORIES:
        return list(products)
    return [p for p in products if p.category == category]


class CatalogView:
    """
    The product list a screen is currently showing.

    search() and filter_by_category() each replace the visible list; they do
    not compose (last call wins).
    """

    def __init__(self, products: List[Product]):
        self.products = list(products)
        self.visible = list(products)

    def search(self, query: Optional[str]) -> List[Product]:
        self.visible = search(self.products, query)
        return self.visible

    def filter_by_category(self, category: Optional[str]) -> List[Product]:
        self.visible = filter_by_category(self.products, category)
        return self.visible

    def reset(self) -> List[Product]:
        self.visible = list(self.products)
        return self.visible


class CatalogIndex:
    """Read view over the product catalog."""

    def __init__(self, store: RecordStore | None = None):
        self.store = store or get_record_store()

    def list_products(self) -> List[Product]:
        return self.store.all(Product)

    def products_for_supplier(self, supplier_id: str) -> List[Product]:
        return self.store.query_by(Product, 'supplier_id', supplier_id)

    def get_product(self, product_id) -> Optional[Product]:
        try:
            return self.store.get(Product, int(product_id))
        except (TypeError, ValueError):
            # Synthetic reorder ids never exist in the catalog
            return None

    def find_by_name(self, name: str, supplier_id: Optional[str] = None) -> Optional[Product]:
        return resolve_product(self.list_products(), name, supplier_id)

    def view(self) -> CatalogView:
        return CatalogView(self.list_products())

    def categories(self) -> List[str]:
        return CategoryRegistry(self.store).vocabulary()
