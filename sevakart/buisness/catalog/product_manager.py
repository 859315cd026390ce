"""
Product management for suppliers.

All validation happens before any write. Deleting a product never touches
order history; order lines hold frozen copies, not product references.
"""

from __future__ import annotations

from numbers import Number
from typing import Any, Dict, Optional

from sevakart.buisness.catalog.category_registry import (
    CategoryChoice,
    CategoryRegistry,
    ExistingCategory,
    NewCategory,
    parse_category_choice,
)
from sevakart.buisness.catalog.product_resolver import names_match
from sevakart.buisness.core.identity import Identity
from sevakart.buisness.core.record_store import RecordStore, get_record_store
from sevakart.buisness.errors import DomainValidationError, ProductNotFoundError
from sevakart.data.catalog.product import UNITS, Product
from sevakart.utils.logger import get_logger

logger = get_logger("sevakart.buisness.catalog.product_manager")

EDITABLE_FIELDS = ('name', 'price', 'unit', 'stock', 'image')


class ProductManager:
    """Add, update and delete the products of one supplier."""

    def __init__(self, identity: Identity, *, store: RecordStore | None = None):
        if identity is None or not identity.is_supplier:
            raise DomainValidationError("Only suppliers can manage products")
        self.identity = identity
        self.store = store or get_record_store()
        self.categories = CategoryRegistry(self.store)

    def own_products(self):
        return self.store.query_by(Product, 'supplier_id', self.identity.id)

    def get_own_product(self, product_id: int) -> Product:
        product = self.store.get(Product, product_id)
        if product is None or product.supplier_id != self.identity.id:
            raise ProductNotFoundError(f"Product {product_id} not found")
        return product

    # ========== Validation ==========

    @staticmethod
    def _validate_fields(fields: Dict[str, Any]) -> None:
        if 'name' in fields:
            name = fields['name']
            if not isinstance(name, str) or not name.strip():
                raise DomainValidationError("Product name is required")
        if 'price' in fields:
            price = fields['price']
            if isinstance(price, bool) or not isinstance(price, Number) or price <= 0:
                raise DomainValidationError("Price must be greater than 0")
        if 'stock' in fields:
            stock = fields['stock']
            if isinstance(stock, bool) or not isinstance(stock, int) or stock < 0:
                raise DomainValidationError("Stock must be a whole number of at least 0")
        if 'unit' in fields and fields['unit'] not in UNITS:
            raise DomainValidationError(f"Unit must be one of: {', '.join(UNITS)}")

    def _check_unique_name(self, name: str, exclude_id: Optional[int] = None) -> None:
        for product in self.own_products():
            if product.id != exclude_id and names_match(product.name, name):
                raise DomainValidationError(f"You already sell a product named '{product.name}'")

    @staticmethod
    def _choice(category) -> CategoryChoice:
        if isinstance(category, (ExistingCategory, NewCategory)):
            return category
        if isinstance(category, dict):
            return parse_category_choice(category.get('value'), category.get('new_name'))
        return parse_category_choice(category)

    # ========== Writes ==========

    def add_product(self, *, name: str, price, unit: str, category, stock=0,
                    image: Optional[str] = None) -> Product:
        """
        Add a product to this supplier's catalog.

        Args:
            category: A CategoryChoice, a category name, or form data
                ({'value': ..., 'new_name': ...})

        Raises:
            DomainValidationError: If any field is invalid or the name is taken
        """
        self._validate_fields({'name': name, 'price': price, 'unit': unit, 'stock': stock})
        self._check_unique_name(name)
        choice = self._choice(category)
        category_name = self.categories.resolve(choice)

        product = Product(
            name=name.strip(),
            price=price,
            unit=unit,
            category=category_name,
            supplier=self.identity.label,
            supplier_id=self.identity.id,
            stock=stock,
            image=image or None,
        )
        self.store.create(product)
        logger.info(f"Supplier {self.identity.id} added product {product.id} '{product.name}'")
        return product

    def update_product(self, product_id: int, fields: Dict[str, Any]) -> Product:
        """Update editable fields (and optionally the category) of an own product."""
        product = self.get_own_product(product_id)

        updates = {key: fields[key] for key in EDITABLE_FIELDS if key in fields}
        self._validate_fields(updates)
        if 'name' in updates:
            self._check_unique_name(updates['name'], exclude_id=product.id)
            updates['name'] = updates['name'].strip()
        if 'category' in fields:
            updates['category'] = self.categories.resolve(self._choice(fields['category']))

        if not updates:
            return product

        product = self.store.update(Product, product.id, updates)
        logger.info(f"Supplier {self.identity.id} updated product {product.id}: {sorted(updates)}")
        return product

    def delete_product(self, product_id: int) -> None:
        product = self.get_own_product(product_id)
        self.store.delete(Product, product.id)
        logger.info(f"Supplier {self.identity.id} deleted product {product_id}")
