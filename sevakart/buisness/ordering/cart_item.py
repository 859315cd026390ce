from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional

from sevakart.data.ordering.cart_entry import CartEntry


@dataclass
class CartItem:
    """A cart line: product id, quantity and a snapshot of the product."""

    product_id: str
    name: str
    price: float
    quantity: int = 1
    unit: Optional[str] = None
    category: Optional[str] = None
    supplier: Optional[str] = None
    supplier_id: Optional[str] = None
    stock: Optional[int] = None
    image: Optional[str] = None

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity

    @classmethod
    def from_product(cls, product, quantity: int = 1) -> CartItem:
        return cls(
            product_id=str(product.id),
            name=product.name,
            price=product.price,
            quantity=quantity,
            unit=product.unit,
            category=product.category,
            supplier=product.supplier,
            supplier_id=product.supplier_id,
            stock=product.stock,
            image=product.image,
        )

    @classmethod
    def from_entry(cls, entry: CartEntry) -> CartItem:
        return cls(
            product_id=entry.product_id,
            name=entry.name,
            price=entry.price,
            quantity=entry.quantity,
            unit=entry.unit,
            category=entry.category,
            supplier=entry.supplier,
            supplier_id=entry.supplier_id,
            stock=entry.stock,
            image=entry.image,
        )

    def to_entry(self, vendor_id: str, position: int) -> CartEntry:
        return CartEntry(
            key=CartEntry.make_key(vendor_id, self.product_id),
            vendor_id=vendor_id,
            position=position,
            **asdict(self),
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data['subtotal'] = self.subtotal
        return data
