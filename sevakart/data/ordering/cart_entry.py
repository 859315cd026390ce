from sevakart import db
from sevakart.data.core.user_created_base import UserCreatedBase


class CartEntry(UserCreatedBase):
    """
    One persisted cart line for a vendor.

    Holds a frozen snapshot of the product taken when it was first added.
    `key` is "{vendor_id}_{product_id}" so a vendor can hold each product once.
    """
    __tablename__ = 'cart_entries'

    key = db.Column(db.String(120), unique=True, nullable=False)
    vendor_id = db.Column(db.String(32), nullable=False, index=True)
    product_id = db.Column(db.String(64), nullable=False)
    position = db.Column(db.Integer, nullable=False, default=0)
    quantity = db.Column(db.Integer, nullable=False, default=1)

    # Snapshot
    name = db.Column(db.String(200), nullable=False)
    price = db.Column(db.Float, nullable=False, default=0.0)
    unit = db.Column(db.String(20), nullable=True)
    category = db.Column(db.String(100), nullable=True)
    supplier = db.Column(db.String(200), nullable=True)
    supplier_id = db.Column(db.String(32), nullable=True)
    stock = db.Column(db.Integer, nullable=True)
    image = db.Column(db.String(500), nullable=True)

    @staticmethod
    def make_key(vendor_id, product_id):
        return f"{vendor_id}_{product_id}"

    def __repr__(self):
        return f'<CartEntry {self.key}: qty {self.quantity}>'
