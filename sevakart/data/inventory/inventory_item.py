from sevakart import db
from sevakart.data.core.user_created_base import UserCreatedBase


class InventoryItem(UserCreatedBase):
    """
    A vendor's own stock bookkeeping entry.

    Correlated with catalog products by name only. `status` is derived from
    `current_stock` by the inventory monitor and stored for listing.
    """
    __tablename__ = 'inventory_items'

    vendor_id = db.Column(db.String(32), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    current_stock = db.Column(db.Integer, nullable=False, default=0)
    unit = db.Column(db.String(20), nullable=False, default='kg')
    status = db.Column(db.String(20), nullable=False, default='critical')  # good/low/critical

    def __repr__(self):
        return f'<InventoryItem {self.id}: {self.name} {self.current_stock}{self.unit} ({self.status})>'
