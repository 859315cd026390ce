from sevakart import db
from sevakart.data.core.user_created_base import UserCreatedBase


UNITS = ('kg', 'L', 'piece', 'packet')


class Product(UserCreatedBase):
    """
    A sellable catalog entry owned by one supplier.

    Data model only: validation (unique name per supplier, price/stock bounds)
    belongs in `sevakart/buisness/catalog/product_manager.py`.
    """
    __tablename__ = 'products'

    name = db.Column(db.String(200), nullable=False)
    price = db.Column(db.Float, nullable=False, default=0.0)
    unit = db.Column(db.String(20), nullable=False, default='kg')
    category = db.Column(db.String(100), nullable=False)

    # Supplier display label and owning supplier account id
    supplier = db.Column(db.String(200), nullable=False, default='')
    supplier_id = db.Column(db.String(32), nullable=False, index=True)

    stock = db.Column(db.Integer, nullable=False, default=0)
    image = db.Column(db.String(500), nullable=True)

    def __repr__(self):
        return f'<Product {self.id}: {self.name} ({self.supplier_id})>'
