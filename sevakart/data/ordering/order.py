from sevakart import db
from sevakart.data.core.user_created_base import UserCreatedBase
from datetime import datetime


MULTIPLE_SUPPLIERS = 'multiple'


class Order(UserCreatedBase):
    """
    An order placed by one vendor against one or more suppliers.

    Data model only: status transitions, totals and attribution belong in
    `sevakart/buisness/ordering/...`.
    """
    __tablename__ = 'orders'

    vendor_id = db.Column(db.String(32), nullable=False, index=True)
    total = db.Column(db.Float, nullable=False, default=0.0)
    status = db.Column(db.String(20), nullable=False, default='ordered')  # ordered/shipped/delivered
    # Single supplier id, or MULTIPLE_SUPPLIERS
    supplier = db.Column(db.String(32), nullable=False, default=MULTIPLE_SUPPLIERS)
    date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    version = db.Column(db.Integer, nullable=False)

    items = db.relationship(
        'OrderLineItem',
        back_populates='order',
        order_by='OrderLineItem.line_number',
        cascade='all, delete-orphan',
    )

    __mapper_args__ = {'version_id_col': version}

    @property
    def line_total(self) -> float:
        """Sum of qty x price over the line items (may differ from the stored total)"""
        return sum(item.subtotal for item in self.items)

    @property
    def supplier_ids(self) -> set:
        return {item.supplier_id for item in self.items if item.supplier_id}

    def to_dict(self, include_audit_fields=True):
        data = super().to_dict(include_audit_fields=include_audit_fields)
        data['items'] = [item.to_dict(include_audit_fields=False) for item in self.items]
        return data

    def __repr__(self):
        return f'<Order {self.id}: vendor {self.vendor_id}, {self.status}, total {self.total}>'


class OrderLineItem(UserCreatedBase):
    """Frozen settlement line inside an order (copies, not product references)"""
    __tablename__ = 'order_line_items'

    order_id = db.Column(db.Integer, db.ForeignKey('orders.id'), nullable=False)
    line_number = db.Column(db.Integer, nullable=False)
    name = db.Column(db.String(200), nullable=False)
    qty = db.Column(db.Integer, nullable=False)
    price = db.Column(db.Float, nullable=False)
    supplier_id = db.Column(db.String(32), nullable=True)

    order = db.relationship('Order', back_populates='items')

    @property
    def subtotal(self) -> float:
        return (self.qty or 0) * (self.price or 0.0)

    def to_dict(self, include_audit_fields=True):
        data = super().to_dict(include_audit_fields=include_audit_fields)
        data['supplierId'] = data.pop('supplier_id')
        return data

    def __repr__(self):
        return f'<OrderLineItem {self.line_number}: {self.name} x{self.qty} @ {self.price}>'
