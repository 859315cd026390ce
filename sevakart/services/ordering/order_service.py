"""
Order Service
Presentation service for order visibility and supplier order tabs.

Vendors see the orders they placed. Suppliers see every order with at least
one line item carrying their supplier id, restricted to their own lines.
"""

from typing import Any, Dict, List, Optional

from sevakart import db
from sevakart.buisness.core.identity import Identity
from sevakart.buisness.errors import OrderNotFoundError
from sevakart.buisness.ordering.state_machine import OrderStateMachine
from sevakart.data.ordering.order import Order, OrderLineItem


# Supplier order tabs keyed by the order status they show
SUPPLIER_TABS = {
    'new': OrderStateMachine.ORDERED,
    'processing': OrderStateMachine.SHIPPED,
    'completed': OrderStateMachine.DELIVERED,
}


class OrderService:
    """Read-only order queries scoped to an identity."""

    @staticmethod
    def vendor_orders(vendor_id: str) -> List[Order]:
        """Orders placed by a vendor, newest first."""
        return (
            Order.query
            .filter(Order.vendor_id == vendor_id)
            .order_by(Order.date.desc(), Order.id.desc())
            .all()
        )

    @staticmethod
    def supplier_orders(supplier_id: str, status: Optional[str] = None) -> List[Order]:
        """Orders holding at least one line of `supplier_id`, newest first."""
        query = Order.query.filter(Order.items.any(OrderLineItem.supplier_id == supplier_id))
        if status:
            query = query.filter(Order.status == status)
        return query.order_by(Order.date.desc(), Order.id.desc()).all()

    @staticmethod
    def supplier_lines(order: Order, supplier_id: str) -> List[OrderLineItem]:
        return [line for line in order.items if line.supplier_id == supplier_id]

    @staticmethod
    def is_visible_to(order: Order, identity: Identity) -> bool:
        if identity is None:
            return False
        if identity.is_vendor:
            return order.vendor_id == identity.id
        if identity.is_supplier:
            return any(line.supplier_id == identity.id for line in order.items)
        return False

    @classmethod
    def orders_for(cls, identity: Identity) -> List[Order]:
        if identity.is_supplier:
            return cls.supplier_orders(identity.id)
        return cls.vendor_orders(identity.id)

    @classmethod
    def get_visible_order(cls, order_id: int, identity: Identity) -> Order:
        """
        Raises:
            OrderNotFoundError: If the order does not exist or is not visible to `identity`
        """
        order = db.session.get(Order, order_id)
        if order is None or not cls.is_visible_to(order, identity):
            raise OrderNotFoundError(f"Order {order_id} not found")
        return order

    @classmethod
    def serialize_for(cls, order: Order, identity: Identity) -> Dict[str, Any]:
        """Order as a dict; suppliers only get their own lines and a subtotal for them."""
        data = order.to_dict()
        if identity is not None and identity.is_supplier:
            lines = cls.supplier_lines(order, identity.id)
            data['items'] = [line.to_dict(include_audit_fields=False) for line in lines]
            data['supplier_subtotal'] = sum(line.subtotal for line in lines)
        return data

    @classmethod
    def supplier_tabs(cls, supplier_id: str) -> Dict[str, List[Order]]:
        """Visible orders grouped into new / processing / completed."""
        tabs: Dict[str, List[Order]] = {tab: [] for tab in SUPPLIER_TABS}
        status_to_tab = {status: tab for tab, status in SUPPLIER_TABS.items()}
        for order in cls.supplier_orders(supplier_id):
            tab = status_to_tab.get(order.status)
            if tab is not None:
                tabs[tab].append(order)
        return tabs
