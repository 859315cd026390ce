"""
Dashboard Service
Summary numbers for the vendor and supplier home screens.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from sevakart.buisness.core.identity import Identity
from sevakart.buisness.inventory.inventory_monitor import STATUS_GOOD, classify
from sevakart.buisness.ordering.cart_context import CartContext
from sevakart.buisness.ordering.state_machine import OrderStateMachine
from sevakart.data.catalog.product import Product
from sevakart.data.inventory.inventory_item import InventoryItem
from sevakart.services.ordering.order_service import OrderService

SALES_WINDOW_DAYS = 7


class DashboardService:
    """Builds dashboard summaries. `now` is injectable for tests."""

    @staticmethod
    def _today_start(now: datetime) -> datetime:
        return now.replace(hour=0, minute=0, second=0, microsecond=0)

    @classmethod
    def vendor_summary(cls, identity: Identity, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or datetime.utcnow()
        today = cls._today_start(now)
        week_start = now - timedelta(days=SALES_WINDOW_DAYS)

        orders = OrderService.vendor_orders(identity.id)
        todays = [order for order in orders if order.date >= today]
        inventory = InventoryItem.query.filter_by(vendor_id=identity.id).all()
        cart = CartContext.load(identity.id)

        return {
            'todays_orders': len(todays),
            'delivered_today': sum(1 for o in todays if o.status == OrderStateMachine.DELIVERED),
            'pending_today': sum(1 for o in todays if o.status != OrderStateMachine.DELIVERED),
            'inventory_items': len(inventory),
            'low_stock_items': sum(1 for item in inventory if classify(item.current_stock) != STATUS_GOOD),
            'weekly_spending': sum(order.total for order in orders if order.date >= week_start),
            'cart_items': cart.item_count,
            'cart_total': cart.total,
        }

    @classmethod
    def supplier_summary(cls, identity: Identity, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or datetime.utcnow()
        today = cls._today_start(now)
        week_start = now - timedelta(days=SALES_WINDOW_DAYS)

        orders = OrderService.supplier_orders(identity.id)
        weekly_sales = sum(
            line.subtotal
            for order in orders if order.date >= week_start
            for line in OrderService.supplier_lines(order, identity.id)
        )

        return {
            'todays_orders': sum(1 for order in orders if order.date >= today),
            'weekly_sales': weekly_sales,
            'products': Product.query.filter_by(supplier_id=identity.id).count(),
            'new_orders': sum(1 for order in orders if order.status == OrderStateMachine.ORDERED),
        }

    @classmethod
    def summary_for(cls, identity: Identity, now: Optional[datetime] = None) -> Dict[str, Any]:
        if identity.is_supplier:
            return cls.supplier_summary(identity, now)
        return cls.vendor_summary(identity, now)
