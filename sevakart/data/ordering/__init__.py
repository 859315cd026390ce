from sevakart.data.ordering.cart_entry import CartEntry
from sevakart.data.ordering.order import Order, OrderLineItem, MULTIPLE_SUPPLIERS

__all__ = ['CartEntry', 'Order', 'OrderLineItem', 'MULTIPLE_SUPPLIERS']
