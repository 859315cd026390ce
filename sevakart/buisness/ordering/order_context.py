from __future__ import annotations

from sevakart.buisness.core.record_store import RecordStore, get_record_store
from sevakart.buisness.errors import OrderConflictError, OrderNotFoundError, RecordConflictError
from sevakart.buisness.ordering.state_machine import OrderStateMachine
from sevakart.data.ordering.order import Order
from sevakart.utils.logger import get_logger

logger = get_logger("sevakart.buisness.ordering.order_context")


class OrderContext:
    """
    Business wrapper around one order's lifecycle.

    Each transition is a compare-and-swap on the current status, so two
    suppliers acting on the same order cannot both succeed.
    """

    def __init__(self, order_id: int, *, store: RecordStore | None = None):
        self.order_id = order_id
        self.store = store or get_record_store()

    @classmethod
    def load(cls, order_id: int, *, store: RecordStore | None = None) -> OrderContext:
        """
        Raises:
            OrderNotFoundError: If the order does not exist
        """
        context = cls(order_id, store=store)
        if context.store.get(Order, order_id) is None:
            raise OrderNotFoundError(f"Order {order_id} not found")
        return context

    @property
    def order(self) -> Order:
        order = self.store.get(Order, self.order_id)
        if order is None:
            raise OrderNotFoundError(f"Order {self.order_id} not found")
        return order

    @property
    def status(self) -> str:
        return self.order.status

    def allowed_actions(self) -> list[str]:
        status = self.status
        actions = []
        if OrderStateMachine.can_transition(status, OrderStateMachine.SHIPPED):
            actions.append('accept')
        if status in OrderStateMachine.REJECTABLE_STATES:
            actions.append('reject')
        if OrderStateMachine.can_transition(status, OrderStateMachine.DELIVERED):
            actions.append('deliver')
        return actions

    def accept(self) -> Order:
        """ordered -> shipped"""
        return self._transition(OrderStateMachine.SHIPPED)

    def mark_delivered(self) -> Order:
        """shipped -> delivered"""
        return self._transition(OrderStateMachine.DELIVERED)

    def reject(self) -> None:
        """
        Reject an order that has not been accepted yet. The order is deleted.

        Raises:
            OrderTransitionError: If the order is no longer 'ordered'
            OrderConflictError: If another writer changed the order first
        """
        OrderStateMachine.validate_reject(self.status)
        try:
            deleted = self.store.conditional_delete(Order, self.order_id, {'status': OrderStateMachine.ORDERED})
        except RecordConflictError as e:
            raise OrderConflictError(f"Order {self.order_id} was changed before it could be rejected") from e
        if not deleted:
            raise OrderConflictError(f"Order {self.order_id} was changed before it could be rejected")
        logger.info(f"Order {self.order_id} rejected and deleted")

    def _transition(self, to_status: str) -> Order:
        from_status = self.status
        OrderStateMachine.validate_transition(from_status, to_status)

        updated = self.store.conditional_update(
            Order, self.order_id, expected={'status': from_status}, fields={'status': to_status}
        )
        if not updated:
            logger.warning(f"Order {self.order_id} lost status race ({from_status} → {to_status})")
            raise OrderConflictError(f"Order {self.order_id} is no longer '{from_status}'")

        logger.info(f"Order {self.order_id} status changed: {from_status} → {to_status}")
        return self.order
