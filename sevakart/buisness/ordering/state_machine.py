"""
State machine for the order lifecycle

Encodes which status changes are allowed. Persistence of a transition is the
OrderContext's job.
"""

from typing import Dict, Set

from sevakart.buisness.errors import OrderTransitionError


class OrderStateMachine:
    """
    Order status transitions.

    Orders move one way only: ordered -> shipped -> delivered. Rejection is
    not a state; a rejected order is deleted. Unlike request workflows,
    staying in the same state is not a valid transition.
    """

    ORDERED = 'ordered'    # Initial state when the order is committed
    SHIPPED = 'shipped'    # Accepted by the supplier
    DELIVERED = 'delivered'

    INITIAL_STATE = ORDERED
    STATES = {ORDERED, SHIPPED, DELIVERED}

    # Terminal states (cannot transition from these)
    TERMINAL_STATES = {DELIVERED}

    # Valid transitions: from_status -> set of allowed to_status values
    TRANSITIONS: Dict[str, Set[str]] = {
        ORDERED: {SHIPPED},
        SHIPPED: {DELIVERED},
    }

    # Statuses from which an order may still be deleted by rejection
    REJECTABLE_STATES = {ORDERED}

    @classmethod
    def is_valid_status(cls, status: str) -> bool:
        return status in cls.STATES

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """
        Check if transition is valid.

        Args:
            from_status: Current status
            to_status: Target status

        Returns:
            bool: True if transition is allowed
        """
        if from_status in cls.TERMINAL_STATES:
            return False
        return to_status in cls.TRANSITIONS.get(from_status, set())

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """
        Validate transition and raise exception if invalid.

        Raises:
            OrderTransitionError: If transition is not allowed
        """
        if not cls.can_transition(from_status, to_status):
            raise OrderTransitionError(
                f"Invalid order status transition: {from_status} → {to_status}"
            )

    @classmethod
    def validate_reject(cls, from_status: str) -> None:
        if from_status not in cls.REJECTABLE_STATES:
            raise OrderTransitionError(
                f"Only orders in '{cls.ORDERED}' can be rejected (order is '{from_status}')"
            )

    @classmethod
    def get_allowed_transitions(cls, from_status: str) -> Set[str]:
        """Get set of allowed target statuses from current status"""
        if from_status in cls.TERMINAL_STATES:
            return set()
        return cls.TRANSITIONS.get(from_status, set())
