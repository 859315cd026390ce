"""
Domain exceptions for marketplace business logic

These exceptions represent business rule violations and domain-specific errors.
They are raised by the business layer and translated to HTTP responses by the
presentation layer.
"""


class SevaKartDomainError(Exception):
    """Base exception for all marketplace domain errors"""
    pass


class DomainValidationError(SevaKartDomainError):
    """Raised when input is rejected before any write happens"""
    pass


class RecordNotFoundError(SevaKartDomainError):
    """Raised when a record id does not exist in the store"""
    pass


class OrderNotFoundError(RecordNotFoundError):
    """Raised when an order id does not exist"""
    pass


class ProductNotFoundError(RecordNotFoundError):
    """Raised when no catalog product can be resolved"""
    pass


class OrderTransitionError(SevaKartDomainError):
    """Raised when a lifecycle action is called from the wrong order status"""
    pass


class RecordConflictError(SevaKartDomainError):
    """Raised when a versioned record was changed by someone else before our write"""
    pass


class OrderConflictError(RecordConflictError):
    """Raised when a concurrent writer changed the order first"""
    pass


class PersistenceError(SevaKartDomainError):
    """Raised when the store could not commit a change (the session was rolled back)"""
    pass
