"""
Custom exceptions for purchase records and purchase planning.

These are raised by the pure lifecycle module as well as the services, so
this module does not import Django.
"""

from decimal import Decimal


class PurchasingError(Exception):
    """Base exception for purchasing errors."""
    pass


class InvalidTransitionError(PurchasingError):
    """Raised when an action is not allowed from a record's current status."""

    def __init__(self, status: str, action: str, message: str = None):
        self.status = status
        self.action = action
        if message is None:
            message = f"Cannot {action} a purchase record in status '{status}'."
        super().__init__(message)


class InvalidQuantityError(PurchasingError):
    """Raised for a non-positive purchase or reception quantity."""

    def __init__(self, quantity: Decimal, message: str = None):
        self.quantity = quantity
        if message is None:
            message = f"Quantity must be greater than zero, got {quantity}."
        super().__init__(message)


class ReceptionQuantityError(InvalidQuantityError):
    """Raised when a reception exceeds the outstanding quantity."""

    def __init__(self, quantity: Decimal, outstanding: Decimal, message: str = None):
        self.outstanding = outstanding
        if message is None:
            message = (
                f"Cannot receive {quantity}: only {outstanding} is outstanding for this stage."
            )
        super().__init__(quantity, message)


class PurchaseRecordNotDeletableError(PurchasingError):
    """Raised when deleting a record that is not cancelled or is still referenced."""

    def __init__(self, record, message: str = None):
        self.record = record
        if message is None:
            message = (
                f"Purchase record {record.pk} is '{record.status}'. "
                f"Only cancelled records can be deleted."
            )
        super().__init__(message)
