"""
Custom exceptions for ingredient counters and the stock ledger.
"""

from decimal import Decimal


class InventoryError(Exception):
    """Base exception for ingredient inventory errors."""
    pass


class NegativeCounterError(InventoryError):
    """Raised when applying a delta would leave a counter below zero."""

    def __init__(self, insumo, counter: str, current: Decimal, change: Decimal, message: str = None):
        self.insumo = insumo
        self.counter = counter
        self.current = current
        self.change = change
        if message is None:
            message = (
                f"Cannot apply {change} to {counter} of '{insumo.name}': "
                f"current value is {current}, result would be negative"
            )
        super().__init__(message)


class InsufficientStockError(InventoryError):
    """Raised when a stock withdrawal exceeds the available stock."""

    def __init__(self, insumo, required: Decimal, available: Decimal, message: str = None):
        self.insumo = insumo
        self.required = required
        self.available = available
        if message is None:
            message = (
                f"Insufficient stock for '{insumo.name}'. "
                f"Required: {required}, Available: {available}"
            )
        super().__init__(message)


class ConcurrentModificationError(InventoryError):
    """
    Raised when a row changed between the moment a client read it and the
    moment it tried to update it (optimistic concurrency check).
    """

    def __init__(self, obj, expected_version: int, actual_version: int, message: str = None):
        self.obj = obj
        self.expected_version = expected_version
        self.actual_version = actual_version
        if message is None:
            message = (
                f"{obj._meta.verbose_name} {obj.pk} was modified concurrently "
                f"(expected version {expected_version}, found {actual_version}). Reload and retry."
            )
        super().__init__(message)


class ImmutableMovementError(InventoryError):
    """Raised when code tries to edit or delete a ledger row."""
    pass
