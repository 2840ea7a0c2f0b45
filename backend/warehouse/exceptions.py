"""
Custom exceptions for daily prep.
"""


class DailyPrepError(Exception):
    """Base exception for daily prep errors."""
    pass


class DeductionRefusedError(DailyPrepError):
    """
    Raised when a daily prep deduction cannot be applied as a whole.

    ``items`` lists the offending selections so the operator can adjust the
    selection and retry.
    """

    def __init__(self, message: str, items=None):
        self.items = items or []
        super().__init__(message)


class UnknownPrepItemError(DailyPrepError):
    """Raised when a selection does not match any item of the day's prep."""

    def __init__(self, insumo_id, meal_service_id, message: str = None):
        self.insumo_id = insumo_id
        self.meal_service_id = meal_service_id
        if message is None:
            message = (
                f"No prep item for insumo {insumo_id} in meal service {meal_service_id} on this date."
            )
        super().__init__(message)
