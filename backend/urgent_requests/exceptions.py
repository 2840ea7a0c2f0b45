"""
Custom exceptions for urgent purchase requests.
"""


class UrgentRequestError(Exception):
    """Base exception for urgent purchase request errors."""
    pass


class InvalidRequestTransitionError(UrgentRequestError):
    """Raised when an action is not allowed from the request's current status."""

    def __init__(self, request, action: str, message: str = None):
        self.request = request
        self.action = action
        if message is None:
            message = f"Cannot {action} urgent request {request.pk}: current status is '{request.status}'."
        super().__init__(message)


class RejectionReasonError(UrgentRequestError):
    """Raised when a rejection reason is missing or out of bounds."""
    pass


class FulfillmentRecordError(UrgentRequestError):
    """Raised when the purchase record offered as fulfilment does not fit the request."""
    pass
