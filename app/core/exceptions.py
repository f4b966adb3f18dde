"""Domain exceptions shared by the API, the services and the client"""

from typing import Any, List, Optional


class BillingError(Exception):
    """Base class for errors surfaced to the user with a code and message."""

    code = "BILLING_ERROR"
    status_code = 400

    def __init__(self, message: str, details: Optional[List[Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or []


class ValidationError(BillingError):
    """Input rejected before any state changes (bad number, bad amount, missing item)."""

    code = "VALIDATION_ERROR"
    status_code = 400


class NotFoundError(BillingError):
    """Lookup failed: unknown mobile, or unknown book/teacher/bill/payment id."""

    code = "NOT_FOUND"
    status_code = 404


class ConflictError(BillingError):
    """State changed underneath the caller or a uniqueness rule was hit."""

    code = "CONFLICT"
    status_code = 409


class TransportError(BillingError):
    """Network or server failure talking to the backend. Never retried."""

    code = "TRANSPORT_ERROR"
    status_code = 503
