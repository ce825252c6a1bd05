"""Error taxonomy for order intake

Services raise these; the API layer renders them as
``{"detail": message, "code": CODE}`` with the matching status code.
"""

from typing import Any, Dict, Optional


class OrderCoreError(Exception):
    """Base class for errors surfaced to the caller"""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ValidationError(OrderCoreError):
    """Missing or malformed request fields"""

    status_code = 400
    code = "VALIDATION_ERROR"


class ForbiddenError(OrderCoreError):
    """Caller may not act on this store"""

    status_code = 403
    code = "AUTHORIZATION_ERROR"


class NotFoundError(OrderCoreError):
    """Unknown store, customer, product, variant or order"""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(f"{resource} not found", {"resource": resource, **(context or {})})


class ConflictError(OrderCoreError):
    """Request conflicts with current state (stock, delivery radius)"""

    status_code = 409
    code = "CONFLICT_ERROR"


class InternalError(OrderCoreError):
    """Unexpected store or collaborator failure; the cause is logged, never returned"""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str = "Internal server error", context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context)
