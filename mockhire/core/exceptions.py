"""
Domain error taxonomy for the booking and points core.

Every error carries a stable machine-readable ``code`` plus any structured
data a client needs to render a specific message. The HTTP layer maps
``kind`` to a status code in one place (see ``mockhire.main``).
"""
from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for all errors raised by the service layer."""

    kind = "domain_error"
    status_code = 400
    default_code = "domain_error"

    def __init__(self, message: str, code: Optional[str] = None, **extra: Any):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.extra = extra

    def to_detail(self) -> Dict[str, Any]:
        """Structured error body for API responses."""
        detail = {"error": self.code, "kind": self.kind, "message": self.message}
        detail.update(self.extra)
        return detail


class ValidationError(DomainError):
    """Malformed or out-of-policy input (bad range, self-booking, past slot)."""

    kind = "validation"
    status_code = 400
    default_code = "validation_error"


class NotFoundError(DomainError):
    """Entity is missing or not visible to the caller."""

    kind = "not_found"
    status_code = 404
    default_code = "not_found"

    def __init__(self, entity: str, entity_id: Any = None, message: Optional[str] = None):
        super().__init__(message or f"{entity} not found", entity=entity)
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(DomainError):
    """A state precondition is violated (overlap, slot taken, terminal booking)."""

    kind = "conflict"
    status_code = 409
    default_code = "conflict"


class ForbiddenError(DomainError):
    """The caller is identified but not allowed to act (e.g. an active block)."""

    kind = "forbidden"
    status_code = 403
    default_code = "forbidden"


class InsufficientBalanceError(DomainError):
    kind = "insufficient_balance"
    status_code = 402
    default_code = "insufficient_balance"

    def __init__(self, required: int, available: int):
        super().__init__(
            f"Insufficient points: need {required}, have {available}",
            required=required,
            available=available,
        )
        self.required = required
        self.available = available


class StorageError(DomainError):
    """Transaction or infrastructure failure in the backing store."""

    kind = "storage"
    status_code = 503
    default_code = "storage_error"
