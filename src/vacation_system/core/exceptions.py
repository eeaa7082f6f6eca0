class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidRangeError(ValidationError):
    """Raised when a date range is reversed or covers no working day."""


class InvalidTransitionError(ValidationError):
    """Raised when a status change is not allowed by the request state machine."""


class SchedulingConflictError(DomainError):
    """Raised when a new request overlaps an active request of the same user."""

    def __init__(self, message: str, *, request_id: int, status):
        super().__init__(message)
        self.request_id = request_id
        self.status = status


class InsufficientBalanceError(DomainError):
    """Raised when the user's allowance cannot cover the requested days."""

    def __init__(self, message: str, *, available: int, requested: int, already_approved: int = 0):
        super().__init__(message)
        self.available = available
        self.requested = requested
        self.already_approved = already_approved


class NotFoundError(DomainError):
    """Raised when a request or user does not exist."""


class AuthenticationError(DomainError):
    """Raised when there is no authenticated user."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class TransientError(DomainError):
    """Raised on lock wait timeouts and deadlocks. Safe to retry."""


class DataIntegrityError(DomainError):
    """Raised when persisted data cannot be mapped to the domain model."""
