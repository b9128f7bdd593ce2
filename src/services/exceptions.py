"""
Shared exceptions for service layer operations.

These are raised inside the services and converted to ServiceResult at the
service boundary; callers never see them.
"""
from services.results import ServiceResult


class ServiceError(Exception):
    """Base class for failures that map to a structured result."""

    status: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_result(self) -> ServiceResult:
        """Build the {response, status} envelope for this failure."""
        return ServiceResult(response=self.message, status=self.status)


class NotFoundError(ServiceError):
    """Raised when the target entity does not exist."""

    status = 404


class UnauthorizedError(ServiceError):
    """Raised when the supplied credential does not match."""

    status = 401


class ForbiddenError(ServiceError):
    """Raised on an ownership violation."""

    status = 403


class InvalidInputError(ServiceError):
    """Raised when required fields are empty or malformed."""

    status = 400


class ConflictError(ServiceError):
    """Raised when a collection name is already taken by the owner."""

    status = 400


class TransactionFailureError(ServiceError):
    """Raised when the store fails during a multi-statement transaction."""

    status = 500


class SideEffectFailure(Exception):
    """
    Raised when a file-area or billing call fails.

    Never surfaced to the caller as a request failure, only logged.
    """

    def __init__(self, operation: str, cause: Exception) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed: {cause}")
