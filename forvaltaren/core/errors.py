"""Domain error taxonomy.

Services raise these; the exception handler registered in
``forvaltaren.main`` turns them into ``{"detail", "code", "field"}``
JSON responses with the matching HTTP status.
"""

from fastapi import status


class DomainError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "error"
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None, *, field: str | None = None) -> None:
        self.message = message or self.default_message
        self.field = field
        super().__init__(self.message)


class Unauthenticated(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"
    default_message = "Sign in required"


class Unauthorized(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"
    default_message = "No session"


class Forbidden(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_message = "Your role does not allow this action"


class NotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Not found"


class ValidationError(DomainError):
    status_code = 422
    code = "validation_error"
    default_message = "Invalid fields"


class EmailTaken(DomainError):
    status_code = status.HTTP_409_CONFLICT
    code = "email_taken"
    default_message = "An account with this email already exists"


class DuplicatePeriod(DomainError):
    status_code = status.HTTP_409_CONFLICT
    code = "duplicate_period"
    default_message = "An invoice already exists for the selected month"


class InvalidTransition(DomainError):
    status_code = status.HTTP_409_CONFLICT
    code = "invalid_transition"
    default_message = "Status change not allowed"


class InvoiceAlreadyPaid(InvalidTransition):
    code = "invoice_already_paid"
    default_message = "Invoice is already paid"


class CannotRemoveLastOwner(DomainError):
    status_code = status.HTTP_409_CONFLICT
    code = "cannot_remove_last_owner"
    default_message = "The last owner cannot be removed or demoted"


class QuotaExceeded(DomainError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    code = "quota_exceeded"
    default_message = "Your plan does not allow more of this resource"


class OperationFailed(DomainError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "operation_failed"
    default_message = "Operation failed"


class UpstreamFailed(OperationFailed):
    status_code = status.HTTP_502_BAD_GATEWAY
    code = "upstream_failed"
    default_message = "Billing provider unavailable"
