class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid or missing."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced user, leave or record does not exist."""


class ConflictError(DomainError):
    """Raised when a unique value (e.g. an email) is already taken."""


class ExternalServiceError(DomainError):
    """Raised when the face-recognition service is unreachable, misconfigured or fails.

    ``status`` is the HTTP status the API answers with: 503 while the service
    is down, 500 when it is not configured, or the status it replied with.
    """

    def __init__(self, message: str, status: int = 503):
        super().__init__(message)
        self.status = status
