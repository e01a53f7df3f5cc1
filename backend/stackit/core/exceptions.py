"""Custom exception classes for the application.

Every error carries the HTTP status and machine-readable code the API layer
uses to build an ``ErrorResponse``.
"""


class StackItException(Exception):
    """Base exception for all StackIt errors."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)


class AuthorizationError(StackItException):
    """Raised when an action requires a logged-in user."""

    status_code = 401
    code = "authorization_required"

    def __init__(self, action: str = "perform this action"):
        super().__init__(f"Please log in to {action}")


class NotFoundError(StackItException):
    """Raised when a requested resource is not found."""

    status_code = 404
    code = "not_found"

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} with identifier '{identifier}' not found")


class ValidationFailure(StackItException):
    """Raised when user input fails a validity gate."""

    status_code = 400
    code = "validation_error"

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class RemoteServiceError(StackItException):
    """Raised when the data layer fails; the message stays opaque to clients."""

    status_code = 503
    code = "remote_error"

    def __init__(self, message: str = "The service is temporarily unavailable"):
        super().__init__(message)
