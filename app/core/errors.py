"""Application error taxonomy. The HTTP layer maps each class to a status code."""


class AppError(Exception):
    """Base for errors that carry a client-safe message and an HTTP status."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(AppError):
    """Malformed or missing request fields."""

    status_code = 400


class AuthenticationError(AppError):
    """Bad, missing or expired credential. Message is kept generic."""

    status_code = 401


class AuthorizationError(AppError):
    """Authenticated, but the role is not sufficient."""

    status_code = 403


class NotFoundError(AppError):
    """Missing resource, or a resource the caller does not own."""

    status_code = 404


class ConflictError(AppError):
    """Uniqueness violation (duplicate username, email or token value)."""

    status_code = 409


class InternalError(AppError):
    """Store or signing failure. Details are logged, never returned."""

    status_code = 500
