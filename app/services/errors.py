"""Errors raised by the admin services; the API layer renders them as {"error": message}."""


class ServiceError(Exception):
    """Base for expected failures that map to a 4xx response."""

    status_code = 400

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationFailed(ServiceError):
    """Raised when a required field is missing or malformed."""

    status_code = 400


class ConflictError(ServiceError):
    """Raised on a uniqueness clash (duplicate email or role name)."""

    status_code = 400


class SelfDeletionError(ServiceError):
    """Raised when an admin tries to delete their own account."""

    status_code = 400


class NotFoundError(ServiceError):
    """Raised when the requested user or role does not exist."""

    status_code = 404
