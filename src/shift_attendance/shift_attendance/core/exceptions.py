class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when an employee, shift or attendance record does not exist."""

    status_code = 404


class AuthenticationError(DomainError):
    """Raised when the API token is missing or wrong."""

    status_code = 401


class ConfigurationMissing(DomainError):
    """Raised when a punch cannot be classified because no shifts are configured."""
