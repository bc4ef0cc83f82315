"""Exception hierarchy for customer identity errors.

Every error a request handler may let escape inherits from
CustomerIdentityError; the status_code attribute is used by the global
exception handlers to build the HTTP error body.
"""

from __future__ import annotations


class CustomerIdentityError(Exception):
    """Base exception for all service errors."""

    status_code: int = 500

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        self.message = message
        self.details = list(details or [])
        super().__init__(message)


class ValidationFailedError(CustomerIdentityError):
    """Raised when a request payload is malformed or incomplete."""

    status_code = 400

    def __init__(self, details: list[str]) -> None:
        super().__init__("Validation failed", details)


class InvalidCredentialsError(CustomerIdentityError):
    """Raised on a failed login. The message never says which part was wrong."""

    status_code = 401

    def __init__(self) -> None:
        super().__init__("Invalid username or password")


class UserNotFoundError(CustomerIdentityError):
    """Raised by the user directory for an unknown username."""

    status_code = 401

    def __init__(self, username: str) -> None:
        super().__init__(f"User not found: {username}")
        self.username = username


class InvalidTokenError(CustomerIdentityError):
    """Raised when a bearer token cannot be parsed."""

    status_code = 401


class CustomerNotFoundError(CustomerIdentityError):
    status_code = 404

    def __init__(self, customer_id: int) -> None:
        super().__init__(
            f"Customer not found with id: {customer_id}",
            ["The requested resource was not found."],
        )
        self.customer_id = customer_id


class UniqueConstraintError(CustomerIdentityError):
    """Raised when email or ssn collides with another active customer."""

    status_code = 409

    _DETAILS = {
        "email": "Email address already exists.",
        "ssn": "SSN already exists.",
    }

    def __init__(self, field: str | None) -> None:
        detail = self._DETAILS.get(field or "", "A unique constraint was violated or data is invalid.")
        super().__init__("Data integrity violation", [detail])
        self.field = field


class UpstreamUnavailableError(CustomerIdentityError):
    """Raised by the order client when the order service cannot answer."""

    status_code = 503

    def __init__(self, kind: str, message: str) -> None:
        super().__init__(message)
        self.kind = kind
