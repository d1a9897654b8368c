"""
Error taxonomy shared by the services and the routing layer.

Services raise these exceptions; route handlers translate them into
responses.  ``ValidationError`` and ``NotFoundError`` are reported to
the client as an ``{"error": message}`` body, while
``PersistenceError`` becomes a generic server error whose cause is
only logged.
"""


class ServiceError(Exception):
    """Base class for errors raised by the service layer."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """A required field is missing or malformed."""


class NotFoundError(ServiceError):
    """A referenced user does not exist."""


class PersistenceError(ServiceError):
    """The document store failed to complete an operation."""
