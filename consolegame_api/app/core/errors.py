"""
Error types raised by the service layer.

Every failure a service reports carries an explicit ``ErrorKind`` so
that the HTTP layer can pick a message or status code by switching on
the kind instead of inspecting message text.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    INFRASTRUCTURE = "infrastructure"


class ServiceError(Exception):
    """Base class for errors surfaced by services.

    ``field`` names the offending input field for validation errors.
    It is ``None`` when the store rejected a document as a whole.
    """

    kind = ErrorKind.INFRASTRUCTURE

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class InvalidInputError(ServiceError):
    kind = ErrorKind.VALIDATION


class ConflictError(ServiceError):
    kind = ErrorKind.CONFLICT


class NotFoundError(ServiceError):
    kind = ErrorKind.NOT_FOUND


class InfrastructureError(ServiceError):
    kind = ErrorKind.INFRASTRUCTURE


class NotConnectedError(InfrastructureError):
    """Raised when the database handle is used before ``connect()``."""
