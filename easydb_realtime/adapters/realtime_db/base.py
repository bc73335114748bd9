"""Base types and error taxonomy for the Realtime Database adapter."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

from firebase_admin import exceptions as firebase_exceptions


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Point-in-time value of a database node."""

    value: Any = None # Decoded JSON value, None when the node is absent

    @property
    def exists(self) -> bool:
        """True when the node holds a value."""

        return self.value is not None


class RepositoryError(Exception):
    """Base exception for repository operations."""

    def __init__(self, message: str, error_code: str = "REPOSITORY_ERROR", original_error: Optional[Exception] = None):
        """Initialize the repository error."""

        super().__init__(message)
        self.error_code = error_code # Error code
        self.original_error = original_error # Original error


class ConfigurationError(RepositoryError):
    """Connection requested with no existing app and no configuration."""

    def __init__(self, message: str = "connection not initialized and no configuration supplied", original_error: Optional[Exception] = None):
        super().__init__(message, "CONFIGURATION_ERROR", original_error)


class WriteError(RepositoryError):
    """Backend rejected a mutation."""

    def __init__(self, message: str = "Write rejected", error_code: str = "WRITE_ERROR", original_error: Optional[Exception] = None):
        super().__init__(message, error_code, original_error)


class ListenerRegistrationBoundary(Protocol):
    """Handle returned by a backend listener registration."""

    def close(self) -> None: ...


class ReferenceBoundary(Protocol):
    """Boundary-first protocol for Realtime Database node references."""

    def child(self, path: str) -> "ReferenceBoundary": ...
    def get(self, etag: bool = False, shallow: bool = False) -> Any: ...
    def set(self, value: Any) -> None: ...
    def update(self, value: dict) -> None: ...
    def delete(self) -> None: ...
    def listen(self, callback: Callable[[Any], None]) -> ListenerRegistrationBoundary: ...


class DatabaseBoundary(Protocol):
    """Boundary-first protocol for the object handing out references."""

    def reference(self, path: str = "/") -> ReferenceBoundary: ...


def write_error_from(operation: str, error: Exception) -> WriteError:
    """Convert a backend failure raised by a mutation into a ``WriteError``."""

    if isinstance(error, firebase_exceptions.FirebaseError):
        error_code = str(error.code or "WRITE_ERROR")
    elif isinstance(error, (ValueError, TypeError)):
        error_code = firebase_exceptions.INVALID_ARGUMENT
    else:
        error_code = "WRITE_ERROR"

    logger.error(f"Write rejected during {operation} ({error_code}): {error}")

    return WriteError(f"Error during {operation}: {error}", error_code, error)
