"""
Custom exceptions for the admin console with structured error context.

Every failure raised by the record store, the repositories and the clone
operation derives from AdminConsoleException, so the HTTP layer can map the
whole family to responses in one place.

Exception Hierarchy:
    AdminConsoleException (base)
    ├── NotFoundError
    ├── ValidationError
    └── StoreError
        ├── StoreReadError
        ├── StoreWriteError
        │   ├── PartialTreeCopyError
        │   └── CloneFailedError
        └── StoreTimeoutError (retryable)
"""

from typing import Optional, Dict, Any
from datetime import datetime


class AdminConsoleException(Exception):
    """
    Base exception for all admin console errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (collection, ids, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = dict(context or {})
        self.original_exception = original_exception
        self.timestamp = datetime.utcnow()

        self.context["error_timestamp"] = self.timestamp.isoformat()

        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/responses."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


class NotFoundError(AdminConsoleException):
    """
    Raised when a record id does not resolve.

    Context should include:
        - collection: Name of the collection that was searched
        - record_id: The identifier that was not found
    """
    pass


class ValidationError(AdminConsoleException):
    """
    Raised when a request is well-formed but violates a business rule
    (e.g. a team that does not belong to the selected company).
    """
    pass


# ============================================================================
# Record Store Errors
# ============================================================================

class StoreError(AdminConsoleException):
    """Base exception for record store failures."""
    pass


class StoreReadError(StoreError):
    """
    Raised when a find/get/count call fails.

    Context should include:
        - operation: find, get_one or count
        - collection: Name of the collection
    """
    pass


class StoreWriteError(StoreError):
    """
    Raised when the store rejects an insert, update or delete.

    Context should include:
        - operation: insert, insert_many, update or delete
        - collection: Name of the collection
        - constraint_name: Name of violated constraint (if available)
    """
    pass


class PartialTreeCopyError(StoreWriteError):
    """
    Raised when a bulk insert of cloned items did not create every
    requested row.

    Context should include:
        - category_id: The new category the items belong to
        - expected: Number of rows requested
        - created: Number of rows the store returned
    """
    pass


class CloneFailedError(StoreWriteError):
    """
    Aggregated failure of a checklist clone.

    Context includes the source id, the ids created before the failure and
    whether compensating cleanup removed all of them.
    """
    pass


class RetryableError(AdminConsoleException):
    """
    Mixin for errors that are safe to retry (transient network or backend
    trouble). The admin console never retries on its own; callers decide.
    """
    pass


class StoreTimeoutError(RetryableError, StoreError):
    """
    Raised when a single store call exceeds STORE_CALL_TIMEOUT_SECONDS.

    Context should include:
        - operation: The store operation that timed out
        - collection: Name of the collection
        - timeout_seconds: The configured timeout
    """
    pass
