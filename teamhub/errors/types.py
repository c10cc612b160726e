"""
Error Types - Enums and exception classes for error handling

Contains:
- ErrorType enum (standardized error categories)
- Exception classes (TeamHubError and subclasses)

Business-rule failures never use these: they are returned as response
codes. Exceptions are reserved for infrastructure failures and for the
internal rollback signal used inside store transactions.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorType(Enum):
    """Standard error types"""
    # Storage errors
    RECORD_NOT_FOUND = "record_not_found"
    STORAGE_FAILURE = "storage_failure"
    INVALID_QUERY = "invalid_query"

    # Token errors
    TOKEN_INVALID = "token_invalid"
    INVALID_DURATION = "invalid_duration"

    # Transaction control
    TRANSACTION_ABORTED = "transaction_aborted"

    # Generic
    INTERNAL_ERROR = "internal_error"


class TeamHubError(Exception):
    """Base exception for TeamHub"""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_type = error_type
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(TeamHubError):
    """A store-level lookup found no matching team or member"""

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        filter: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_type=ErrorType.RECORD_NOT_FOUND,
            details={"collection": collection, "filter": filter or {}}
        )
        self.collection = collection


class StorageError(TeamHubError):
    """The document store is unreachable or a write failed unexpectedly"""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.STORAGE_FAILURE,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message=message, error_type=error_type, details=details)


class TokenError(TeamHubError):
    """An invitation token could not be issued"""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.TOKEN_INVALID,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message=message, error_type=error_type, details=details)


class TransactionAborted(TeamHubError):
    """
    Raised inside a store transaction to roll it back.

    Carries the response code the operation should report once the
    rollback has happened.
    """

    def __init__(self, code, message: Optional[str] = None):
        super().__init__(
            message=message or f"Transaction aborted: {getattr(code, 'value', code)}",
            error_type=ErrorType.TRANSACTION_ABORTED,
            details={"code": getattr(code, "value", code)}
        )
        self.code = code


__all__ = [
    "ErrorType",
    "TeamHubError",
    "NotFoundError",
    "StorageError",
    "TokenError",
    "TransactionAborted",
]
