"""
Errors Package

Provides standardized error handling for TeamHub:
- TeamResponseCode / OrgResponseCode enums returned by every operation
- ERROR_MESSAGES and get_error_message for human-readable text
- ErrorType enum for error categories
- Exception classes (TeamHubError and subclasses)
"""

# Response codes and messages
from teamhub.errors.codes import (
    TeamResponseCode,
    OrgResponseCode,
    ResponseCode,
    ERROR_MESSAGES,
    get_error_message,
)

# Error types and exception classes
from teamhub.errors.types import (
    ErrorType,
    TeamHubError,
    NotFoundError,
    StorageError,
    TokenError,
    TransactionAborted,
)

__all__ = [
    # Codes
    "TeamResponseCode",
    "OrgResponseCode",
    "ResponseCode",
    "ERROR_MESSAGES",
    "get_error_message",
    # Types
    "ErrorType",
    "TeamHubError",
    "NotFoundError",
    "StorageError",
    "TokenError",
    "TransactionAborted",
]
