# Base exception class
from .base import DynamoDBTableError

from .domain_exceptions import (
    ValidationError,
    ItemNotFoundError,
    NotFoundError,
    ConflictError,
    ConnectionError,
    RetryableError,
    TableLifecycleError,
    TableQueryError,
    TableActivationTimeoutError,
    TableActivationCancelledError,
    TableInitializationError,
    TableDeletionError,
)

__all__ = [
    # Base exception
    "DynamoDBTableError",

    # Domain exceptions (alphabetically ordered)
    "ConflictError",
    "ConnectionError",
    "ItemNotFoundError",
    "NotFoundError",
    "RetryableError",
    "ValidationError",

    # Table lifecycle exceptions
    "TableActivationCancelledError",
    "TableActivationTimeoutError",
    "TableDeletionError",
    "TableInitializationError",
    "TableLifecycleError",
    "TableQueryError",
]
