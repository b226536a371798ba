"""
Domain and lifecycle exceptions for the table manager.

Organized by category:
1. Data Validation Errors
2. Resource Not Found Errors
3. Conflict and Infrastructure Errors
4. Table Lifecycle Errors
"""

from typing import Any, Dict, Optional

from .base import DynamoDBTableError


# =============================================================================
# Data Validation Errors
# =============================================================================

class ValidationError(DynamoDBTableError):
    """Raised when an entity, schema or configuration fails validation."""

    def __init__(self, message: str, errors: Optional[Dict[str, Any]] = None, original_error: Optional[Exception] = None):
        self.errors = errors or {}
        context = {}
        if self.errors:
            context['validation_errors'] = self.errors
        super().__init__(message, original_error, context)


# =============================================================================
# Resource Not Found Errors
# =============================================================================

class ItemNotFoundError(DynamoDBTableError):
    """Raised when a specific item is not found in a table."""

    def __init__(self, table_name: str, key: dict, original_error: Optional[Exception] = None):
        self.key = key
        message = f"Item not found in table '{table_name}' with key: {key}"
        context = {
            'table_name': table_name,
            'key': key
        }
        super().__init__(message, original_error, context)


class NotFoundError(DynamoDBTableError):
    """Raised when a DynamoDB resource (table, index) does not exist.

    The existence probe treats this as an expected signal and turns it
    into ``False``; everywhere else it propagates.
    """

    def __init__(self, message: str, resource_type: Optional[str] = None, resource_name: Optional[str] = None, original_error: Optional[Exception] = None):
        self.resource_type = resource_type
        self.resource_name = resource_name
        context = {}
        if resource_type:
            context['resource_type'] = resource_type
        if resource_name:
            context['resource_name'] = resource_name
        super().__init__(message, original_error, context)


# =============================================================================
# Conflict and Infrastructure Errors
# =============================================================================

class ConflictError(DynamoDBTableError):
    """Raised when a conditional write fails, e.g. an optimistic lock mismatch."""

    def __init__(self, message: str, resource_id: Optional[str] = None, original_error: Optional[Exception] = None):
        self.resource_id = resource_id
        context = {}
        if resource_id:
            context['resource_id'] = resource_id
        super().__init__(message, original_error, context)


class ConnectionError(DynamoDBTableError):
    """Raised when DynamoDB cannot be reached or rejects the credentials."""

    def __init__(self, message: str, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, original_error, context)


class RetryableError(DynamoDBTableError):
    """Raised for throttling and temporary service failures."""

    def __init__(self, message: str, retry_after_seconds: Optional[int] = None, original_error: Optional[Exception] = None):
        self.retry_after_seconds = retry_after_seconds
        context = {}
        if retry_after_seconds:
            context['retry_after_seconds'] = retry_after_seconds
        super().__init__(message, original_error, context)


# =============================================================================
# Table Lifecycle Errors
# =============================================================================

class TableLifecycleError(DynamoDBTableError):
    """Base class for errors raised while provisioning or tearing down tables."""

    def __init__(self, message: str, table_name: str, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        context = dict(context or {})
        context['table_name'] = table_name
        super().__init__(message, original_error, context)


class TableQueryError(TableLifecycleError):
    """Raised when a describe/status query fails for a reason other than "not found".

    While polling for activation this is a transient failure that consumes
    one attempt.
    """


class TableActivationTimeoutError(TableLifecycleError):
    """Raised when a table never reports ACTIVE within the attempt budget."""

    def __init__(self, table_name: str, attempts: int, interval_seconds: float, last_status: Optional[str] = None):
        self.attempts = attempts
        self.interval_seconds = interval_seconds
        self.last_status = last_status
        message = f"Timeout waiting for table {table_name} to become active"
        context = {
            'attempts': attempts,
            'interval_seconds': interval_seconds,
        }
        if last_status:
            context['last_status'] = last_status
        super().__init__(message, table_name, context=context)


class TableActivationCancelledError(TableLifecycleError):
    """Raised when a stop request interrupts activation polling."""

    def __init__(self, table_name: str, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Stopped waiting for table {table_name} to become active",
            table_name,
            context={'attempts': attempts}
        )


class TableInitializationError(TableLifecycleError):
    """Raised when a declared table could not be created or verified.

    Fatal: the application must not become ready.
    """

    def __init__(self, table_name: str, original_error: Optional[Exception] = None):
        super().__init__(
            f"Failed to initialize DynamoDB table: {table_name}",
            table_name,
            original_error=original_error
        )


class TableDeletionError(TableLifecycleError):
    """Describes a failed table deletion during teardown.

    Teardown records these and logs them; it never raises them.
    """

    def __init__(self, table_name: str, original_error: Optional[Exception] = None):
        super().__init__(
            f"Failed to delete table {table_name}",
            table_name,
            original_error=original_error
        )
