from typing import Any, Dict, Optional


class DynamoDBTableError(Exception):
    """Base exception for all table manager errors.

    Every error carries a ``context`` dict. Errors raised for a specific
    table record it under ``context['table_name']``, which is exposed as
    ``table_name`` and always rendered first.

    Attributes:
        message: Human-readable error message
        original_error: The exception that caused this error, if any
        context: Additional details about the failure
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.original_error = original_error
        self.context = dict(context or {})
        super().__init__(message)

    @property
    def table_name(self) -> Optional[str]:
        """Table the error relates to, or None for errors not bound to a table."""
        return self.context.get('table_name')

    @property
    def root_cause(self) -> Optional[Exception]:
        """Innermost ``original_error``, following nested table manager errors."""
        cause = self.original_error
        while isinstance(cause, DynamoDBTableError) and cause.original_error is not None:
            cause = cause.original_error
        return cause

    def _ordered_context(self):
        if 'table_name' in self.context:
            yield 'table_name', self.context['table_name']
        for key, value in self.context.items():
            if key != 'table_name':
                yield key, value

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{k}={v}" for k, v in self._ordered_context())
        return f"{self.message} ({details})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, table_name={self.table_name!r}, context={self.context!r})"
