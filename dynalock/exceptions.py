from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from botocore.exceptions import ClientError


class DynalockError(Exception):
    """Base exception for all dynalock errors."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ExhaustedIteratorError(DynalockError, StopIteration):
    """
    Raised by a scan iterator's next() when no further records exist.

    Subclasses StopIteration so plain for-loops and next(it, default) treat it
    as the normal end of iteration.
    """

    def __init__(self, message: str = "No more items in scan") -> None:
        super().__init__(message)


class UnsupportedOperationError(DynalockError):
    """Raised when a mutating operation is attempted on a read-only scan iterator."""

    def __init__(self, operation: str, message: str | None = None) -> None:
        super().__init__(
            message or f"Operation '{operation}' is not supported: this iterator is read-only"
        )
        self.operation = operation


class TableNotFoundError(DynalockError):
    """Raised when the DynamoDB table does not exist."""

    def __init__(self, table_name: str, original_error: Exception | None = None) -> None:
        super().__init__(f"Table '{table_name}' not found", original_error)
        self.table_name = table_name


class ProvisionedThroughputExceededError(DynalockError):
    """Raised when DynamoDB throttles a scan."""

    def __init__(
        self, message: str = "Request rate exceeded", original_error: Exception | None = None
    ) -> None:
        super().__init__(message, original_error)


class RequestTimeoutError(DynalockError):
    """Raised when a request to DynamoDB times out."""

    def __init__(
        self, message: str = "Request timed out", original_error: Exception | None = None
    ) -> None:
        super().__init__(message, original_error)


class ValidationError(DynalockError):
    """Raised when DynamoDB rejects a scan request as invalid."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message, original_error)


class RecordConversionError(DynalockError):
    """Raised by a record factory when a stored record cannot become a domain object."""

    def __init__(
        self,
        message: str,
        record: dict[str, Any] | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.record = record


class DynamoSerializationError(DynalockError):
    """Raised when a value cannot be converted to or from DynamoDB format."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message, original_error)


@contextmanager
def handle_dynamo_errors(table_name: str | None = None) -> Generator[None, None, None]:
    """
    Context manager that catches botocore.exceptions.ClientError
    and raises the matching DynalockError subclass.

    Args:
        table_name: Optional table name for better error messages

    Usage:
        with handle_dynamo_errors(table_name="locks"):
            client.scan(TableName="locks")
    """
    try:
        yield
    except ClientError as e:
        error_code = e.response.get("Error", {}).get("Code", "Unknown")
        error_message = e.response.get("Error", {}).get("Message", str(e))

        if error_code == "ResourceNotFoundException":
            raise TableNotFoundError(table_name=table_name or "unknown", original_error=e) from e

        if error_code in (
            "ProvisionedThroughputExceededException",
            "ThrottlingException",
            "RequestLimitExceeded",
        ):
            raise ProvisionedThroughputExceededError(message=error_message, original_error=e) from e

        if error_code in ("ValidationException", "SerializationException"):
            raise ValidationError(message=error_message, original_error=e) from e

        if error_code in ("RequestTimeout", "RequestTimeoutException"):
            raise RequestTimeoutError(message=error_message, original_error=e) from e

        raise DynalockError(
            message=f"DynamoDB error ({error_code}): {error_message}", original_error=e
        ) from e
