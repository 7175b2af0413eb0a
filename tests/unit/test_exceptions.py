"""
Unit tests for the dynalock exception hierarchy and handle_dynamo_errors.
"""

import pytest
from botocore.exceptions import ClientError

from dynalock.exceptions import (
    DynalockError,
    DynamoSerializationError,
    ExhaustedIteratorError,
    ProvisionedThroughputExceededError,
    RecordConversionError,
    RequestTimeoutError,
    TableNotFoundError,
    UnsupportedOperationError,
    ValidationError,
    handle_dynamo_errors,
)


def client_error(code: str, message: str = "boom") -> ClientError:
    return ClientError(
        error_response={"Error": {"Code": code, "Message": message}}, operation_name="Scan"
    )


class TestExceptionHierarchy:
    """Test the exception classes and their attributes."""

    def test_base_class(self):
        error = DynalockError("Test message")
        assert isinstance(error, Exception)
        assert error.message == "Test message"
        assert error.original_error is None

    def test_original_error_preserved(self):
        original = ValueError("Original error")
        error = DynalockError("Wrapped message", original_error=original)
        assert error.original_error is original

    def test_exhausted_iterator_error_is_stop_iteration(self):
        error = ExhaustedIteratorError()
        assert isinstance(error, DynalockError)
        assert isinstance(error, StopIteration)
        assert error.message == "No more items in scan"

    def test_unsupported_operation_error(self):
        error = UnsupportedOperationError("remove")
        assert error.operation == "remove"
        assert "read-only" in str(error)

    def test_record_conversion_error_keeps_record(self):
        raw = {"key": {"S": "a"}}
        error = RecordConversionError("bad record", record=raw)
        assert error.record is raw

    def test_table_not_found_error(self):
        error = TableNotFoundError("locks")
        assert error.table_name == "locks"
        assert "locks" in str(error)

    def test_all_inherit_from_base(self):
        exceptions = [
            ExhaustedIteratorError(),
            UnsupportedOperationError("remove"),
            TableNotFoundError("test"),
            ProvisionedThroughputExceededError(),
            RequestTimeoutError(),
            ValidationError("test"),
            RecordConversionError("test"),
            DynamoSerializationError("test"),
        ]

        for exc in exceptions:
            assert isinstance(exc, DynalockError)


class TestHandleDynamoErrors:
    """Test the ClientError translation context manager."""

    def test_successful_operation(self):
        with handle_dynamo_errors():
            result = 42
        assert result == 42

    def test_resource_not_found(self):
        mock_error = client_error("ResourceNotFoundException", "Requested resource not found")

        with pytest.raises(TableNotFoundError) as exc_info:
            with handle_dynamo_errors(table_name="locks"):
                raise mock_error

        assert exc_info.value.table_name == "locks"
        assert exc_info.value.original_error is mock_error
        assert exc_info.value.__cause__ is mock_error

    def test_resource_not_found_without_table_name(self):
        with pytest.raises(TableNotFoundError) as exc_info:
            with handle_dynamo_errors():
                raise client_error("ResourceNotFoundException")

        assert exc_info.value.table_name == "unknown"

    @pytest.mark.parametrize(
        "code",
        ["ProvisionedThroughputExceededException", "ThrottlingException", "RequestLimitExceeded"],
    )
    def test_throttling(self, code):
        with pytest.raises(ProvisionedThroughputExceededError, match="Rate limit exceeded"):
            with handle_dynamo_errors():
                raise client_error(code, "Rate limit exceeded")

    @pytest.mark.parametrize("code", ["ValidationException", "SerializationException"])
    def test_validation(self, code):
        with pytest.raises(ValidationError):
            with handle_dynamo_errors():
                raise client_error(code)

    @pytest.mark.parametrize("code", ["RequestTimeout", "RequestTimeoutException"])
    def test_timeout(self, code):
        with pytest.raises(RequestTimeoutError):
            with handle_dynamo_errors():
                raise client_error(code)

    def test_unknown_error_code(self):
        mock_error = client_error("UnknownErrorCode", "Something unexpected happened")

        with pytest.raises(DynalockError) as exc_info:
            with handle_dynamo_errors():
                raise mock_error

        assert type(exc_info.value) is DynalockError
        assert "UnknownErrorCode" in str(exc_info.value)
        assert "Something unexpected happened" in str(exc_info.value)

    def test_other_exceptions_pass_through(self):
        with pytest.raises(KeyError):
            with handle_dynamo_errors():
                raise KeyError("not a ClientError")
