from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, cast
from uuid import UUID

from boto3.dynamodb.types import Binary, TypeDeserializer, TypeSerializer

from .exceptions import DynamoSerializationError


class DynamoSerializer:
    """
    Converts between DynamoDB low-level JSON ({"S": "..."}, {"N": "..."}) and plain Python values.

    Scanned records arrive in low-level format. Numbers come back from boto3 as
    Decimal and binaries as boto3 Binary wrappers; both are restored to int/float
    and bytes so factories and pydantic models see ordinary Python types.
    """

    def __init__(self) -> None:
        self._serializer = TypeSerializer()
        self._deserializer = TypeDeserializer()

    def to_dynamo(self, data: dict[str, Any]) -> dict[str, dict[str, Any]]:
        """Converts a Python dict to DynamoDB JSON format."""
        clean_data = self._prepare_for_dynamo(data)
        result = {}

        for k, v in clean_data.items():
            try:
                serialized = self._serializer.serialize(v)
            except TypeError as e:
                raise DynamoSerializationError(
                    f"Failed to serialize field '{k}'. value={v!r} error={e!s}", original_error=e
                ) from e
            result[k] = cast(dict[str, Any], serialized)
        return result

    def to_dynamo_value(self, value: Any) -> dict[str, Any]:
        """
        Serializes a single value, e.g. for ExpressionAttributeValues.
        E.g.: 10.5 -> {'N': '10.5'}
        """
        clean_value = self._prepare_for_dynamo(value)
        try:
            return cast(dict[str, Any], self._serializer.serialize(clean_value))
        except TypeError as e:
            raise DynamoSerializationError(
                f"Failed to serialize value '{value}'. error={e!s}", original_error=e
            ) from e

    def from_dynamo(self, item: dict[str, Any]) -> dict[str, Any]:
        """Converts a DynamoDB JSON record back to a Python dict."""
        try:
            python_data = {k: self._deserializer.deserialize(v) for k, v in item.items()}
        except (TypeError, ValueError) as e:
            raise DynamoSerializationError(
                f"Failed to deserialize record. error={e!s}", original_error=e
            ) from e
        result = self._restore_to_python(python_data)
        assert isinstance(result, dict)
        return result

    def serialize_cursor(self, last_evaluated_key: dict[str, Any]) -> dict[str, Any]:
        """
        Converts a LastEvaluatedKey to a plain dict, e.g. to hand it to another process.

        Input:  {"key": {"S": "lock-1"}}
        Output: {"key": "lock-1"}
        """
        return self.from_dynamo(last_evaluated_key)

    def deserialize_cursor(self, cursor: dict[str, Any]) -> dict[str, Any]:
        """Converts a plain dict cursor back to an ExclusiveStartKey."""
        return self.to_dynamo(cursor)

    def _prepare_for_dynamo(self, value: Any) -> Any:
        """
        Recursively prepares Python values for boto3's TypeSerializer.

        float -> Decimal, datetime/date -> ISO 8601, UUID -> str, Enum -> value.
        """
        if isinstance(value, float):
            # via str to avoid binary float artifacts
            return Decimal(str(value))
        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, UUID):
            return str(value)
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, (set, frozenset)):
            return {self._prepare_for_dynamo(v) for v in value}
        if isinstance(value, list):
            return [self._prepare_for_dynamo(v) for v in value]
        if isinstance(value, dict):
            return {k: self._prepare_for_dynamo(v) for k, v in value.items()}
        return value

    def _restore_to_python(self, value: Any) -> Any:
        """
        Recursively restores deserialized values.

        Decimal -> int (whole numbers) or float, Binary -> bytes.
        """
        if isinstance(value, Decimal):
            if value % 1 == 0:
                return int(value)
            return float(value)
        if isinstance(value, Binary):
            return bytes(value.value)
        if isinstance(value, list):
            return [self._restore_to_python(v) for v in value]
        if isinstance(value, dict):
            return {k: self._restore_to_python(v) for k, v in value.items()}
        if isinstance(value, (set, frozenset)):
            return {self._restore_to_python(v) for v in value}
        return value
