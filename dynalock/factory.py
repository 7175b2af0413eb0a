"""
Record factories turn raw scanned records into domain objects.

A factory is any object with a create(raw) method. The scan iterator calls it
once per non-empty record and lets its errors propagate.
"""

from typing import Any, Generic, Protocol, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .exceptions import DynamoSerializationError, RecordConversionError
from .serializer import DynamoSerializer

T_co = TypeVar("T_co", covariant=True)
M = TypeVar("M", bound=BaseModel)


class RecordFactory(Protocol[T_co]):
    """Converts one raw DynamoDB record into a domain object."""

    def create(self, raw: dict[str, Any]) -> T_co: ...


class ModelRecordFactory(Generic[M]):
    """
    Builds pydantic models from raw records.

    Usage:
        class Heartbeat(BaseModel):
            key: str
            ownerName: str

        factory = ModelRecordFactory(Heartbeat)
        factory.create({"key": {"S": "a"}, "ownerName": {"S": "worker-1"}})
    """

    def __init__(self, model_cls: type[M], serializer: DynamoSerializer | None = None) -> None:
        self.model_cls = model_cls
        self.serializer = serializer or DynamoSerializer()

    def create(self, raw: dict[str, Any]) -> M:
        try:
            data = self.serializer.from_dynamo(raw)
            return self.model_cls.model_validate(data)
        except (PydanticValidationError, DynamoSerializationError) as e:
            raise RecordConversionError(
                f"Cannot build {self.model_cls.__name__} from record: {e}",
                record=raw,
                original_error=e,
            ) from e

    def __repr__(self) -> str:
        return f"ModelRecordFactory({self.model_cls.__name__})"
