import time
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .config import TableOptions
from .exceptions import DynamoSerializationError, RecordConversionError
from .serializer import DynamoSerializer

# Attribute names written by lock clients into every lock record
OWNER_NAME = "ownerName"
LEASE_DURATION = "leaseDuration"
RECORD_VERSION_NUMBER = "recordVersionNumber"
DATA = "data"
IS_RELEASED = "isReleased"


def monotonic_millis() -> int:
    """Milliseconds from a monotonic clock; only meaningful as a difference."""
    return time.monotonic_ns() // 1_000_000


class LockItem(BaseModel):
    """
    A lock record as read from the lock table.

    lookup_time is taken from a monotonic clock when the record is converted,
    so is_expired() measures the lease against the time the record was seen,
    not against any timestamp stored in the table.
    """

    model_config = ConfigDict(frozen=True)

    partition_key: str
    sort_key: str | None = None
    owner_name: str
    lease_duration: int = Field(ge=0, description="Lease duration in milliseconds")
    record_version_number: str
    data: bytes | None = None
    is_released: bool = False
    lookup_time: int = Field(default_factory=monotonic_millis)
    additional_attributes: dict[str, Any] = Field(default_factory=dict)

    @property
    def unique_identifier(self) -> str:
        """Partition key and sort key joined, identifying the lock within its table."""
        return self.partition_key + (self.sort_key or "")

    def is_expired(self, now: int | None = None) -> bool:
        """
        True if the lock was released or its lease ran out since it was read.

        Args:
            now: Current monotonic milliseconds; defaults to monotonic_millis()
        """
        if self.is_released:
            return True
        if now is None:
            now = monotonic_millis()
        return now - self.lookup_time > self.lease_duration


class LockItemFactory:
    """
    Converts raw lock table records into LockItem objects.

    Partition and sort key names come from the TableOptions. Attributes that are
    not part of the lock schema end up in LockItem.additional_attributes.
    """

    def __init__(
        self,
        options: TableOptions,
        serializer: DynamoSerializer | None = None,
        clock: Callable[[], int] = monotonic_millis,
    ) -> None:
        self.options = options
        self.serializer = serializer or DynamoSerializer()
        self.clock = clock

    def create(self, raw: dict[str, Any]) -> LockItem:
        try:
            data = self.serializer.from_dynamo(raw)
        except DynamoSerializationError as e:
            raise RecordConversionError(str(e), record=raw, original_error=e) from e

        partition_key = data.pop(self.options.partition_key_name, None)
        sort_key = None
        if self.options.sort_key_name:
            sort_key = data.pop(self.options.sort_key_name, None)
        owner_name = data.pop(OWNER_NAME, None)
        lease_duration = data.pop(LEASE_DURATION, None)
        record_version_number = data.pop(RECORD_VERSION_NUMBER, None)

        required = {
            self.options.partition_key_name: partition_key,
            OWNER_NAME: owner_name,
            LEASE_DURATION: lease_duration,
            RECORD_VERSION_NUMBER: record_version_number,
        }
        if self.options.sort_key_name:
            required[self.options.sort_key_name] = sort_key
        missing = sorted(name for name, value in required.items() if value is None)
        if missing:
            raise RecordConversionError(
                f"Lock record is missing required attributes: {', '.join(missing)}", record=raw
            )

        try:
            lease_millis = int(lease_duration)
        except (TypeError, ValueError) as e:
            raise RecordConversionError(
                f"Invalid {LEASE_DURATION} value: {lease_duration!r}", record=raw, original_error=e
            ) from e

        payload = data.pop(DATA, None)
        is_released = data.pop(IS_RELEASED, None) is not None

        try:
            return LockItem(
                partition_key=partition_key,
                sort_key=sort_key,
                owner_name=owner_name,
                lease_duration=lease_millis,
                record_version_number=record_version_number,
                data=payload,
                is_released=is_released,
                lookup_time=self.clock(),
                additional_attributes=data,
            )
        except PydanticValidationError as e:
            raise RecordConversionError(
                f"Invalid lock record: {e}", record=raw, original_error=e
            ) from e
