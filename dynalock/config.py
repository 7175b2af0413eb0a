from dataclasses import dataclass, field
from typing import Any, Protocol

DEFAULT_PARTITION_KEY_NAME = "key"


@dataclass(frozen=True)
class RequestMetrics:
    """
    Metrics for one DynamoDB request, handed to a RequestMetricCollector.

    Attributes:
        operation: DynamoDB operation name (e.g. "Scan")
        table_name: Table the request ran against
        item_count: Items returned after filtering
        scanned_count: Items evaluated before filtering
        consumed_capacity: Read capacity units consumed, if DynamoDB reported them
        duration_seconds: Wall-clock duration of the call
    """

    operation: str
    table_name: str
    item_count: int
    scanned_count: int
    consumed_capacity: float | None
    duration_seconds: float


class RequestMetricCollector(Protocol):
    """Receives a RequestMetrics record after every successful store request."""

    def __call__(self, metrics: RequestMetrics) -> None: ...


@dataclass(frozen=True)
class TableOptions:
    """
    Configuration of the lock table to read.

    Attributes:
        table_name: Name of the DynamoDB table
        partition_key_name: Partition key attribute name ("key" unless configured)
        sort_key_name: Sort key attribute name, None if the table only has a partition key
        region: AWS region for the default boto3 client (None uses the boto3 default chain)
        request_metric_collector: Optional hook called with per-request metrics
    """

    table_name: str
    partition_key_name: str = DEFAULT_PARTITION_KEY_NAME
    sort_key_name: str | None = None
    region: str | None = None
    request_metric_collector: RequestMetricCollector | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.table_name:
            raise ValueError("table_name must not be empty")
        if not self.partition_key_name:
            raise ValueError("partition_key_name must not be empty")

    @property
    def key_names(self) -> tuple[str, ...]:
        """Primary key attribute names, partition key first."""
        if self.sort_key_name:
            return (self.partition_key_name, self.sort_key_name)
        return (self.partition_key_name,)

    @classmethod
    def builder(cls, table_name: str) -> "TableOptionsBuilder":
        """
        Starts a fluent builder for TableOptions.

        Usage:
            options = (
                TableOptions.builder("locks")
                .with_partition_key_name("resource")
                .with_sort_key_name("holder")
                .build()
            )
        """
        return TableOptionsBuilder(table_name)


class TableOptionsBuilder:
    """Fluent builder for TableOptions. Unset values keep the TableOptions defaults."""

    def __init__(self, table_name: str) -> None:
        self._options: dict[str, Any] = {"table_name": table_name}

    def with_partition_key_name(self, partition_key_name: str) -> "TableOptionsBuilder":
        self._options["partition_key_name"] = partition_key_name
        return self

    def with_sort_key_name(self, sort_key_name: str | None) -> "TableOptionsBuilder":
        self._options["sort_key_name"] = sort_key_name
        return self

    def with_region(self, region: str | None) -> "TableOptionsBuilder":
        self._options["region"] = region
        return self

    def with_request_metric_collector(
        self, collector: RequestMetricCollector | None
    ) -> "TableOptionsBuilder":
        self._options["request_metric_collector"] = collector
        return self

    def build(self) -> TableOptions:
        return TableOptions(**self._options)

    def __repr__(self) -> str:
        return f"TableOptionsBuilder({self._options!r})"
