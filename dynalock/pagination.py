"""
Pagination value types for dynalock scans.

A ScanRequest describes one scan and carries the continuation token between
page fetches. A Page is the result of a single fetch. ScanState tracks where a
paginated scan stands.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ScanState(Enum):
    """
    Progress of a paginated scan.

    NOT_STARTED: no page has been fetched yet.
    IN_PROGRESS: at least one page was fetched and the store reported more.
    EXHAUSTED: the store reported no further pages. Buffered items may remain.
    """

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    EXHAUSTED = "exhausted"


@dataclass
class ScanRequest:
    """
    Parameters of a DynamoDB scan.

    Everything except exclusive_start_key is fixed once the request is built.
    exclusive_start_key is the continuation token and is only advanced by the
    iterator that owns the request.
    """

    table_name: str
    filter_expression: str | None = None
    expression_attribute_names: dict[str, str] = field(default_factory=dict)
    expression_attribute_values: dict[str, Any] = field(default_factory=dict)
    limit: int | None = None
    segment: int | None = None
    total_segments: int | None = None
    consistent_read: bool = False
    exclusive_start_key: dict[str, Any] | None = None

    def to_kwargs(self) -> dict[str, Any]:
        """Renders the request as keyword arguments for the boto3 low-level scan() call."""
        kwargs: dict[str, Any] = {"TableName": self.table_name}
        if self.filter_expression:
            kwargs["FilterExpression"] = self.filter_expression
        if self.expression_attribute_names:
            kwargs["ExpressionAttributeNames"] = dict(self.expression_attribute_names)
        if self.expression_attribute_values:
            kwargs["ExpressionAttributeValues"] = dict(self.expression_attribute_values)
        if self.limit:
            kwargs["Limit"] = self.limit
        if self.total_segments is not None:
            kwargs["Segment"] = self.segment
            kwargs["TotalSegments"] = self.total_segments
        if self.consistent_read:
            kwargs["ConsistentRead"] = True
        if self.exclusive_start_key:
            kwargs["ExclusiveStartKey"] = self.exclusive_start_key
        return kwargs


@dataclass
class Page:
    """
    One page of raw scan results.

    Attributes:
        items: Raw records in DynamoDB JSON format, in store order. Entries may be None or empty.
        last_evaluated_key: Continuation token for the next page (None if no more pages)
    """

    items: list[dict[str, Any] | None]
    last_evaluated_key: dict[str, Any] | None = None

    @property
    def has_more(self) -> bool:
        """Returns True if the store reported more pages."""
        return self.last_evaluated_key is not None
