"""
Lazy paginated scans.

PaginatedScanIterator walks every record of a scan one page at a time, fetching
the next page only once the caller has consumed the current one. ScanBuilder
configures scans fluently and hands out a fresh iterator per traversal.
"""

import contextvars
import threading
from collections.abc import Callable, Iterable, Iterator
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar

from ._logging import logger
from .exceptions import ExhaustedIteratorError, UnsupportedOperationError
from .pagination import Page, ScanRequest, ScanState
from .serializer import DynamoSerializer
from .threads import DaemonThreadCreator, NamedThreadCreator

if TYPE_CHECKING:
    from .conditions import Condition, DynCondition
    from .factory import RecordFactory

T = TypeVar("T")


class PageFetcher(Protocol):
    """Anything that can run one scan call, usually a StoreClient."""

    def fetch_page(self, request: ScanRequest) -> Page: ...


class PaginatedScanIterator(Iterator[T], Generic[T]):
    """
    Lazy-loaded. Forward-only. Not thread safe.

    Holds at most one converted page. The owned ScanRequest's
    exclusive_start_key is advanced after each page; nothing else about the
    request changes. Empty or None records are skipped without being passed to
    the factory.

    Errors from the store or the factory propagate unchanged and leave the
    iterator as it was, so calling has_more() again retries the same page.
    """

    def __init__(self, store: PageFetcher, request: ScanRequest, factory: "RecordFactory[T]"):
        if store is None:
            raise ValueError("store must not be None")
        if request is None:
            raise ValueError("request must not be None")
        if factory is None:
            raise ValueError("factory must not be None")

        self._store = store
        self._request = request
        self._factory = factory

        self._current_page: list[T] = []
        self._cursor = 0
        self._state = ScanState.NOT_STARTED

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def request(self) -> ScanRequest:
        return self._request

    def has_more(self) -> bool:
        """
        Returns True if another item can be returned.

        Fetches pages until one yields at least one item or the store runs out,
        so a page with only empty records never ends the scan early.
        """
        while self._cursor == len(self._current_page) and self._has_another_page_to_load():
            self._load_next_page()

        return self._cursor < len(self._current_page)

    def __next__(self) -> T:
        if not self.has_more():
            raise ExhaustedIteratorError()

        item = self._current_page[self._cursor]
        self._cursor += 1
        return item

    def next(self) -> T:
        """Same as the builtin next(iterator)."""
        return self.__next__()

    def __iter__(self) -> "PaginatedScanIterator[T]":
        return self

    def remove(self) -> None:
        raise UnsupportedOperationError("remove")

    def _has_another_page_to_load(self) -> bool:
        return self._state is not ScanState.EXHAUSTED

    def _load_next_page(self) -> None:
        # Nothing is assigned until the page is fetched and fully converted.
        page = self._store.fetch_page(self._request)
        converted = [self._factory.create(raw) for raw in page.items if raw]

        self._current_page = converted
        self._cursor = 0
        self._request.exclusive_start_key = page.last_evaluated_key
        self._state = ScanState.IN_PROGRESS if page.has_more else ScanState.EXHAUSTED


class ScanBuilder(Iterable[T], Generic[T]):
    """
    Builder for paginated scans.

    Chain options before iterating; every iteration starts a new scan from the
    first page, or from the cursor given to start_from().

    Usage:
        builder = ScanBuilder(store, "locks", LockItemFactory(options))
        for lock in builder.filter(Attr("ownerName") == "worker-1").page_size(100):
            ...
    """

    def __init__(
        self,
        store: PageFetcher,
        table_name: str,
        factory: "RecordFactory[T]",
        serializer: DynamoSerializer | None = None,
    ):
        self.store = store
        self.table_name = table_name
        self.factory = factory
        self.serializer = serializer or DynamoSerializer()

        self.limit_val: int | None = None
        self.segment_val: int | None = None
        self.total_segments_val: int | None = None
        self.consistent_read_val = False
        self.filter_condition: DynCondition | None = None
        self.start_cursor: dict[str, Any] | None = None

    # --- SCAN OPTIONS ---

    def filter(self, condition: "Condition") -> "ScanBuilder[T]":
        """
        Adds a filter condition. Multiple calls are combined with AND.

        Filtering happens server-side after items are read, so pages may come
        back sparse or empty; the iterator keeps fetching through them.
        """
        from .conditions import wrap_condition

        new_condition = wrap_condition(condition)
        if self.filter_condition is not None:
            self.filter_condition = self.filter_condition & new_condition
        else:
            self.filter_condition = new_condition
        return self

    def page_size(self, count: int) -> "ScanBuilder[T]":
        """Sets the maximum number of items DynamoDB evaluates per page (Limit)."""
        if count < 1:
            raise ValueError(f"page size must be positive, got {count}")
        self.limit_val = count
        return self

    def segment(self, segment: int, total_segments: int) -> "ScanBuilder[T]":
        """Restricts the scan to one segment of a parallel scan."""
        if total_segments < 1:
            raise ValueError(f"total_segments must be positive, got {total_segments}")
        if not 0 <= segment < total_segments:
            raise ValueError(f"segment must be in [0, {total_segments}), got {segment}")
        self.segment_val = segment
        self.total_segments_val = total_segments
        return self

    def consistent_read(self, enabled: bool = True) -> "ScanBuilder[T]":
        self.consistent_read_val = enabled
        return self

    def start_from(self, cursor: dict[str, Any] | None) -> "ScanBuilder[T]":
        """
        Resumes a scan from a cursor made by DynamoSerializer.serialize_cursor().

        Not carried over to parallel segments, whose tokens are per segment.
        """
        self.start_cursor = cursor
        return self

    def build_request(self) -> ScanRequest:
        """Returns a new ScanRequest for the current options."""
        request = ScanRequest(
            table_name=self.table_name,
            limit=self.limit_val,
            segment=self.segment_val,
            total_segments=self.total_segments_val,
            consistent_read=self.consistent_read_val,
        )

        if self.start_cursor:
            request.exclusive_start_key = self.serializer.deserialize_cursor(self.start_cursor)

        if self.filter_condition is not None:
            from .conditions import compile_filter

            params = compile_filter(self.filter_condition, self.serializer)
            request.filter_expression = params["FilterExpression"]
            request.expression_attribute_names = params.get("ExpressionAttributeNames", {})
            request.expression_attribute_values = params.get("ExpressionAttributeValues", {})

        return request

    def _copy_for_segment(self, segment: int, total_segments: int) -> "ScanBuilder[T]":
        clone: ScanBuilder[T] = ScanBuilder(
            self.store, self.table_name, self.factory, self.serializer
        )
        clone.limit_val = self.limit_val
        clone.consistent_read_val = self.consistent_read_val
        clone.filter_condition = self.filter_condition
        return clone.segment(segment, total_segments)

    # --- EXECUTION STRATEGIES ---

    def __iter__(self) -> PaginatedScanIterator[T]:
        """
        Lazy execution: no request is sent until the iterator is advanced.
        """
        request = self.build_request()
        logger.info(
            "Starting scan iteration",
            extra={
                "table": self.table_name,
                "operation": "scan",
                "has_filter": request.filter_expression is not None,
                "limit": self.limit_val,
                "segment": self.segment_val,
                "total_segments": self.total_segments_val,
            },
        )
        return PaginatedScanIterator(self.store, request, self.factory)

    def all(self) -> list[T]:
        """
        Consumes the whole scan into a list.
        WARNING: holds every record in memory.
        """
        return list(self)

    def first(self) -> T | None:
        """Returns the first item of the scan, or None if the scan is empty."""
        return next(iter(self), None)

    def parallel(
        self,
        total_segments: int,
        consumer: Callable[[T], Any],
        thread_creator: NamedThreadCreator | None = None,
    ) -> int:
        """
        Scans all segments concurrently, one thread and one iterator per segment.

        consumer is called from the worker threads and must be thread-safe.
        Any segment filter already set on this builder is replaced.

        Returns:
            Number of items handed to the consumer

        Raises:
            The first error raised by any segment, after every thread finished.
        """
        if total_segments < 1:
            raise ValueError(f"total_segments must be positive, got {total_segments}")

        creator = thread_creator or DaemonThreadCreator()
        thread_factory = creator.create_thread_with_name(f"dynalock-scan-{self.table_name}")

        lock = threading.Lock()
        counts = [0] * total_segments
        errors: list[BaseException] = []

        def run_segment(segment: int) -> None:
            try:
                for item in self._copy_for_segment(segment, total_segments):
                    consumer(item)
                    counts[segment] += 1
            except Exception as e:
                logger.warning(
                    "Scan segment failed",
                    extra={
                        "table": self.table_name,
                        "operation": "parallel_scan",
                        "segment": segment,
                        "error": type(e).__name__,
                    },
                )
                with lock:
                    errors.append(e)

        # Workers run in a copy of the caller's context so using_client() scopes apply.
        threads = [
            thread_factory(
                lambda segment=segment, ctx=contextvars.copy_context(): ctx.run(
                    run_segment, segment
                )
            )
            for segment in range(total_segments)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        if errors:
            raise errors[0]
        return sum(counts)
