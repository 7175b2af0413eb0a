"""
Single-page DynamoDB scans.

StoreClient runs one boto3 scan call per page and turns the response into a
Page. Client errors are translated into the dynalock exception hierarchy.
"""

import threading
import time
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, ClassVar

import boto3

from ._logging import logger, redact_key
from .config import RequestMetricCollector, RequestMetrics
from .exceptions import handle_dynamo_errors
from .pagination import Page, ScanRequest


class StoreClient:
    """
    Issues single-page scans against DynamoDB.

    Wraps a boto3 low-level DynamoDB client. The client is shared by reference;
    opening and closing it is the caller's business. Retries are left to botocore.
    """

    _client_context: ClassVar[ContextVar[Any | None]] = ContextVar(
        "dynalock_client", default=None
    )

    def __init__(
        self,
        client: Any | None = None,
        region: str | None = None,
        metric_collector: RequestMetricCollector | None = None,
    ) -> None:
        self._client = client
        self._client_lock = threading.Lock()
        self.region = region
        self.metric_collector = metric_collector

    def _get_client(self) -> Any:
        """
        Returns the boto3 DynamoDB client to use for the next call.

        Resolution order: a client scoped with using_client(), then the client
        given at construction or via set_client(), then a lazily created default.
        """
        ctx_client = self._client_context.get()
        if ctx_client is not None:
            return ctx_client

        if self._client is not None:
            return self._client

        # Segment threads can race here; only one default client is ever created.
        with self._client_lock:
            if self._client is None:
                if self.region:
                    self._client = boto3.client("dynamodb", region_name=self.region)
                else:
                    self._client = boto3.client("dynamodb")
        return self._client

    @classmethod
    @contextmanager
    def using_client(cls, client: Any) -> Generator[None, None, None]:
        """
        Scopes a client to a block of code. Thread-safe and async-safe using contextvars.

        Usage:
            with StoreClient.using_client(localstack_client):
                locks = list(table.all_locks())
        """
        token = cls._client_context.set(client)
        try:
            yield
        finally:
            cls._client_context.reset(token)

    def set_client(self, client: Any) -> None:
        """Replaces the client used by this StoreClient."""
        self._client = client

    def fetch_page(self, request: ScanRequest) -> Page:
        """
        Runs exactly one scan call for the request and returns the resulting page.

        The request is not modified. An empty LastEvaluatedKey is treated the
        same as an absent one.

        Raises:
            DynalockError: (or a subclass) when DynamoDB rejects the call
        """
        kwargs = request.to_kwargs()
        if self.metric_collector is not None:
            kwargs["ReturnConsumedCapacity"] = "TOTAL"

        logger.debug(
            "Fetching scan page",
            extra={
                "table": request.table_name,
                "operation": "scan",
                "segment": request.segment,
                "cursor_hash": redact_key(request.exclusive_start_key),
            },
        )

        client = self._get_client()
        started = time.monotonic()
        with handle_dynamo_errors(table_name=request.table_name):
            response = client.scan(**kwargs)
        duration = time.monotonic() - started

        items = response.get("Items") or []
        last_evaluated_key = response.get("LastEvaluatedKey") or None

        logger.info(
            "Scan page fetched",
            extra={
                "table": request.table_name,
                "operation": "scan",
                "segment": request.segment,
                "item_count": len(items),
                "has_more": last_evaluated_key is not None,
            },
        )

        if self.metric_collector is not None:
            capacity = response.get("ConsumedCapacity") or {}
            self.metric_collector(
                RequestMetrics(
                    operation="Scan",
                    table_name=request.table_name,
                    item_count=response.get("Count", len(items)),
                    scanned_count=response.get("ScannedCount", len(items)),
                    consumed_capacity=capacity.get("CapacityUnits"),
                    duration_seconds=duration,
                )
            )

        return Page(items=list(items), last_evaluated_key=last_evaluated_key)
