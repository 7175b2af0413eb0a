from .client import StoreClient
from .conditions import Attr, Condition, DynCondition
from .config import RequestMetricCollector, RequestMetrics, TableOptions, TableOptionsBuilder
from .exceptions import (
    DynalockError,
    DynamoSerializationError,
    ExhaustedIteratorError,
    ProvisionedThroughputExceededError,
    RecordConversionError,
    RequestTimeoutError,
    TableNotFoundError,
    UnsupportedOperationError,
    ValidationError,
)
from .factory import ModelRecordFactory, RecordFactory
from .models import LockItem, LockItemFactory
from .pagination import Page, ScanRequest, ScanState
from .scan import PaginatedScanIterator, ScanBuilder
from .serializer import DynamoSerializer
from .table import LockTable
from .threads import DaemonThreadCreator, NamedThreadCreator

__all__ = [
    # Scanning
    "PaginatedScanIterator",
    "ScanBuilder",
    "ScanRequest",
    "ScanState",
    "Page",
    "StoreClient",
    "DynamoSerializer",
    # Domain
    "LockTable",
    "LockItem",
    "LockItemFactory",
    "RecordFactory",
    "ModelRecordFactory",
    # Configuration
    "TableOptions",
    "TableOptionsBuilder",
    "RequestMetrics",
    "RequestMetricCollector",
    "NamedThreadCreator",
    "DaemonThreadCreator",
    # Filter DSL
    "Attr",
    "DynCondition",
    "Condition",
    # Exceptions
    "DynalockError",
    "ExhaustedIteratorError",
    "UnsupportedOperationError",
    "TableNotFoundError",
    "ProvisionedThroughputExceededError",
    "RequestTimeoutError",
    "ValidationError",
    "RecordConversionError",
    "DynamoSerializationError",
]
