from collections.abc import Iterator

from .client import StoreClient
from .conditions import Attr
from .config import TableOptions
from .models import IS_RELEASED, LockItem, LockItemFactory
from .scan import ScanBuilder


class LockTable:
    """
    Read access to the lock items of one DynamoDB lock table.

    Usage:
        table = LockTable(TableOptions.builder("locks").with_sort_key_name("holder").build())
        for lock in table.all_locks():
            print(lock.partition_key, lock.owner_name)
    """

    def __init__(self, options: TableOptions, store: StoreClient | None = None) -> None:
        self.options = options
        self.store = store or StoreClient(
            region=options.region, metric_collector=options.request_metric_collector
        )
        self.factory = LockItemFactory(options)

    def scan(self) -> ScanBuilder[LockItem]:
        """Returns a scan builder over every record of the table."""
        return ScanBuilder(self.store, self.options.table_name, self.factory)

    def all_locks(self) -> Iterator[LockItem]:
        """Lazily iterates every lock item, released ones included."""
        return iter(self.scan())

    def active_locks(self) -> Iterator[LockItem]:
        """Lazily iterates lock items that have not been released."""
        return iter(self.scan().filter(Attr(IS_RELEASED).not_exists()))

    def __repr__(self) -> str:
        return f"LockTable({self.options.table_name!r})"
