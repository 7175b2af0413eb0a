"""
Example listing the locks held in a DynamoDB lock table.

Run against LocalStack:
    LOCALSTACK_ENDPOINT=http://localhost:4566 python examples/list_locks.py
"""

import logging
import os
import threading

import boto3

from dynalock import Attr, LockTable, RequestMetrics, StoreClient, TableOptions

logging.basicConfig(level=logging.INFO)

client = boto3.client(
    "dynamodb",
    endpoint_url=os.getenv("LOCALSTACK_ENDPOINT", "http://localhost:4566"),
    region_name="eu-south-1",
    aws_access_key_id="test",
    aws_secret_access_key="test",
)


def print_metrics(metrics: RequestMetrics) -> None:
    print(
        f"  [{metrics.operation}] {metrics.item_count}/{metrics.scanned_count} items, "
        f"{metrics.consumed_capacity} RCU, {metrics.duration_seconds * 1000:.1f} ms"
    )


options = TableOptions.builder("lockTable").with_partition_key_name("key").build()
table = LockTable(options, store=StoreClient(client=client, metric_collector=print_metrics))

# 1. Every lock, released ones included
print("All locks:")
for lock in table.all_locks():
    state = "released" if lock.is_released else f"held by {lock.owner_name}"
    print(f"  {lock.unique_identifier}: {state} (lease {lock.lease_duration} ms)")

# 2. Only locks still held, small pages
print("\nActive locks, 5 per page:")
for lock in table.scan().page_size(5).filter(Attr("isReleased").not_exists()):
    print(f"  {lock.partition_key} -> {lock.owner_name}")

# 3. Locks held by one owner
owner = table.scan().filter(Attr("ownerName") == "worker-1").first()
print(f"\nFirst lock of worker-1: {owner.partition_key if owner else None}")

# 4. Parallel scan with 4 segments
counter_lock = threading.Lock()
owners: dict[str, int] = {}


def count_owner(lock) -> None:
    with counter_lock:
        owners[lock.owner_name] = owners.get(lock.owner_name, 0) + 1


total = table.scan().parallel(4, count_owner)
print(f"\nParallel scan saw {total} locks: {owners}")
