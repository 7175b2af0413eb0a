"""
Shared pytest fixtures for dynalock tests.

Provides mocked boto3 clients, table options, and a LocalStack client for
integration tests.
"""

import os
from unittest.mock import MagicMock

import boto3
import pytest

from dynalock import StoreClient, TableOptions
from tests.helpers.records import EchoFactory


@pytest.fixture
def echo_factory() -> EchoFactory:
    return EchoFactory()


@pytest.fixture
def mock_client():
    """
    Creates a fully mocked boto3 DynamoDB client.

    scan() returns an empty, final page unless a test overrides it.
    """
    client = MagicMock()
    client.scan.return_value = {"Items": [], "Count": 0, "ScannedCount": 0}
    return client


@pytest.fixture
def store(mock_client) -> StoreClient:
    return StoreClient(client=mock_client)


@pytest.fixture
def lock_options() -> TableOptions:
    return TableOptions(table_name="test_locks")


@pytest.fixture
def sorted_lock_options() -> TableOptions:
    return TableOptions(table_name="test_locks", sort_key_name="sortKey")


@pytest.fixture(scope="session")
def localstack_endpoint() -> str:
    """LocalStack endpoint URL from environment or default."""
    return os.getenv("LOCALSTACK_ENDPOINT", "http://localhost:4566")


@pytest.fixture(scope="session")
def localstack_client(localstack_endpoint: str):
    """
    Creates a boto3 client connected to LocalStack.

    Session-scoped to avoid creating multiple clients.
    """
    return boto3.client(
        "dynamodb",
        endpoint_url=localstack_endpoint,
        region_name="eu-south-1",
        aws_access_key_id="test",
        aws_secret_access_key="test",
    )


@pytest.fixture(scope="session")
def localstack_helper(localstack_endpoint: str):
    from tests.helpers.localstack import LocalStackHelper

    return LocalStackHelper(endpoint_url=localstack_endpoint)


@pytest.fixture
def clean_lock_table(localstack_helper):
    """
    Creates the lock table used by integration tests and empties it around each test.
    """
    table_name = "dynalock_integration_locks"
    localstack_helper.create_table(table_name, pk_name="key")
    localstack_helper.clear_table(table_name, pk_name="key")

    yield table_name

    localstack_helper.clear_table(table_name, pk_name="key")
