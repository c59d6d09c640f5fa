"""Tests for the DynamoDB destination against a stubbed client."""

from collections.abc import Iterator
from typing import Any

import boto3
import pytest
from botocore.stub import Stubber

from migrate.destination import BILLING_MODE, MAX_BATCH_SIZE, DynamoDestination
from migrate.errors import ProvisioningError, TransportError
from migrate.types import AttributeType


@pytest.fixture(name="client")
def dynamodb_client() -> Any:  # noqa: ANN401
    """Create a DynamoDB client that never reaches AWS."""
    return boto3.client(
        "dynamodb",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",  # noqa: S106
    )


@pytest.fixture(name="stubber")
def client_stubber(client: Any) -> Iterator[Stubber]:  # noqa: ANN401
    """Activate a stubber and check every stubbed call was made."""
    with Stubber(client) as stubber:
        yield stubber
        stubber.assert_no_pending_responses()


def create_table_params(table_name: str, key_name: str, key_type: str) -> dict:
    """Build the expected CreateTable request."""
    return {
        "TableName": table_name,
        "BillingMode": BILLING_MODE,
        "AttributeDefinitions": [
            {"AttributeName": key_name, "AttributeType": key_type},
        ],
        "KeySchema": [{"AttributeName": key_name, "KeyType": "HASH"}],
    }


def test_create_table(client: Any, stubber: Stubber) -> None:  # noqa: ANN401
    """Test an on-demand table with a single hash key is requested."""
    stubber.add_response(
        "create_table",
        {"TableDescription": {"TableName": "users"}},
        create_table_params("users", "Id", "N"),
    )

    created = DynamoDestination(client).create_table(
        "users",
        "Id",
        AttributeType.NUMBER,
    )

    assert created is True


def test_create_existing_table(client: Any, stubber: Stubber) -> None:  # noqa: ANN401
    """Test an existing table is not an error."""
    stubber.add_client_error(
        "create_table",
        service_error_code="ResourceInUseException",
        service_message="Table already exists: users",
        http_status_code=400,
        expected_params=create_table_params("users", "Id", "S"),
    )

    created = DynamoDestination(client).create_table(
        "users",
        "Id",
        AttributeType.STRING,
    )

    assert created is False


def test_create_table_failure(client: Any, stubber: Stubber) -> None:  # noqa: ANN401
    """Test other create errors become provisioning errors."""
    stubber.add_client_error(
        "create_table",
        service_error_code="AccessDeniedException",
        http_status_code=400,
    )

    with pytest.raises(ProvisioningError, match="users"):
        DynamoDestination(client).create_table("users", "Id", AttributeType.NUMBER)


def test_wait_until_active(client: Any, stubber: Stubber) -> None:  # noqa: ANN401
    """Test waiting polls the table description."""
    stubber.add_response(
        "describe_table",
        {"Table": {"TableName": "users", "TableStatus": "ACTIVE"}},
        {"TableName": "users"},
    )

    DynamoDestination(client).wait_until_active("users")


def test_wait_until_active_failure(client: Any, stubber: Stubber) -> None:  # noqa: ANN401
    """Test unexpected errors while waiting become provisioning errors."""
    stubber.add_client_error(
        "describe_table",
        service_error_code="AccessDeniedException",
        http_status_code=400,
    )

    with pytest.raises(ProvisioningError, match="did not become active"):
        DynamoDestination(client).wait_until_active("users")


def test_batch_write(client: Any, stubber: Stubber) -> None:  # noqa: ANN401
    """Test items are sent as put requests of one table."""
    items = [
        {"Id": {"N": "1"}, "Photo": {"B": b"\x00\x01"}},
        {"Id": {"N": "2"}, "Active": {"BOOL": True}, "Name": {"NULL": True}},
    ]
    stubber.add_response(
        "batch_write_item",
        {"UnprocessedItems": {}},
        {"RequestItems": {"users": [{"PutRequest": {"Item": i}} for i in items]}},
    )

    unprocessed = DynamoDestination(client).batch_write("users", items)

    assert unprocessed == []


def test_batch_write_returns_unprocessed(client: Any, stubber: Stubber) -> None:  # noqa: ANN401
    """Test per-item failures are returned, not raised."""
    items = [{"Id": {"N": "1"}}, {"Id": {"N": "2"}}]
    stubber.add_response(
        "batch_write_item",
        {"UnprocessedItems": {"users": [{"PutRequest": {"Item": {"Id": {"N": "2"}}}}]}},
    )

    unprocessed = DynamoDestination(client).batch_write("users", items)

    assert unprocessed == [{"Id": {"N": "2"}}]


def test_batch_write_failure(client: Any, stubber: Stubber) -> None:  # noqa: ANN401
    """Test request failures become transport errors."""
    stubber.add_client_error(
        "batch_write_item",
        service_error_code="ProvisionedThroughputExceededException",
        http_status_code=400,
    )

    with pytest.raises(TransportError, match="users"):
        DynamoDestination(client).batch_write("users", [{"Id": {"N": "1"}}])


def test_max_batch_size() -> None:
    """Test the batch limit matches BatchWriteItem."""
    assert DynamoDestination.max_batch_size == MAX_BATCH_SIZE == 25
