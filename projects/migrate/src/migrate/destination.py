"""DynamoDB destination for migrated items."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from migrate.errors import ProvisioningError, TransportError

if TYPE_CHECKING:
    from migrate.types import AttributeType, Item

logger = getLogger(__name__)

# BatchWriteItem accepts at most 25 put requests per call
MAX_BATCH_SIZE = 25
BILLING_MODE = "PAY_PER_REQUEST"


class Destination(Protocol):
    """Key-value store that receives migrated items."""

    max_batch_size: int

    def create_table(
        self,
        table_name: str,
        key_name: str,
        key_type: AttributeType,
    ) -> bool:
        """Create a table keyed on one hash attribute, False if it already exists."""
        ...

    def wait_until_active(self, table_name: str) -> None:
        """Block until the table accepts writes."""
        ...

    def batch_write(self, table_name: str, items: list[Item]) -> list[Item]:
        """Put items in one bulk request and return those left unprocessed."""
        ...


def dynamodb(region_name: str | None = None, endpoint_url: str | None = None) -> Any:  # noqa: ANN401
    """Get a DynamoDB client from the default credential chain."""
    return boto3.client(
        "dynamodb",
        region_name=region_name,
        endpoint_url=endpoint_url,
    )


class DynamoDestination:
    """Writes items to DynamoDB through a boto3 client."""

    max_batch_size = MAX_BATCH_SIZE

    def __init__(self, client: Any) -> None:  # noqa: ANN401
        """Initialize destination with a low-level DynamoDB client."""
        self._client = client

    def create_table(
        self,
        table_name: str,
        key_name: str,
        key_type: AttributeType,
    ) -> bool:
        """Create an on-demand table with a single hash key.

        Returns:
            True if the table was created, False if it already existed

        Raises:
            ProvisioningError: If the table could not be created

        """
        try:
            self._client.create_table(
                TableName=table_name,
                BillingMode=BILLING_MODE,
                AttributeDefinitions=[
                    {"AttributeName": key_name, "AttributeType": key_type.value},
                ],
                KeySchema=[{"AttributeName": key_name, "KeyType": "HASH"}],
            )
        except ClientError as error:
            if error.response["Error"]["Code"] == "ResourceInUseException":
                logger.info("Table %s already exists", table_name)
                return False
            msg = f"Failed attempting to create table {table_name}: {error}"
            raise ProvisioningError(msg) from error
        except BotoCoreError as error:
            msg = f"Failed attempting to create table {table_name}: {error}"
            raise ProvisioningError(msg) from error
        logger.info("Created table %s keyed on %s", table_name, key_name)
        return True

    def wait_until_active(self, table_name: str) -> None:
        """Poll until the table exists and is active."""
        try:
            self._client.get_waiter("table_exists").wait(TableName=table_name)
        except (BotoCoreError, ClientError) as error:
            msg = f"Table {table_name} did not become active: {error}"
            raise ProvisioningError(msg) from error

    def batch_write(self, table_name: str, items: list[Item]) -> list[Item]:
        """Put items with one BatchWriteItem call.

        Raises:
            TransportError: If the request itself failed

        """
        requests = [{"PutRequest": {"Item": item}} for item in items]
        try:
            response = self._client.batch_write_item(
                RequestItems={table_name: requests},
            )
        except (BotoCoreError, ClientError) as error:
            msg = f"Batch write of {len(items)} items to {table_name} failed: {error}"
            raise TransportError(msg) from error

        unprocessed = response.get("UnprocessedItems", {}).get(table_name, [])
        return [request["PutRequest"]["Item"] for request in unprocessed]
