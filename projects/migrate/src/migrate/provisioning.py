"""Provision destination tables before migrating rows into them."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, NamedTuple

from migrate.errors import ConfigurationError
from migrate.translation import primary_key
from migrate.types import KEY_ATTRIBUTE_TYPES, AttributeDefinition

if TYPE_CHECKING:
    from collections.abc import Iterable

    from migrate.destination import Destination

logger = getLogger(__name__)


class TableReady(NamedTuple):
    """Destination table confirmed active."""

    table_name: str
    key: AttributeDefinition
    created: bool


def ensure_table(
    destination: Destination,
    table_name: str,
    attributes: Iterable[AttributeDefinition],
) -> TableReady:
    """Create the destination table if missing and wait until it is active.

    Only the primary key attribute is declared; every other attribute is
    supplied per item.

    Args:
        destination: Store to provision the table in
        table_name: Destination table name
        attributes: Translated attribute definitions of the source table

    Returns:
        TableReady describing the active table

    Raises:
        ConfigurationError: If the key is missing, composite or not a key type
        ProvisioningError: If the destination rejects the table

    """
    key = primary_key(attributes)
    if key.attribute_type not in KEY_ATTRIBUTE_TYPES:
        msg = (
            f"Key attribute {key.name} of {table_name} has type "
            f"{key.attribute_type.name}, expected NUMBER, STRING or BINARY"
        )
        raise ConfigurationError(msg)

    created = destination.create_table(table_name, key.name, key.attribute_type)
    destination.wait_until_active(table_name)
    logger.debug("Table %s is active", table_name)

    return TableReady(table_name, key, created)
