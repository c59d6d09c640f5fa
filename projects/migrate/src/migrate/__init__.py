"""Migrate module for DynamoDB Toolkit."""

from migrate.destination import DynamoDestination, dynamodb
from migrate.errors import (
    ConfigurationError,
    MigrationError,
    ProvisioningError,
    SourceError,
    TransportError,
)
from migrate.main import (
    MigrationOptions,
    TableOutcome,
    destination_table_name,
    migrate_database,
    migrate_table,
)
from migrate.processing import MigrationResult, migrate_rows
from migrate.provisioning import TableReady, ensure_table
from migrate.source import RelationalSource, mysql
from migrate.translation import primary_key, translate

__all__ = [
    "ConfigurationError",
    "DynamoDestination",
    "MigrationError",
    "MigrationOptions",
    "MigrationResult",
    "ProvisioningError",
    "RelationalSource",
    "SourceError",
    "TableOutcome",
    "TableReady",
    "TransportError",
    "destination_table_name",
    "dynamodb",
    "ensure_table",
    "migrate_database",
    "migrate_rows",
    "migrate_table",
    "mysql",
    "primary_key",
    "translate",
]
