"""Main module for relational to DynamoDB migration."""

from __future__ import annotations

from contextlib import closing
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, NamedTuple, Protocol

from migrate.errors import MigrationError
from migrate.processing import DEFAULT_BATCH_SIZE, MigrationResult, migrate_rows
from migrate.provisioning import ensure_table
from migrate.translation import primary_key, translate

if TYPE_CHECKING:
    from migrate.destination import Destination
    from migrate.types import ColumnDefinition, RowStream

logger = getLogger(__name__)


class Source(Protocol):
    """Relational database the rows are read from."""

    database: str

    def list_tables(self) -> list[str]:
        """Return the names of all tables."""
        ...

    def list_columns(self, table_name: str) -> list[ColumnDefinition]:
        """Return the columns of a table in physical order."""
        ...

    def stream_rows(self, table_name: str) -> RowStream:
        """Open a cursor over all rows of a table."""
        ...


@dataclass(frozen=True)
class MigrationOptions:
    """Options for a migration run."""

    # Table to migrate, None migrates every table of the database
    table: str | None = None
    prefix_with_database: bool = False
    prefix_separator: str = "_"
    tinyint_as_bool: bool = False
    force_pk_as_string: bool = False
    create_table: bool = False
    batch_size: int = DEFAULT_BATCH_SIZE
    continue_on_error: bool = False


class TableOutcome(NamedTuple):
    """Result or error of migrating a single table."""

    table: str
    result: MigrationResult | None = None
    error: MigrationError | None = None

    @property
    def ok(self) -> bool:
        """Whether the table migrated without error."""
        return self.error is None


def destination_table_name(
    database: str,
    table: str,
    options: MigrationOptions,
) -> str:
    """Get the DynamoDB table name for a source table."""
    if options.prefix_with_database:
        return f"{database}{options.prefix_separator}{table}"
    return table


def migrate_table(
    source: Source,
    destination: Destination,
    table: str,
    options: MigrationOptions,
) -> MigrationResult:
    """Migrate one table, optionally creating its destination table first.

    Args:
        source: Relational source to read from
        destination: Store to write to
        table: Source table name
        options: Migration options

    Returns:
        MigrationResult of the written rows

    Raises:
        MigrationError: If the table cannot be migrated

    """
    columns = source.list_columns(table)
    attributes = translate(
        columns,
        tinyint_as_bool=options.tinyint_as_bool,
        force_pk_as_string=options.force_pk_as_string,
    )
    # Checked before any write, whether or not the table gets created
    primary_key(attributes)

    table_name = destination_table_name(source.database, table, options)
    if options.create_table:
        ensure_table(destination, table_name, attributes)

    with closing(source.stream_rows(table)) as rows:
        return migrate_rows(
            destination,
            table_name,
            rows,
            columns,
            attributes,
            options.batch_size,
        )


def migrate_database(
    source: Source,
    destination: Destination,
    options: MigrationOptions,
) -> list[TableOutcome]:
    """Migrate the selected table, or all tables, of the source database.

    Tables are migrated one after another. Unless ``continue_on_error`` is set,
    the run stops at the first failing table; tables migrated before it stay
    written and the remaining tables are not attempted.

    Returns:
        One outcome per attempted table, in migration order

    """
    tables = [options.table] if options.table else source.list_tables()

    outcomes: list[TableOutcome] = []
    for table in tables:
        try:
            result = migrate_table(source, destination, table, options)
        except MigrationError as error:
            logger.error("Migration of %s failed: %s", table, error)  # noqa: TRY400
            outcomes.append(TableOutcome(table, error=error))
            if not options.continue_on_error:
                break
            continue
        outcomes.append(TableOutcome(table, result=result))

    return outcomes
