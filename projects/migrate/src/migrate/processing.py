"""Batched conversion of source rows into DynamoDB writes."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, NamedTuple

from migrate.errors import ConfigurationError
from migrate.value_casters import value_caster

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from migrate.destination import Destination
    from migrate.types import (
        AttributeDefinition,
        AttributeValue,
        ColumnDefinition,
        Item,
        Row,
        RowStream,
        Scalar,
    )

    type Caster = Callable[[Scalar], AttributeValue]

logger = getLogger(__name__)

DEFAULT_BATCH_SIZE = 25


class MigrationResult(NamedTuple):
    """Outcome of migrating the rows of one table."""

    table_name: str
    items: int
    batches: int
    unprocessed: int = 0


class BatchWriter:
    """Accumulates items and writes them to one table in fixed-size batches.

    A batch is flushed as soon as the running item count reaches a multiple of
    the batch size; ``flush`` writes whatever remains at the end of the stream.
    Failed requests are not retried, and unprocessed items reported by a
    successful request are only counted.
    """

    def __init__(
        self,
        destination: Destination,
        table_name: str,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        """Initialize an empty writer for a destination table."""
        self._destination = destination
        self._table_name = table_name
        self._batch_size = batch_size
        self._pending: list[Item] = []
        self.items = 0
        self.batches = 0
        self.unprocessed = 0

    def __len__(self) -> int:
        """Number of items waiting to be flushed."""
        return len(self._pending)

    def add(self, item: Item) -> None:
        """Queue an item, flushing once the batch is full."""
        self._pending.append(item)
        self.items += 1
        if self.items % self._batch_size == 0:
            self.flush()

    def flush(self) -> None:
        """Write all pending items in one request, if there are any."""
        if not self._pending:
            return

        items, self._pending = self._pending, []
        unprocessed = self._destination.batch_write(self._table_name, items)
        self.batches += 1

        if unprocessed:
            logger.warning(
                "%d of %d items were not processed by %s",
                len(unprocessed),
                len(items),
                self._table_name,
            )
            self.unprocessed += len(unprocessed)

    def result(self) -> MigrationResult:
        """Summarize what has been written so far."""
        return MigrationResult(
            self._table_name,
            self.items,
            self.batches,
            self.unprocessed,
        )


def to_item(row: Row, names: Sequence[str], casters: Sequence[Caster]) -> Item:
    """Convert a row into an item using pre-computed attribute names and casters."""
    return {
        name: cast(raw_value)
        for name, cast, raw_value in zip(names, casters, row, strict=True)
    }


def migrate_rows(
    destination: Destination,
    table_name: str,
    rows: RowStream,
    columns: Sequence[ColumnDefinition],
    attributes: Sequence[AttributeDefinition],
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> MigrationResult:
    """Stream rows into the destination table in batches.

    Args:
        destination: Store receiving the items
        table_name: Destination table name
        rows: Cursor over the source rows, consumed exactly once
        columns: Source column definitions, aligned with each row
        attributes: Translated attribute definitions, aligned with columns
        batch_size: Maximum number of items per write request

    Returns:
        MigrationResult with the number of items and requests written

    Raises:
        ConfigurationError: If the batch size or column alignment is invalid
        TransportError: If a write request fails

    """
    if not 1 <= batch_size <= destination.max_batch_size:
        msg = (
            f"Batch size must be between 1 and {destination.max_batch_size}, "
            f"got {batch_size}"
        )
        raise ConfigurationError(msg)

    if not len(columns) == len(attributes) == len(rows.fields):
        msg = (
            f"Number of columns from result set ({len(rows.fields)}) and "
            f"metadata ({len(columns)} columns, {len(attributes)} attributes) "
            f"mismatch for {table_name}"
        )
        raise ConfigurationError(msg)

    # Resolve names and casters once, not per row
    names = [attribute.name for attribute in attributes]
    casters = [value_caster(attribute.attribute_type) for attribute in attributes]

    writer = BatchWriter(destination, table_name, batch_size)
    for row in rows:
        writer.add(to_item(row, names, casters))

    # Remaining items of a partial batch
    writer.flush()

    logger.info(
        "Wrote %d items to %s in %d batches",
        writer.items,
        table_name,
        writer.batches,
    )
    return writer.result()
