"""Shared fixtures for migration tests."""

from collections.abc import Callable, Iterable, Iterator

import pytest

from migrate.errors import TransportError
from migrate.types import AttributeType, ColumnDefinition, Item, Row


class FakeDestination:
    """In-memory destination recording every call."""

    max_batch_size = 25

    def __init__(self) -> None:
        """Initialize with no tables."""
        self.tables: dict[str, tuple[str, AttributeType]] = {}
        self.active: list[str] = []
        self.writes: list[tuple[str, list[Item]]] = []
        self.fail_on_write: int | None = None
        self.unprocessed = 0

    def create_table(
        self,
        table_name: str,
        key_name: str,
        key_type: AttributeType,
    ) -> bool:
        """Create a table unless it exists."""
        if table_name in self.tables:
            return False
        self.tables[table_name] = (key_name, key_type)
        return True

    def wait_until_active(self, table_name: str) -> None:
        """Record the wait."""
        self.active.append(table_name)

    def batch_write(self, table_name: str, items: list[Item]) -> list[Item]:
        """Record the batch, failing on the configured call."""
        if self.fail_on_write == len(self.writes):
            msg = "connection reset"
            raise TransportError(msg)
        self.writes.append((table_name, items))
        return items[: self.unprocessed]

    def batch_sizes(self) -> list[int]:
        """Sizes of the recorded batches in write order."""
        return [len(items) for _table, items in self.writes]


class ListRowStream:
    """Row stream over a list of rows."""

    def __init__(self, fields: Iterable[str], rows: Iterable[Row]) -> None:
        """Initialize with field names and rows."""
        self.fields = tuple(fields)
        self._rows = list(rows)
        self.consumed = False
        self.closed = False

    def __iter__(self) -> Iterator[Row]:
        """Yield the rows once."""
        if self.consumed:
            msg = "Row stream already consumed"
            raise RuntimeError(msg)
        self.consumed = True
        yield from self._rows

    def close(self) -> None:
        """Mark the stream closed."""
        self.closed = True


@pytest.fixture(name="destination")
def fake_destination() -> FakeDestination:
    """Provide an empty in-memory destination."""
    return FakeDestination()


@pytest.fixture(name="make_rows")
def row_stream_factory() -> Callable[..., ListRowStream]:
    """Provide a factory for row streams."""
    return ListRowStream


@pytest.fixture(name="users_columns")
def users_column_definitions() -> list[ColumnDefinition]:
    """Columns of a typical users table."""
    return [
        ColumnDefinition("id", "int", primary_key=True),
        ColumnDefinition("name", "varchar"),
        ColumnDefinition("active", "tinyint"),
        ColumnDefinition("photo", "blob"),
    ]
