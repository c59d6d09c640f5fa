"""Relational source of table metadata and rows."""

from __future__ import annotations

from datetime import date, time
from logging import getLogger
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    URL,
    Engine,
    MetaData,
    String,
    Table,
    create_engine,
    inspect,
    select,
    type_coerce,
)
from sqlalchemy.exc import SQLAlchemyError

from migrate.errors import SourceError
from migrate.types import ColumnDefinition

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection, CursorResult
    from sqlalchemy.types import TypeEngine

    from migrate.types import Row, Scalar

logger = getLogger(__name__)

# Spellings that name the same native type as the MySQL data_type
NATIVE_TYPE_ALIASES = {
    "integer": "int",
    "big_integer": "bigint",
    "small_integer": "smallint",
    "large_binary": "blob",
}


def mysql(
    host: str = "localhost",
    port: int = 3306,
    username: str = "root",
    password: str = "root",  # noqa: S107
    database: str = "",
) -> Engine:
    """Get an engine to a MySQL database."""
    url = URL.create(
        "mysql+pymysql",
        username=username,
        password=password,
        host=host,
        port=port,
        database=database,
    )
    return create_engine(url)


def native_type_name(sql_type: TypeEngine[Any]) -> str:
    """Get the lower-case base name of a reflected column type.

    Examples:
        TINYINT(1) -> tinyint
        VARCHAR(255) -> varchar
        INTEGER -> int

    """
    name = str(getattr(sql_type, "__visit_name__", type(sql_type).__name__)).lower()
    return NATIVE_TYPE_ALIASES.get(name, name)


def to_scalar(value: Any) -> Scalar:  # noqa: ANN401
    """Fold a driver value into its raw text or bytes form."""
    if value is None:
        return None
    if isinstance(value, bytes | bytearray | memoryview):
        return bytes(value)
    if isinstance(value, bool):
        return "1" if value else "0"
    # Covers datetime, a subclass of date
    if isinstance(value, date | time):
        return value.isoformat()
    return str(value)


class ResultRowStream:
    """Single-pass cursor over a table, owning its connection."""

    def __init__(self, connection: Connection, result: CursorResult[Any]) -> None:
        """Initialize stream over an executed result."""
        self._connection = connection
        self._result = result

    @property
    def fields(self) -> tuple[str, ...]:
        """Column names of the result set."""
        return tuple(self._result.keys())

    def __iter__(self) -> Iterator[Row]:
        """Yield each row as a tuple of scalars."""
        try:
            for row in self._result:
                yield tuple(to_scalar(value) for value in row)
        except SQLAlchemyError as error:
            msg = f"Failed reading rows: {error}"
            raise SourceError(msg) from error

    def close(self) -> None:
        """Release the cursor and its connection."""
        self._result.close()
        self._connection.close()


class RelationalSource:
    """Reads table metadata and rows through SQLAlchemy."""

    def __init__(self, engine: Engine, database: str | None = None) -> None:
        """Initialize source with an engine and the name of its database."""
        self._engine = engine
        self.database = database or engine.url.database or ""

    def list_tables(self) -> list[str]:
        """Return the names of all tables in the database."""
        try:
            return inspect(self._engine).get_table_names()
        except SQLAlchemyError as error:
            msg = f"Failed listing tables of {self.database}: {error}"
            raise SourceError(msg) from error

    def list_columns(self, table_name: str) -> list[ColumnDefinition]:
        """Return the columns of a table in physical order."""
        try:
            inspector = inspect(self._engine)
            columns = inspector.get_columns(table_name)
            primary_keys = set(
                inspector.get_pk_constraint(table_name)["constrained_columns"],
            )
        except SQLAlchemyError as error:
            msg = f"Failed reading columns of {table_name}: {error}"
            raise SourceError(msg) from error

        return [
            ColumnDefinition(
                name=column["name"],
                native_type=native_type_name(column["type"]),
                primary_key=column["name"] in primary_keys,
            )
            for column in columns
        ]

    def stream_rows(self, table_name: str) -> ResultRowStream:
        """Open a streaming cursor over all rows of a table.

        The caller owns the returned stream and must close it.
        """
        try:
            table = Table(table_name, MetaData(), autoload_with=self._engine)
            connection = self._engine.connect()
        except SQLAlchemyError as error:
            msg = f"Failed reflecting {table_name}: {error}"
            raise SourceError(msg) from error

        # Plain String skips result processing, so JSON and SET columns keep
        # the text the driver returned
        query = select(
            *(type_coerce(column, String).label(column.name) for column in table.c),
        )
        try:
            result = connection.execution_options(stream_results=True).execute(query)
        except SQLAlchemyError as error:
            connection.close()
            msg = f"Failed querying {table_name}: {error}"
            raise SourceError(msg) from error

        logger.debug("Streaming rows of %s", table_name)
        return ResultRowStream(connection, result)
