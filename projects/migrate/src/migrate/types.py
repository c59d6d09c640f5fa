"""Type definitions for relational to DynamoDB migration."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, NamedTuple, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterator

# Raw form of a single source value: absent, text or bytes
type Scalar = str | bytes | None
type Row = tuple[Scalar, ...]

# DynamoDB low-level attribute value, e.g. {"N": "42"} or {"NULL": True}
type AttributeValue = dict[str, str | bytes | bool]
type Item = dict[str, AttributeValue]


class AttributeType(StrEnum):
    """DynamoDB attribute types, valued with their wire tags."""

    NUMBER = "N"
    STRING = "S"
    BINARY = "B"
    BOOLEAN = "BOOL"


# Types DynamoDB accepts for key attributes
KEY_ATTRIBUTE_TYPES = frozenset(
    {AttributeType.NUMBER, AttributeType.STRING, AttributeType.BINARY},
)


class ColumnDefinition(NamedTuple):
    """Source column metadata."""

    name: str
    native_type: str
    primary_key: bool = False


class AttributeDefinition(NamedTuple):
    """Destination attribute derived from a source column."""

    name: str
    attribute_type: AttributeType
    primary_key: bool = False


class RowStream(Protocol):
    """Forward-only, single-pass cursor over the rows of one table."""

    @property
    def fields(self) -> tuple[str, ...]:
        """Column names of the underlying result."""
        ...

    def __iter__(self) -> Iterator[Row]:
        """Yield rows one at a time."""
        ...

    def close(self) -> None:
        """Release the cursor."""
        ...
