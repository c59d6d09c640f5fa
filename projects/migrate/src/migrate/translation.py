"""Translate source column metadata into DynamoDB attribute definitions."""

import re
from collections.abc import Iterable

from migrate.errors import ConfigurationError
from migrate.type_registry import TypeRegistry, create_default_registry
from migrate.types import AttributeDefinition, ColumnDefinition

DELIMITERS = re.compile(r"[\W_]+")


def split_words(name: str) -> list[str]:
    """Split an identifier into words.

    Words are separated by delimiters (anything that is not a letter or digit)
    and by case changes: ``lower|Upper``, ``digit|Upper`` and the end of an
    acronym (``HTTP|Server``).
    """
    words: list[str] = []
    for chunk in DELIMITERS.split(name):
        start = 0
        for index in range(1, len(chunk)):
            previous, char = chunk[index - 1], chunk[index]
            following = chunk[index + 1 : index + 2]
            if char.isupper() and (
                previous.islower()
                or previous.isdigit()
                or (previous.isupper() and following.islower())
            ):
                words.append(chunk[start:index])
                start = index
        if chunk:
            words.append(chunk[start:])
    return words


def upper_camel_case(name: str) -> str:
    """Convert an identifier to UpperCamelCase, e.g. ``user_id`` -> ``UserId``."""
    return "".join(word.capitalize() for word in split_words(name))


def translate(
    columns: Iterable[ColumnDefinition],
    *,
    tinyint_as_bool: bool = False,
    force_pk_as_string: bool = False,
    registry: TypeRegistry | None = None,
) -> list[AttributeDefinition]:
    """Derive destination attribute definitions from source columns.

    Args:
        columns: Source columns in physical order
        tinyint_as_bool: Map tinyint columns to booleans
        force_pk_as_string: Map primary key columns to strings
        registry: Custom coercion rules, overriding the two flags

    Returns:
        One attribute definition per column, in the same order

    Raises:
        ConfigurationError: If there are no columns, or a column name
            normalizes to an empty or already used attribute name

    """
    registry = registry or create_default_registry(
        tinyint_as_bool=tinyint_as_bool,
        force_pk_as_string=force_pk_as_string,
    )
    attributes: list[AttributeDefinition] = []
    sources: dict[str, str] = {}
    for column in columns:
        name = upper_camel_case(column.name)
        if not name:
            msg = f"Column {column.name!r} has no letters or digits to name it"
            raise ConfigurationError(msg)
        if name in sources:
            msg = (
                f"Columns {sources[name]!r} and {column.name!r} "
                f"both map to attribute {name!r}"
            )
            raise ConfigurationError(msg)
        sources[name] = column.name
        attributes.append(
            AttributeDefinition(
                name=name,
                attribute_type=registry.attribute_type(column),
                primary_key=column.primary_key,
            ),
        )
    if not attributes:
        msg = "Cannot translate a table without columns"
        raise ConfigurationError(msg)
    return attributes


def primary_key(attributes: Iterable[AttributeDefinition]) -> AttributeDefinition:
    """Return the single primary key attribute.

    Raises:
        ConfigurationError: If no attribute, or more than one, is a primary key

    """
    keys = [attribute for attribute in attributes if attribute.primary_key]
    if not keys:
        msg = "Table has no primary key"
        raise ConfigurationError(msg)
    if len(keys) > 1:
        names = ", ".join(key.name for key in keys)
        msg = f"Composite primary keys are not supported: {names}"
        raise ConfigurationError(msg)
    return keys[0]
