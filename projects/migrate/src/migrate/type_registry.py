"""Type registry for mapping source columns to DynamoDB attribute types.

This module provides a priority-based registry of coercion rules. Each rule pairs
a matcher over the column metadata with the attribute type to emit; the highest
priority matching rule decides, and unmatched columns fall back to strings.
"""

from collections.abc import Callable

from migrate.types import AttributeType, ColumnDefinition

type Matcher = Callable[[ColumnDefinition], bool]


class TypeRegistry:
    """Priority-based registry for column type coercions."""

    def __init__(self, default: AttributeType = AttributeType.STRING) -> None:
        """Initialize an empty registry with a fallback attribute type."""
        # Store as (priority, matcher, attribute_type) tuples
        self._rules: list[tuple[int, Matcher, AttributeType]] = []
        self.default = default

    def exact(
        self,
        native_type: str,
        attribute_type: AttributeType,
        priority: int = 75,
    ) -> None:
        """Register rule for an exact native type match.

        Args:
            native_type: Native type name to match (case-insensitive)
            attribute_type: Attribute type to apply
            priority: Rule priority (higher = evaluated first), defaults to 75

        """
        self.register(
            lambda column: column.native_type.lower() == native_type.lower(),
            attribute_type,
            priority,
        )

    def suffix(
        self,
        suffix: str,
        attribute_type: AttributeType,
        priority: int = 50,
    ) -> None:
        """Register rule for native types ending with suffix.

        Args:
            suffix: Suffix to match (case-insensitive)
            attribute_type: Attribute type to apply
            priority: Rule priority (higher = evaluated first), defaults to 50

        """
        self.register(
            lambda column: column.native_type.lower().endswith(suffix.lower()),
            attribute_type,
            priority,
        )

    def register(
        self,
        matcher: Matcher,
        attribute_type: AttributeType,
        priority: int = 25,
    ) -> None:
        """Register rule with custom matcher function.

        Rules of equal priority are evaluated in registration order.

        Args:
            matcher: Function that takes a column definition and returns bool
            attribute_type: Attribute type to apply
            priority: Rule priority (higher = evaluated first), defaults to 25

        """
        self._rules.append((priority, matcher, attribute_type))

    def attribute_type(self, column: ColumnDefinition) -> AttributeType:
        """Get attribute type for a column - first match by priority wins."""
        for _priority, matcher, attribute_type in sorted(
            self._rules,
            key=lambda rule: rule[0],
            reverse=True,
        ):
            if matcher(column):
                return attribute_type
        return self.default

    def list_rules(self) -> list[tuple[int, str, str]]:
        """List all registered rules for debugging/inspection.

        Returns:
            List of (priority, matcher_description, attribute_type_name) tuples

        """
        return [
            (priority, getattr(matcher, "__name__", "custom_matcher"), kind.name)
            for priority, matcher, kind in self._rules
        ]


def is_primary_key(column: ColumnDefinition) -> bool:
    """Match primary key columns."""
    return column.primary_key


def create_default_registry(
    *,
    tinyint_as_bool: bool = False,
    force_pk_as_string: bool = False,
) -> TypeRegistry:
    """Create a type registry with the default coercion rules.

    Args:
        tinyint_as_bool: Map tinyint columns to booleans
        force_pk_as_string: Map primary key columns to strings whatever their type

    Returns:
        Configured TypeRegistry with default rules

    """
    registry = TypeRegistry()

    if force_pk_as_string:
        registry.register(is_primary_key, AttributeType.STRING, priority=100)

    if tinyint_as_bool:
        registry.exact("tinyint", AttributeType.BOOLEAN)

    # int, tinyint, smallint, mediumint, bigint
    registry.suffix("int", AttributeType.NUMBER)
    # blob, tinyblob, mediumblob, longblob
    registry.suffix("blob", AttributeType.BINARY)

    return registry
