"""Value casting system for DynamoDB items.

This module provides a simple, type-based system for casting raw source scalars
to DynamoDB attribute values based on the translated attribute type.
"""

from collections.abc import Callable

from migrate.types import AttributeType, AttributeValue, Scalar

TRUE_LITERALS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_LITERALS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def as_text(raw_value: Scalar) -> str:
    """Return the text form of a scalar, decoding bytes as UTF-8."""
    if raw_value is None:
        return ""
    if isinstance(raw_value, bytes):
        return raw_value.decode("utf-8", errors="replace")
    return raw_value


def parse_bool(text: str) -> bool:
    """Parse a boolean literal.

    Raises:
        ValueError: If text is not one of the accepted literals

    """
    if text in TRUE_LITERALS:
        return True
    if text in FALSE_LITERALS:
        return False
    msg = f"Invalid boolean literal: {text!r}"
    raise ValueError(msg)


def cast_number(raw_value: Scalar) -> AttributeValue:
    """Cast value to a number, keeping its decimal text unchanged."""
    if raw_value is None:
        return {"NULL": True}
    return {"N": as_text(raw_value)}


def cast_boolean(raw_value: Scalar) -> AttributeValue:
    """Cast value to a boolean, falling back to false on anything unparsable."""
    try:
        return {"BOOL": parse_bool(as_text(raw_value))}
    except ValueError:
        return {"BOOL": False}


def cast_binary(raw_value: Scalar) -> AttributeValue:
    """Cast value to its raw bytes; null becomes empty bytes."""
    if raw_value is None:
        return {"B": b""}
    if isinstance(raw_value, str):
        return {"B": raw_value.encode()}
    return {"B": raw_value}


def cast_string(raw_value: Scalar) -> AttributeValue:
    """Cast value to a string; null stays an explicit null."""
    if raw_value is None:
        return {"NULL": True}
    return {"S": as_text(raw_value)}


def value_caster(attribute_type: AttributeType) -> Callable[[Scalar], AttributeValue]:
    """Get casting function for an attribute type.

    Enables pre-computation of casters once per column instead of per value.

    Args:
        attribute_type: Translated attribute type of the column

    Returns:
        Casting function that takes a raw scalar and returns an attribute value

    """
    match attribute_type:
        case AttributeType.NUMBER:
            return cast_number
        case AttributeType.BOOLEAN:
            return cast_boolean
        case AttributeType.BINARY:
            return cast_binary
        case _:
            return cast_string
