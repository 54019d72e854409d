"""Mapping from ISS type labels to GraphQL scalars."""

from datetime import datetime

from graphql import (
    GraphQLBoolean,
    GraphQLError,
    GraphQLFloat,
    GraphQLInt,
    GraphQLScalarType,
    GraphQLString,
    IntValueNode,
    StringValueNode,
)

from iss_graphql.errors import ConfigurationError, ValueNormalizationError

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _serialize_datetime(value):
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, str):
        return value
    raise GraphQLError(f"DateTime cannot represent value: {value!r}")


def _parse_datetime(value):
    if not isinstance(value, str):
        raise GraphQLError(f"DateTime cannot represent non-string value: {value!r}")
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise GraphQLError(f"DateTime cannot represent value: {value!r}") from e


def _parse_datetime_literal(node, _variables=None):
    if not isinstance(node, StringValueNode):
        raise GraphQLError("DateTime literal must be a string", node)
    return _parse_datetime(node.value)


GraphQLDateTime = GraphQLScalarType(
    name="DateTime",
    description="Date and time serialized as an ISO-8601 string.",
    serialize=_serialize_datetime,
    parse_value=_parse_datetime,
    parse_literal=_parse_datetime_literal,
)

def _coerce_long(value):
    if isinstance(value, bool):
        raise GraphQLError(f"Long cannot represent non-integer value: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise GraphQLError(f"Long cannot represent non-integer value: {value!r}")


def _parse_long_literal(node, _variables=None):
    if not isinstance(node, IntValueNode):
        raise GraphQLError("Long literal must be an integer", node)
    return int(node.value)


# ISS volumes and values overflow the 32-bit Int
GraphQLLong = GraphQLScalarType(
    name="Long",
    description="Signed 64-bit integer.",
    serialize=_coerce_long,
    parse_value=_coerce_long,
    parse_literal=_parse_long_literal,
)

TYPE_MAPPINGS = {
    "int32": GraphQLInt,
    "int64": GraphQLLong,
    "number": GraphQLLong,
    "string": GraphQLString,
    "date": GraphQLString,
    "time": GraphQLString,
    "var": GraphQLString,
    "datetime": GraphQLDateTime,
    "double": GraphQLFloat,
    "bool": GraphQLBoolean,
}


def to_scalar(label: str, where: str) -> GraphQLScalarType:
    """Map an ISS type label to its scalar; ``where`` names the column or argument."""
    try:
        return TYPE_MAPPINGS[label]
    except KeyError:
        raise ConfigurationError(f"unknown ISS type {label!r} for {where}") from None


def normalize_value(label: str, value):
    """Convert a raw row value according to its ISS type label.

    Only datetimes are converted, everything else passes through.
    """
    if label == "datetime" and value is not None:
        try:
            return datetime.strptime(value, DATETIME_FORMAT)
        except (TypeError, ValueError) as e:
            raise ValueNormalizationError(f"cannot parse datetime {value!r}: {e}") from e
    return value
