"""Type synthesizer — builds record types from ISS column metadata."""

from typing import TYPE_CHECKING

from graphql import GraphQLField, GraphQLObjectType

from iss_graphql.errors import ConfigurationError
from iss_graphql.generator.scalars import normalize_value, to_scalar
from iss_graphql.naming import singularize, to_pascal, to_snake

if TYPE_CHECKING:
    from iss_graphql.generator.registry import SharedTypes


def synthesize_type(
    query_name: str, columns: dict[str, str], shared: "SharedTypes"
) -> GraphQLObjectType:
    """Build the record type returned by query ``query_name``.

    A shared type registered under the singular query name is returned as
    is; otherwise each column becomes a snake_case field.
    """
    key = singularize(query_name)
    shared_type = shared.output_type(key)
    if shared_type is not None:
        return shared_type

    type_name = to_pascal(key)
    return GraphQLObjectType(
        name=type_name,
        fields=column_fields(type_name, columns),
    )


def column_fields(type_name: str, columns: dict[str, str]) -> dict[str, GraphQLField]:
    """Build one field per column, in column name order."""
    fields: dict[str, GraphQLField] = {}
    sources: dict[str, str] = {}
    for column in sorted(columns):
        field_name = to_snake(column)
        if field_name in fields:
            raise ConfigurationError(
                f"{type_name}: columns {sources[field_name]!r} and {column!r} "
                f"both map to field {field_name!r}"
            )
        sources[field_name] = column
        fields[field_name] = column_field(field_name, columns[column], f"{type_name}.{column}")
    return fields


def column_field(field_name: str, label: str, where: str) -> GraphQLField:
    """Build a field reading column ``field_name`` from a raw row."""
    scalar = to_scalar(label, where)

    def resolve(row: dict, _info):
        # ISS column keys are upper case, field names are snake_case
        for key, value in row.items():
            if to_snake(key) == field_name:
                return normalize_value(label, value)
        return None

    return GraphQLField(scalar, resolve=resolve)
