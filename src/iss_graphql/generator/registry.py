"""Shared GraphQL types reused by every generation task.

GraphQL requires type names to be unique, so types that several
references expose (the engine record, the language selector) are built
once here, before generation starts, and never changed afterwards.
"""

from types import MappingProxyType
from typing import Mapping

from graphql import GraphQLEnumType, GraphQLEnumValue, GraphQLInputType, GraphQLObjectType

from iss_graphql.generator.types import column_fields
from iss_graphql.naming import to_pascal, to_screaming_snake

ENGINE_COLUMNS = {"id": "int32", "name": "string", "title": "string"}


class SharedTypes:
    """Read-only lookup of shared output types and argument input types."""

    def __init__(
        self,
        output_types: Mapping[str, GraphQLObjectType] | None = None,
        input_types: Mapping[str, GraphQLInputType] | None = None,
    ):
        self._output_types = MappingProxyType(dict(output_types or {}))
        self._input_types = MappingProxyType(dict(input_types or {}))

    def output_type(self, key: str) -> GraphQLObjectType | None:
        """Shared record type for a singular query name, if any."""
        return self._output_types.get(key)

    def input_type(self, arg_name: str) -> GraphQLInputType | None:
        """Shared input type for an argument name, if any."""
        return self._input_types.get(arg_name)


def generate_enum(name: str, values: list[str]) -> GraphQLEnumType:
    """Build an enum named after ``name``; members are upper snake case of each value."""
    return GraphQLEnumType(
        name=to_pascal(name),
        values={to_screaming_snake(value): GraphQLEnumValue(value) for value in values},
    )


def build_shared_types() -> SharedTypes:
    """Build the shared types used by the ISS references."""
    engine = GraphQLObjectType(name="Engine", fields=column_fields("Engine", ENGINE_COLUMNS))
    return SharedTypes(
        output_types={"engine": engine},
        input_types={"lang": generate_enum("Language", ["ru", "en"])},
    )
