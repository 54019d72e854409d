"""Query field builder — one GraphQL query field per reference block."""

import structlog
from graphql import GraphQLEnumType, GraphQLField, GraphQLList

from iss_graphql.client import IssClient
from iss_graphql.errors import ConfigurationError
from iss_graphql.generator.arguments import generate_arguments
from iss_graphql.generator.registry import SharedTypes
from iss_graphql.generator.resolver import BlockResolver
from iss_graphql.generator.specs import GenerationSpec
from iss_graphql.generator.types import synthesize_type
from iss_graphql.naming import is_graphql_name, to_camel, to_pascal
from iss_graphql.parser.base import ReferenceDescriptor

logger = structlog.get_logger()


def query_name(block_name: str, spec: GenerationSpec) -> str:
    """Derive the query field name of a block."""
    name = spec.query_name_overrides.get(block_name, block_name)
    if spec.name_prefix is not None:
        return to_camel(spec.name_prefix) + to_pascal(name)
    if spec.name_suffix is not None:
        return to_camel(name) + to_pascal(spec.name_suffix)
    return name


def build_query_fields(
    spec: GenerationSpec,
    descriptor: ReferenceDescriptor,
    metadata: dict[str, dict[str, str]],
    shared: SharedTypes,
    client: IssClient,
) -> dict[str, GraphQLField]:
    """Build the query fields of one reference, keyed by final name."""
    fields: dict[str, GraphQLField] = {}
    enums: dict[str, GraphQLEnumType] = {}

    for block in descriptor.blocks:
        name = query_name(block.name, spec)
        if not is_graphql_name(name):
            raise ConfigurationError(
                f"block {block.name!r} of reference {spec.reference_id} gives invalid "
                f"query name {name!r}; add it to query_name_overrides"
            )
        if name in fields:
            raise ConfigurationError(
                f"reference {spec.reference_id} produces query {name!r} more than once"
            )

        record = synthesize_type(name, metadata.get(block.name, {}), shared)
        if not record.fields:
            logger.warning(
                "block_without_columns", reference=spec.reference_id, block=block.name
            )
            continue

        fields[name] = GraphQLField(
            GraphQLList(record),
            args=generate_arguments(descriptor.required_args, block.args, spec, shared, enums),
            resolve=BlockResolver(client, descriptor.path, descriptor.required_args, block.name),
            description=block.description or None,
        )

    return fields
