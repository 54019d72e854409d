"""Schema generator — runs one generation task per spec and merges the results."""

from concurrent.futures import ThreadPoolExecutor, as_completed

import structlog
from graphql import GraphQLField, GraphQLObjectType, GraphQLSchema, validate_schema

from iss_graphql.client import IssClient
from iss_graphql.errors import DuplicateFieldError, SchemaBuildError
from iss_graphql.generator.fields import build_query_fields
from iss_graphql.generator.registry import SharedTypes, build_shared_types
from iss_graphql.generator.specs import GenerationSpec
from iss_graphql.parser.metadata import fetch_column_metadata
from iss_graphql.parser.reference import parse_reference

logger = structlog.get_logger()


def generate_queries(
    spec: GenerationSpec, client: IssClient, shared: SharedTypes
) -> dict[str, GraphQLField]:
    """Generate the query fields of one reference."""
    logger.info("generating_queries", reference=spec.reference_id)

    descriptor = parse_reference(client.fetch_reference(spec.reference_id))
    metadata = fetch_column_metadata(client, descriptor.path, spec.default_args)
    fields = build_query_fields(spec, descriptor, metadata, shared, client)

    logger.info("queries_generated", reference=spec.reference_id, queries=list(fields))
    return fields


def parallel_generate_queries(
    specs: list[GenerationSpec],
    client: IssClient,
    shared: SharedTypes,
    max_workers: int | None = None,
) -> dict[str, GraphQLField]:
    """Generate all specs concurrently and merge their fields.

    Any failed task aborts the whole build. A query name produced by more
    than one spec raises DuplicateFieldError naming every collision, so the
    outcome does not depend on which task finishes first. The merged map is
    ordered by spec, then by block.
    """
    results: dict[int, dict[str, GraphQLField]] = {}
    owners: dict[str, list[int]] = {}

    with ThreadPoolExecutor(max_workers=max_workers or max(len(specs), 1)) as executor:
        futures = {
            executor.submit(generate_queries, spec, client, shared): index
            for index, spec in enumerate(specs)
        }
        try:
            for future in as_completed(futures):
                index = futures[future]
                results[index] = future.result()
                for name in results[index]:
                    owners.setdefault(name, []).append(specs[index].reference_id)
        except Exception:
            for future in futures:
                future.cancel()
            raise

    collisions = {name: sorted(refs) for name, refs in owners.items() if len(refs) > 1}
    if collisions:
        raise DuplicateFieldError(collisions)

    merged: dict[str, GraphQLField] = {}
    for index in range(len(specs)):
        merged.update(results[index])
    return merged


def build_schema(
    specs: list[GenerationSpec],
    client: IssClient,
    shared: SharedTypes | None = None,
    max_workers: int | None = None,
) -> GraphQLSchema:
    """Build the GraphQL schema exposing every block of every spec."""
    fields = parallel_generate_queries(specs, client, shared or build_shared_types(), max_workers)
    if not fields:
        raise SchemaBuildError("no query fields were generated")

    try:
        schema = GraphQLSchema(query=GraphQLObjectType(name="RootQuery", fields=fields))
    except TypeError as e:
        # graphql-core reports clashing type names this way
        raise SchemaBuildError(str(e)) from e

    errors = validate_schema(schema)
    if errors:
        raise SchemaBuildError("; ".join(error.message for error in errors))

    logger.info("schema_built", queries=len(fields))
    return schema
