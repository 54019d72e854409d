"""Exceptions raised while building the schema and resolving queries.

Build-time errors abort schema generation. Query-time errors are raised
from resolvers and reported by the GraphQL executor as error entries.
"""


class IssGraphQLError(Exception):
    """Base class for all errors raised by iss_graphql."""


class TransportError(IssGraphQLError):
    """A request to ISS could not be completed."""


class HttpStatusError(TransportError):
    """ISS answered with a non-success status code."""

    def __init__(self, url: str, status_code: int):
        super().__init__(f"{url} answered with HTTP {status_code}")
        self.url = url
        self.status_code = status_code


class ReferenceParseError(IssGraphQLError):
    """A reference page does not have the expected structure."""


class MetadataError(IssGraphQLError):
    """Column metadata could not be read."""


class ConfigurationError(IssGraphQLError):
    """A generation spec produces an invalid schema."""


class DuplicateFieldError(ConfigurationError):
    """Several generation specs produce the same query field name."""

    def __init__(self, collisions: dict[str, list[int]]):
        details = "; ".join(
            f"{name} (references {', '.join(str(ref) for ref in refs)})"
            for name, refs in sorted(collisions.items())
        )
        super().__init__(f"duplicate query fields: {details}")
        self.collisions = collisions


class SchemaBuildError(IssGraphQLError):
    """The merged fields do not form a valid GraphQL schema."""


class MissingArgumentError(IssGraphQLError):
    """A required path argument has no value at query time."""


class ResponseShapeError(IssGraphQLError):
    """A data response does not have the extended JSON shape."""


class ValueNormalizationError(IssGraphQLError):
    """A raw column value cannot be converted to its scalar type."""
