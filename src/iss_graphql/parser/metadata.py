"""Column metadata fetcher.

ISS answers ``<path>.json?iss.meta=on&iss.data=off`` with one object per
block, each carrying a ``metadata`` map of column name to type info::

    {"securities": {"metadata": {"SECID": {"type": "string", "bytes": 36}}}}

These types, not the reference page, decide how output fields are typed.
"""

import json

import structlog

from iss_graphql.client import IssClient
from iss_graphql.errors import HttpStatusError, MetadataError

from .reference import PLACEHOLDER_PATTERN

logger = structlog.get_logger()


def fetch_column_metadata(
    client: IssClient, path: str, default_args: dict[str, str] | None = None
) -> dict[str, dict[str, str]]:
    """Fetch {block name: {column: type label}} for a reference path."""
    resolved = substitute_defaults(path, default_args or {})
    unresolved = bool(PLACEHOLDER_PATTERN.search(resolved))

    try:
        body = client.fetch_metadata(resolved)
    except HttpStatusError as e:
        if not unresolved:
            raise
        logger.warning("metadata_unavailable", path=resolved, status=e.status_code)
        return {}

    try:
        return parse_column_metadata(body)
    except MetadataError:
        if not unresolved:
            raise
        logger.warning("metadata_unreadable", path=resolved)
        return {}


def substitute_defaults(path: str, default_args: dict[str, str]) -> str:
    """Replace [name] placeholders that have a default value."""
    for name, value in default_args.items():
        path = path.replace(f"[{name}]", value)
    return path


def parse_column_metadata(body: bytes | str) -> dict[str, dict[str, str]]:
    """Parse a metadata response body into {block name: {column: type label}}."""
    if not body or not body.strip():
        return {}

    try:
        doc = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MetadataError(f"metadata response is not JSON: {e}") from e
    if not isinstance(doc, dict):
        raise MetadataError(f"metadata response is a {type(doc).__name__}, expected an object")

    result: dict[str, dict[str, str]] = {}
    for block_name, block in doc.items():
        columns = block.get("metadata") if isinstance(block, dict) else None
        if not isinstance(columns, dict):
            result[block_name] = {}
            continue
        result[block_name] = {
            column: _type_of(block_name, column, info) for column, info in columns.items()
        }
    return result


def _type_of(block_name: str, column: str, info) -> str:
    if not isinstance(info, dict) or not isinstance(info.get("type"), str):
        raise MetadataError(f"column {block_name}.{column} has no type")
    return info["type"]
