"""Data resolver — fetches the rows of one block at query time.

A call moves through requesting (path and parameters built, one request
sent), parsing (extended JSON unpacked) and ends with the row list or an
exception, which the GraphQL executor reports as a field error. Scalar
values are normalized later, by the record field resolvers.
"""

import json
from urllib.parse import quote

import structlog

from iss_graphql.client import IssClient
from iss_graphql.errors import MissingArgumentError, ResponseShapeError

logger = structlog.get_logger()


class BlockResolver:
    """Resolves a query field to the rows of one ISS block."""

    def __init__(self, client: IssClient, path: str, required_args: list[str], block_name: str):
        self.client = client
        self.path = path
        self.required_args = required_args
        self.block_name = block_name

    def __call__(self, _root, _info, **args) -> list[dict]:
        path, params = self.build_request(args)
        logger.debug("block_request", block=self.block_name, path=path)
        body = self.client.fetch_data(path, params)
        return self.parse_rows(body)

    def build_request(self, args: dict) -> tuple[str, list[tuple[str, str]]]:
        """Return the resolved path and the query parameters for ``args``."""
        path = self.path
        remaining = dict(args)
        for name in self.required_args:
            value = remaining.pop(name, None)
            if value is None:
                raise MissingArgumentError(f"argument {name!r} is required by {self.path}")
            path = path.replace(f"[{name}]", quote(str(value), safe=""))

        params = [
            ("iss.meta", "off"),
            ("iss.data", "on"),
            ("iss.json", "extended"),
            ("iss.only", self.block_name),
        ]
        for name in sorted(remaining):
            if remaining[name] is not None:
                params.append((name, _format_param(remaining[name])))
        return path, params

    def parse_rows(self, body: bytes | str) -> list[dict]:
        """Extract this block's rows from an extended JSON response."""
        if not body or not body.strip():
            return []

        try:
            doc = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ResponseShapeError(f"{self.block_name}: response is not JSON: {e}") from e

        if not isinstance(doc, list) or len(doc) != 2 or not isinstance(doc[1], dict):
            raise ResponseShapeError(f"{self.block_name}: expected [charset, data] response")

        rows = doc[1].get(self.block_name)
        if not isinstance(rows, list):
            raise ResponseShapeError(f"{self.block_name}: response has no rows for this block")
        return rows


def _format_param(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
