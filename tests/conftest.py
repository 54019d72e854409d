"""Shared fixtures: a fake ISS client serving the pages in tests/fixtures."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from iss_graphql.client import IssClient

FIXTURES = Path(__file__).parent / "fixtures"

# reference id -> (reference page, resolved path, metadata file)
REFERENCES = {
    5: ("reference_5.html", "securities", "metadata_5.json"),
    41: ("reference_41.html", "engines/stock", "metadata_41.json"),
}


def make_client(data: bytes = b"") -> MagicMock:
    """Build an IssClient mock answering reference and metadata requests from fixtures."""
    client = MagicMock(spec=IssClient)

    def fetch_reference(ref_id):
        return (FIXTURES / REFERENCES[ref_id][0]).read_bytes()

    def fetch_metadata(path):
        for _, resolved, metadata in REFERENCES.values():
            if resolved == path:
                return (FIXTURES / metadata).read_bytes()
        return b"{}"

    client.fetch_reference.side_effect = fetch_reference
    client.fetch_metadata.side_effect = fetch_metadata
    client.fetch_data.return_value = data
    return client


@pytest.fixture
def iss_client() -> MagicMock:
    return make_client()
