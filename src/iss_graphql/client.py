"""HTTP client for the MOEX ISS service, built on requests."""

import requests
import structlog

from iss_graphql.errors import HttpStatusError, TransportError

DEFAULT_BASE_URL = "https://iss.moex.com/iss"

logger = structlog.get_logger()


class IssClient:
    """Fetches reference pages, column metadata and block data from ISS."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def fetch_reference(self, ref_id: int) -> bytes:
        """Fetch the HTML page describing reference ``ref_id``."""
        return self.fetch_bytes(f"{self.base_url}/reference/{ref_id}")

    def fetch_metadata(self, path: str) -> bytes:
        """Fetch column metadata (no rows) for a resolved reference path."""
        return self.fetch_bytes(
            f"{self.base_url}/{path}.json",
            params=[("iss.meta", "on"), ("iss.data", "off")],
        )

    def fetch_data(self, path: str, params: list[tuple[str, str]]) -> bytes:
        """Fetch rows for a resolved reference path."""
        return self.fetch_bytes(f"{self.base_url}/{path}.json", params=params)

    def fetch_bytes(self, url: str, params: list[tuple[str, str]] | None = None) -> bytes:
        """GET ``url`` and return the raw body."""
        logger.debug("iss_request", url=url, params=params)
        try:
            response = requests.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"failed to fetch {url}: {e}") from e

        if not response.ok:
            raise HttpStatusError(url, response.status_code)
        return response.content
