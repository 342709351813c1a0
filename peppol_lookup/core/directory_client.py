"""HTTP client for the Peppol Directory search API."""

import logging
from typing import Any, Optional

import httpx

from peppol_lookup.core.errors import RateLimitedError
from peppol_lookup.data.schemas import Config, DirectoryResponse

logger = logging.getLogger(__name__)


class DirectoryClient:
    """Thin wrapper around the directory's JSON search endpoints."""

    def __init__(
        self,
        config: Optional[Config] = None,
        http_client: Optional[httpx.Client] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            config: Configuration providing base URL and timeout.
            http_client: Existing httpx client to reuse (not closed by us).
            transport: Custom httpx transport for a newly created client.
        """
        self.config = config or Config()
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(
            timeout=self.config.timeout_seconds,
            transport=transport,
            follow_redirects=True,
            headers={"Accept": "application/json"},
        )

    @property
    def base_url(self) -> str:
        return self.config.base_url

    def search(self, identifier: str) -> DirectoryResponse:
        """Search the directory for a company identifier.

        Args:
            identifier: Company number passed as the ``q`` query parameter.

        Returns:
            Parsed directory response.

        Raises:
            RateLimitedError: If the directory answers HTTP 429.
            httpx.HTTPStatusError: For any other error status (including 404).
            httpx.RequestError: On transport failures and timeouts.
        """
        response = self._client.get(
            self.base_url,
            params={"q": identifier},
            timeout=self.config.timeout_seconds,
        )
        logger.debug(f"GET {response.request.url} -> {response.status_code}")

        if response.status_code == 429:
            raise RateLimitedError(identifier, response.headers.get("retry-after"))
        response.raise_for_status()

        return DirectoryResponse.model_validate(response.json())

    def get_participant_details(self, participant_id: str) -> Any:
        """Fetch the raw detail document of a single participant.

        Args:
            participant_id: Peppol participant identifier.

        Returns:
            Decoded JSON body.
        """
        url = f"{self.base_url}/participants/{participant_id}"
        try:
            response = self._client.get(url, timeout=self.config.timeout_seconds)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error fetching participant details for {participant_id}: {e}")
            raise

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "DirectoryClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
