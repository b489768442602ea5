"""Feed API client.

This module builds resource URLs and performs GET requests against
the feed API with requests. Decoded bodies are returned whatever the
HTTP status, so well-formed error payloads reach the caller intact.
"""

from __future__ import annotations

from typing import Any, Mapping

from core.config import ChirpConfig
from core.constants import ENDPOINT_DELIMITER, ERROR_PAYLOAD_KEY, RESOURCE_SUFFIX
from core.errors import ChirpDependencyError, ChirpFeedError
from core.logging_config import get_logger
from core.types import FeedPayload

_LOGGER = get_logger(__name__)


class FeedClient:
    """Thin GET client for one feed API root."""

    def __init__(self, config: ChirpConfig, session: Any | None = None) -> None:
        """Create the client.

        Args:
            config: Runtime config with base URL, token, and timeout.
            session: Optional requests-compatible session; built lazily otherwise.
        """
        self._config = config
        self._session = session

    def resource_url(self, endpoint: str) -> str:
        """Return the full resource URL for an endpoint.

        ``statuses/user_timeline`` maps to
        ``<api_base_url>statuses/user_timeline.json``.
        """
        return f"{self._config.api_base_url}{endpoint.strip(ENDPOINT_DELIMITER)}{RESOURCE_SUFFIX}"

    def fetch(self, endpoint: str, query: Mapping[str, Any] | None = None) -> FeedPayload:
        """Perform a GET request and decode the JSON body.

        Args:
            endpoint: Feed endpoint, e.g. ``statuses/user_timeline``.
            query: Query string parameters.

        Returns:
            Decoded list of records, or a mapping such as an error payload.

        Raises:
            ChirpFeedError: If the request fails or the body is not JSON.
        """
        url = self.resource_url(endpoint)
        params = dict(query or {})
        session = self._get_session()
        try:
            response = session.get(url, params=params, timeout=self._config.http_timeout)
        except Exception as error:
            raise ChirpFeedError(
                f"Feed request to {url} failed: {error}. "
                "Check network access and CHIRP_API_BASE_URL."
            ) from error
        try:
            payload = response.json()
        except ValueError as error:
            raise ChirpFeedError(
                f"Feed response from {url} (HTTP {response.status_code}) is not valid JSON."
            ) from error
        if not isinstance(payload, (list, dict)):
            raise ChirpFeedError(
                f"Feed response from {url} has unsupported type {type(payload).__name__}; "
                "expected a JSON array or object."
            )
        _LOGGER.debug(
            "feed_request_sent",
            url=url,
            status_code=response.status_code,
            query_keys=sorted(params),
            upstream_error=isinstance(payload, dict) and ERROR_PAYLOAD_KEY in payload,
        )
        return payload

    def _get_session(self) -> Any:
        if self._session is None:
            self._session = create_http_session(self._config)
        return self._session


def create_http_session(config: ChirpConfig) -> Any:
    """Create a requests session carrying the configured credentials.

    Args:
        config: Runtime config with optional bearer token.

    Returns:
        Configured requests session.

    Raises:
        ChirpDependencyError: If requests is missing.
    """
    try:
        import requests
    except ImportError as error:
        raise ChirpDependencyError(
            "Feed access requires requests, but it is not installed. "
            "Install requests to fetch records from the feed API."
        ) from error
    session = requests.Session()
    session.headers["Accept"] = "application/json"
    if config.bearer_token:
        session.headers["Authorization"] = f"Bearer {config.bearer_token}"
    return session
