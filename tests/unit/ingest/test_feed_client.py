"""Unit tests for the feed API client."""

from __future__ import annotations

from dataclasses import replace
from typing import Any

import pytest
import requests

from core.errors import ChirpFeedError
from ingest.feed_client import FeedClient, create_http_session


class _Response:
    def __init__(self, payload: Any, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class _Session:
    def __init__(self, response: _Response | Exception) -> None:
        self._response = response
        self.requests: list[tuple[str, dict[str, Any], float]] = []

    def get(self, url: str, params: dict[str, Any], timeout: float) -> _Response:
        self.requests.append((url, params, timeout))
        if isinstance(self._response, Exception):
            raise self._response
        return self._response


def test_resource_url_joins_base_endpoint_and_suffix(config) -> None:
    """Resource URLs should be base + endpoint + .json."""
    client = FeedClient(config, session=_Session(_Response([])))

    assert client.resource_url("/statuses/user_timeline") == (
        "https://feed.invalid/1.1/statuses/user_timeline.json"
    )


def test_fetch_sends_query_and_returns_decoded_list(config) -> None:
    """Fetch should forward query params and decode the body."""
    session = _Session(_Response([{"id_str": "1", "text": "hi"}]))

    payload = FeedClient(config, session=session).fetch("statuses/user_timeline", {"count": 2})

    assert payload == [{"id_str": "1", "text": "hi"}]
    assert session.requests == [
        ("https://feed.invalid/1.1/statuses/user_timeline.json", {"count": 2}, 10.0)
    ]


def test_fetch_passes_error_payload_through(config) -> None:
    """Well-formed error bodies should be returned, not raised."""
    error_payload = {"errors": [{"code": 215, "message": "Bad Authentication data."}]}
    session = _Session(_Response(error_payload, status_code=400))

    payload = FeedClient(config, session=session).fetch("statuses/user_timeline")

    assert payload == error_payload


def test_fetch_raises_for_transport_failures(config) -> None:
    """Connection errors should surface as feed errors."""
    session = _Session(requests.ConnectionError("refused"))

    with pytest.raises(ChirpFeedError):
        FeedClient(config, session=session).fetch("statuses/user_timeline")


def test_fetch_raises_for_non_json_body(config) -> None:
    """Undecodable bodies should surface as feed errors."""
    session = _Session(_Response(ValueError("no json"), status_code=502))

    with pytest.raises(ChirpFeedError):
        FeedClient(config, session=session).fetch("statuses/user_timeline")


def test_fetch_rejects_scalar_json(config) -> None:
    """Only arrays and objects are valid feed bodies."""
    with pytest.raises(ChirpFeedError):
        FeedClient(config, session=_Session(_Response("text"))).fetch("statuses/user_timeline")


def test_create_http_session_sets_bearer_token(config) -> None:
    """A configured token should become the Authorization header."""
    session = create_http_session(replace(config, bearer_token="secret"))

    assert session.headers["Authorization"] == "Bearer secret"


def test_create_http_session_without_token_sends_no_authorization(config) -> None:
    """Without a token no Authorization header is set."""
    session = create_http_session(config)

    assert "Authorization" not in session.headers
