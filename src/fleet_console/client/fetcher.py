"""Remote fetcher: GET requests against the console REST API."""

from __future__ import annotations

import logging
from typing import Any

import httpx
import pydantic

from fleet_console.client.envelope import ListEnvelope
from fleet_console.client.errors import DEFAULT_FETCH_FALLBACK, FetchError, NetworkError
from fleet_console.client.query_keys import FilterState, build_query_params

logger = logging.getLogger(__name__)


def build_api_url(base_url: str, path: str) -> str:
    """Join an API path onto the configured base URL.

    Absolute URLs pass through; an empty base URL keeps the path relative
    so the HTTP client's own ``base_url`` applies.
    """
    base = base_url.rstrip("/")
    if not path:
        return base
    if path.startswith("http://") or path.startswith("https://"):
        return path
    normalized = path if path.startswith("/") else f"/{path}"
    return f"{base}{normalized}"


def extract_error_message(response: httpx.Response, fallback: str) -> str:
    """Pull the user-facing message out of an error response.

    A body that is not JSON yields the generic connection message; a JSON
    body without ``error``/``message`` yields ``fallback``.
    """
    try:
        body = response.json()
    except ValueError:
        return DEFAULT_FETCH_FALLBACK
    if isinstance(body, dict):
        message = body.get("error") or body.get("message")
        if isinstance(message, str) and message:
            return message
    return fallback


def parse_envelope(path: str, body: Any, fallback: str) -> ListEnvelope:
    """Validate a 2xx list body, raising FetchError when it is malformed."""
    try:
        return ListEnvelope.model_validate(body)
    except pydantic.ValidationError as e:
        logger.warning("GET %s returned a malformed envelope: %s", path, e)
        raise FetchError(fallback) from e

class RemoteFetcher:
    """Issues GET requests and parses the JSON envelope.

    Session cookies live on the shared ``httpx.AsyncClient``. Requests are
    never retried; a failed fetch needs a new call.
    """

    def __init__(self, http: httpx.AsyncClient, base_url: str = ""):
        self.http = http
        self.base_url = base_url

    async def get_json(
        self,
        path: str,
        params: dict[str, str] | None = None,
        fallback: str = DEFAULT_FETCH_FALLBACK,
        allow_unauthorized: bool = False,
    ) -> Any:
        """GET ``path`` and return the decoded body.

        With ``allow_unauthorized`` a 401 returns None instead of raising.
        """
        url = build_api_url(self.base_url, path)
        try:
            response = await self.http.get(url, params=params)
        except httpx.RequestError as e:
            logger.warning("GET %s failed: %s", url, e)
            raise NetworkError() from e

        if allow_unauthorized and response.status_code == 401:
            return None

        if response.is_error:
            message = extract_error_message(response, fallback)
            logger.info("GET %s returned %s: %s", url, response.status_code, message)
            raise FetchError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise FetchError(fallback, status_code=response.status_code) from e

    async def fetch_list(
        self,
        path: str,
        filters: FilterState,
        fallback: str = DEFAULT_FETCH_FALLBACK,
    ) -> ListEnvelope:
        """GET a paginated list with the filter state as query parameters."""
        body = await self.get_json(path, build_query_params(filters), fallback)
        return parse_envelope(path, body, fallback)

    async def fetch_collection(
        self,
        path: str,
        fallback: str = DEFAULT_FETCH_FALLBACK,
        params: dict[str, str] | None = None,
    ) -> ListEnvelope:
        """GET an unpaginated ``{ success, data }`` collection."""
        body = await self.get_json(path, params, fallback)
        return parse_envelope(path, body, fallback)
