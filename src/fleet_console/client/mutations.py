"""Mutation executor: create/update/delete/transition requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import IO, Any, Mapping, Sequence, Union

import httpx

from fleet_console.client.errors import (
    DEFAULT_MUTATION_FALLBACK,
    ServerError,
    ValidationError,
)
from fleet_console.client.fetcher import build_api_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadFile:
    """A file to send as one multipart part."""

    filename: str
    content: bytes | IO[bytes]
    content_type: str = "application/octet-stream"

    def as_part(self) -> tuple[str, bytes | IO[bytes], str]:
        return (self.filename, self.content, self.content_type)


# One file, or several files under the same field name
FileSpec = Union[UploadFile, Sequence[UploadFile]]


def form_value(value: Any) -> str:
    """Render one form field.

    Every field of a form is sent; ``None`` becomes the empty string,
    which the backend reads as "clear this field".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def json_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Apply the send-everything convention to a JSON body."""
    return {name: ("" if value is None else value) for name, value in fields.items()}


def build_multipart(
    fields: Mapping[str, Any],
    files: Mapping[str, FileSpec] | None = None,
) -> list[tuple[str, tuple[str | None, Any] | tuple[str, Any, str]]]:
    """Build httpx multipart parts for form fields and files.

    Plain fields are encoded as file-less parts so the body is multipart
    even when no file is attached.
    """
    parts: list[tuple[str, Any]] = [
        (name, (None, form_value(value))) for name, value in fields.items()
    ]
    for name, upload in (files or {}).items():
        uploads = [upload] if isinstance(upload, UploadFile) else list(upload)
        for item in uploads:
            parts.append((name, item.as_part()))
    return parts


class MutationExecutor:
    """Sends mutations and maps failures onto the error taxonomy.

    Mutations are not retried and not serialized; two concurrent edits of
    the same record race and the later response wins.
    """

    def __init__(self, http: httpx.AsyncClient, base_url: str = ""):
        self.http = http
        self.base_url = base_url

    async def execute(
        self,
        method: str,
        path: str,
        fields: Mapping[str, Any] | None = None,
        files: Mapping[str, FileSpec] | None = None,
        multipart: bool = False,
        fallback: str = DEFAULT_MUTATION_FALLBACK,
    ) -> Any:
        """Send one mutation and return the record from the response.

        Multipart is used when files are attached or ``multipart`` is set;
        otherwise fields go out as JSON. Returns the envelope's ``data``
        member, or the whole body when there is none.

        Raises:
            ValidationError: The backend answered 4xx.
            ServerError: The backend answered 5xx or was unreachable.
        """
        url = build_api_url(self.base_url, path)
        request_kwargs: dict[str, Any] = {}
        if files or multipart:
            request_kwargs["files"] = build_multipart(fields or {}, files)
        elif fields is not None:
            request_kwargs["json"] = json_fields(fields)

        try:
            response = await self.http.request(method, url, **request_kwargs)
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise ServerError(fallback) from e

        if response.is_server_error:
            logger.error("%s %s returned %s", method, url, response.status_code)
            raise ServerError(fallback, status_code=response.status_code)

        if response.is_error:
            raise ValidationError(
                self._client_error_message(response, fallback),
                status_code=response.status_code,
            )

        if not response.content:
            return None
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    @staticmethod
    def _client_error_message(response: httpx.Response, fallback: str) -> str:
        try:
            body = response.json()
        except ValueError:
            return fallback
        if isinstance(body, dict):
            message = body.get("error") or body.get("message")
            if isinstance(message, str) and message:
                return message
        return fallback

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.execute("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Any:
        return await self.execute("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> Any:
        return await self.execute("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.execute("DELETE", path, **kwargs)
