"""Async HTTP client for the practice service's catalog and solution APIs."""

from __future__ import annotations

from typing import Any

import httpx

from trackdesk.errors import TransportError
from trackdesk.logging import get_logger
from trackdesk.remote.types import ExerciseInfo, pad_labels
from trackdesk.result import Err, Ok

log = get_logger("remote")


def _error_payload(response: httpx.Response) -> str:
    """Pull the most useful error text out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
    text = response.text.strip()
    return text or f"HTTP {response.status_code}"


class RemoteCatalogClient:
    """Lists tracks and exercises and mutates solution status.

    Never produces user-facing text: failures come back as
    ``Err(TransportError)`` carrying the raw server or transport payload.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API root, e.g. "https://exercism.org/api/v2".
            token: Bearer token for authenticated endpoints.
            timeout: Request timeout in seconds.
            client: Optional preconfigured httpx client (tests pass one
                with a MockTransport).
        """
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    async def __aenter__(self) -> RemoteCatalogClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    async def _request(
        self, method: str, path: str, *, authenticated: bool = False
    ) -> Ok[httpx.Response] | Err:
        headers: dict[str, str] = {}
        if authenticated:
            if not self._token:
                return Err(TransportError("no API token configured"))
            headers["Authorization"] = f"Bearer {self._token}"

        url = self._url(path)
        try:
            response = await self._client.request(method, url, headers=headers)
        except httpx.HTTPError as e:
            log.warning("%s %s failed: %s", method, url, e)
            return Err(TransportError(str(e) or type(e).__name__))

        if not response.is_success:
            payload = _error_payload(response)
            log.warning("%s %s -> %d: %s", method, url, response.status_code, payload)
            return Err(TransportError(payload, response.status_code))

        log.debug("%s %s -> %d", method, url, response.status_code)
        return Ok(response)

    async def _get_json(self, path: str) -> Ok[dict[str, Any]] | Err:
        result = await self._request("GET", path)
        if isinstance(result, Err):
            return result
        try:
            data = result.value.json()
        except ValueError as e:
            return Err(TransportError(f"invalid JSON from {path}: {e}", result.value.status_code))
        if not isinstance(data, dict):
            return Err(TransportError(f"unexpected response shape from {path}"))
        return Ok(data)

    async def list_tracks(self) -> Ok[list[str]] | Err:
        """List track slugs in server order."""
        result = await self._get_json("tracks")
        if isinstance(result, Err):
            return result
        try:
            return Ok([str(track["slug"]) for track in result.value["tracks"]])
        except (KeyError, TypeError) as e:
            return Err(TransportError(f"malformed tracks response: {e!r}"))

    async def list_exercises(self, track: str) -> Ok[list[tuple[str, ExerciseInfo]]] | Err:
        """List a track's exercises as (padded label, info) pairs.

        Labels are padded to the longest slug in this response.
        """
        result = await self._get_json(f"tracks/{track}/exercises")
        if isinstance(result, Err):
            return result
        try:
            exercises = [ExerciseInfo.from_dict(e) for e in result.value["exercises"]]
        except (KeyError, TypeError) as e:
            return Err(TransportError(f"malformed exercises response: {e!r}"))
        return Ok(pad_labels(exercises))

    async def set_solution_status(
        self, exercise_id: str, action: str, method: str = "PATCH"
    ) -> Ok[None] | Err:
        """Mark a solution complete, published or unpublished."""
        result = await self._request(method, f"solutions/{exercise_id}/{action}", authenticated=True)
        if isinstance(result, Err):
            return result
        return Ok(None)
