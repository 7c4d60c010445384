"""HTTP client for a running codelens server."""

from __future__ import annotations

import logging

import httpx

from codelens_store.models import ReviewRecord

logger = logging.getLogger(__name__)


class ClientError(Exception):
    """The server could not be reached or answered with a non-2xx status."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status


class ReviewClient:
    """Thin wrapper over the server's three review routes.

    No cancellation: a review request blocks until the server answers or the
    transport timeout expires.
    """

    def __init__(self, base_url: str, timeout: float = 120.0, transport: httpx.BaseTransport | None = None):
        self._http = httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout, transport=transport)

    def submit(self, code: str) -> dict:
        """POST /review and return ``{"review": ..., "optimizedCode": ...}``."""
        data = self._request("POST", "/review", json={"code": code})
        if not isinstance(data, dict) or not isinstance(data.get("review"), str):
            raise ClientError("Server returned an unexpected review body.")
        return data

    def list_reviews(self) -> list[ReviewRecord]:
        data = self._request("GET", "/reviews")
        if not isinstance(data, list):
            raise ClientError("Server returned an unexpected history body.")
        return [ReviewRecord.from_dict(d) for d in data]

    def delete(self, review_id: str) -> bool:
        data = self._request("DELETE", f"/review/{review_id}")
        return bool(data.get("deleted"))

    def close(self) -> None:
        self._http.close()

    def _request(self, method: str, path: str, **kwargs):
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.debug("%s %s failed: %s", method, path, e)
            raise ClientError(f"Could not reach codelens server: {e}") from e

        if response.is_error:
            raise ClientError(_error_message(response), status=response.status_code)
        try:
            return response.json()
        except ValueError as e:
            raise ClientError(f"Server returned invalid JSON for {method} {path}") from e


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP {response.status_code}"
