"""Thin asynchronous base client for the expense tracker backend.

Endpoint groups (auth, expenses) subclass ``ApiClient`` and add focused
methods instead of sprinkling raw request logic across modules.
"""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from ..constants import HTTP_REQUEST_TIMEOUT_SECONDS
from ..errors.handling import handle_api_error

APPLICATION_JSON = "application/json"


def bearer_headers(token: str | None) -> dict[str, str]:
    """Return the ``Authorization`` header for ``token`` (empty when None)."""
    if not token:
        return {}
    return {"Authorization": f"Bearer {token}"}


def response_message(payload: Any) -> str | None:
    """Extract the backend's ``message`` field from an error body."""
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return None


class ApiClient:
    """Base class issuing requests against the backend origin.

    Attributes:
        base_url: Backend origin without trailing slash.
        request_timeout: Default total timeout per request in seconds.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        base_url: str,
        *,
        request_timeout: float = HTTP_REQUEST_TIMEOUT_SECONDS,
    ):
        """Initialize the client.

        Args:
            session: The aiohttp session to use for requests.
            base_url: Backend origin, e.g. ``http://localhost:8080``.
            request_timeout: Default total timeout per request.

        Raises:
            ValueError: If session is not provided.
        """
        if not session:
            raise ValueError("aiohttp session required")
        self._session = session
        self.base_url = base_url.rstrip("/")
        self.request_timeout = request_timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
        json_body: Any = None,
        timeout: float | None = None,
    ) -> tuple[int, Any]:
        """Perform one HTTP request.

        Args:
            method: HTTP method.
            path: Path below the origin, e.g. ``/api/expenses``.
            headers: Extra request headers.
            params: Query parameters.
            json_body: JSON body.
            timeout: Total timeout overriding the client default.

        Returns:
            Tuple of (status, payload); payload is decoded JSON for JSON
            responses, text otherwise, None for 204.

        Raises:
            NetworkError: On transport failures or request timeouts.
            ParsingError: If a JSON response cannot be decoded.
        """
        request_headers = {"Accept": APPLICATION_JSON}
        if json_body is not None:
            request_headers["Content-Type"] = APPLICATION_JSON
        if headers:
            request_headers.update(headers)
        client_timeout = aiohttp.ClientTimeout(total=timeout or self.request_timeout)
        url = self._url(path)

        async def operation() -> tuple[int, Any]:
            async with self._session.request(
                method,
                url,
                headers=request_headers,
                params=params,
                json=json_body,
                timeout=client_timeout,
            ) as resp:
                logging.debug(
                    f"Backend response: {method} {path} status={resp.status} content-type={resp.content_type}"
                )
                if resp.status == 204:
                    return resp.status, None
                if resp.content_type == APPLICATION_JSON:
                    return resp.status, await resp.json()
                return resp.status, await resp.text()

        return await handle_api_error(operation, f"{method} {path}")
