from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from ..constants import AUTH_API_PATH
from ..errors.internal import AuthenticationError, ParsingError
from .client import ApiClient, bearer_headers, response_message
from .models import AuthResponse


class AuthAPI(ApiClient):
    """Client for ``/api/auth``: login, registration and token validation."""

    async def login(self, username: str, password: str) -> AuthResponse:
        """Exchange credentials for a token.

        Raises:
            AuthenticationError: Backend rejected the credentials.
            NetworkError: Transport failure.
        """
        status, payload = await self._request(
            "POST",
            f"{AUTH_API_PATH}/login",
            json_body={"username": username, "password": password},
        )
        return self._auth_result(status, payload, "Login failed")

    async def register(self, username: str, email: str, password: str) -> AuthResponse:
        """Create an account; the backend answers with a token like login.

        Raises:
            AuthenticationError: Backend refused the registration.
            NetworkError: Transport failure.
        """
        status, payload = await self._request(
            "POST",
            f"{AUTH_API_PATH}/register",
            json_body={"username": username, "email": email, "password": password},
        )
        return self._auth_result(status, payload, "Registration failed")

    async def validate_token(self, token: str, *, timeout: float | None = None) -> bool:
        """Ask the backend whether ``token`` is still valid.

        Returns:
            True iff the backend answered with a success status.

        Raises:
            NetworkError: Transport failure or request timeout.
        """
        status, _ = await self._request(
            "POST",
            f"{AUTH_API_PATH}/validate",
            headers=bearer_headers(token),
            timeout=timeout,
        )
        if not 200 <= status < 300:
            logging.info(f"❌ Token rejected by backend (status={status})")
        return 200 <= status < 300

    @staticmethod
    def _auth_result(status: int, payload: Any, fallback: str) -> AuthResponse:
        body = payload if isinstance(payload, dict) else {}
        if 200 <= status < 300:
            try:
                response = AuthResponse.model_validate(body)
            except ValidationError as e:
                raise ParsingError(f"Malformed auth response: {e}") from e
            if response.token:
                return response
        raise AuthenticationError(response_message(payload) or fallback, status=status)
