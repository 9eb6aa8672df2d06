"""Token store: the single owner of the session token and username."""

from __future__ import annotations

import logging

from ..constants import (
    AUTH_COOKIE_MAX_AGE_SECONDS,
    AUTH_COOKIE_NAME,
    AUTH_TOKEN_KEY,
    USERNAME_KEY,
)
from ..errors.internal import StorageError
from .cookies import CookieStore
from .local_store import LocalStore

# Failures reading or writing either location are treated as "absent".
_STORAGE_ERRORS = (StorageError, OSError, ValueError, TypeError)


class TokenStore:
    """Reads, writes and clears the bearer token across both locations.

    The local store copy is what API calls use; the cookie copy is what
    server-side page routing sees. ``write`` and ``clear`` always touch both
    so they stay consistent. No method raises.
    """

    def __init__(self, local_store: LocalStore, cookies: CookieStore):
        self._local = local_store
        self._cookies = cookies

    def read(self) -> str | None:
        """Return the held token, backfilling the local store from the cookie."""
        try:
            token = self._local.get(AUTH_TOKEN_KEY)
            if token:
                return token
        except _STORAGE_ERRORS as e:
            logging.debug(f"Token read from local store failed: {type(e).__name__}")

        try:
            token = self._cookies.get(AUTH_COOKIE_NAME)
        except _STORAGE_ERRORS as e:
            logging.debug(f"Token read from cookie failed: {type(e).__name__}")
            return None
        if not token:
            return None

        try:
            self._local.set(AUTH_TOKEN_KEY, token)
            logging.debug("🍪 Token backfilled into local store from cookie")
        except _STORAGE_ERRORS as e:
            logging.debug(f"Token backfill failed: {type(e).__name__}")
        return token

    def write(self, token: str, username: str | None) -> None:
        try:
            self._local.set(AUTH_TOKEN_KEY, token)
            if username:
                self._local.set(USERNAME_KEY, username)
            else:
                self._local.remove(USERNAME_KEY)
        except _STORAGE_ERRORS as e:
            logging.warning(f"⚠️ Could not persist token locally: {type(e).__name__}")
        try:
            self._cookies.set(AUTH_COOKIE_NAME, token, AUTH_COOKIE_MAX_AGE_SECONDS)
        except _STORAGE_ERRORS as e:
            logging.warning(f"⚠️ Could not persist token cookie: {type(e).__name__}")
        logging.debug(f"🔑 Token stored user={username}")

    def clear(self) -> None:
        for key in (AUTH_TOKEN_KEY, USERNAME_KEY):
            try:
                self._local.remove(key)
            except _STORAGE_ERRORS as e:
                logging.debug(f"Local store removal failed key={key}: {type(e).__name__}")
        try:
            self._cookies.expire(AUTH_COOKIE_NAME)
        except _STORAGE_ERRORS as e:
            logging.debug(f"Cookie expiry failed: {type(e).__name__}")
        logging.debug("🧹 Token store cleared")

    def username(self) -> str | None:
        try:
            return self._local.get(USERNAME_KEY)
        except _STORAGE_ERRORS:
            return None
