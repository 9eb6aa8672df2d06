"""Cookie storage shared between the token store and the HTTP session."""

from __future__ import annotations

import logging
import os
import time
from http.cookies import SimpleCookie

import aiohttp
from yarl import URL

from ..errors.internal import StorageError
from .json_file import atomic_write_json, read_json


def build_cookie(name: str, value: str, max_age: int) -> SimpleCookie:
    """Build a ``path=/; samesite=strict`` cookie with the given max age."""
    cookie: SimpleCookie = SimpleCookie()
    cookie[name] = value
    morsel = cookie[name]
    morsel["path"] = "/"
    morsel["max-age"] = str(max_age)
    morsel["samesite"] = "Strict"
    return cookie


def format_cookie(name: str, value: str, max_age: int) -> str:
    """Render the cookie as a ``Set-Cookie`` attribute string.

    Example:
        >>> format_cookie("authToken", "abc", 604800)
        'authToken=abc; Max-Age=604800; Path=/; SameSite=Strict'
    """
    return build_cookie(name, value, max_age)[name].OutputString()


class CookieStore:
    """Cookies for the backend origin, persisted between runs.

    Wraps an ``aiohttp.CookieJar`` so the same jar can be handed to the
    ``aiohttp.ClientSession``: whatever the token store writes here is sent
    to the server with every request, which is what server-side route
    guarding reads. Absolute expiry times are kept in a JSON file so a
    cookie's max-age keeps counting down across processes.

    Must be constructed inside a running event loop (aiohttp requirement).
    """

    def __init__(self, base_url: str, path: str | os.PathLike[str]):
        self.base_url = URL(base_url)
        self.path = str(path)
        # unsafe=True keeps cookies for IP-address origins such as 127.0.0.1
        self._jar = aiohttp.CookieJar(unsafe=True)
        self._records: dict[str, dict[str, object]] = {}
        self._restore()

    @property
    def jar(self) -> aiohttp.CookieJar:
        return self._jar

    def _restore(self) -> None:
        now = time.time()
        dropped = False
        for name, record in read_json(self.path).items():
            if not isinstance(record, dict):
                dropped = True
                continue
            value = record.get("value")
            expires_at = record.get("expires_at")
            if not isinstance(value, str) or not isinstance(expires_at, int | float):
                dropped = True
                continue
            remaining = int(expires_at - now)
            if remaining <= 0:
                logging.debug(f"🍪 Dropping expired cookie name={name}")
                dropped = True
                continue
            self._jar.update_cookies(
                build_cookie(name, value, remaining), response_url=self.base_url
            )
            self._records[name] = {"value": value, "expires_at": expires_at}
        if dropped:
            self._persist()

    def _persist(self) -> None:
        try:
            atomic_write_json(self.path, self._records)
        except (OSError, ValueError, TypeError) as e:
            raise StorageError(f"Cannot write cookie file {self.path}: {e}") from e

    def get(self, name: str) -> str | None:
        morsel = self._jar.filter_cookies(self.base_url).get(name)
        if morsel is None or not morsel.value:
            return None
        return morsel.value

    def set(self, name: str, value: str, max_age: int) -> None:
        """Store a cookie for the origin root with ``max_age`` seconds to live."""
        if max_age <= 0:
            self.expire(name)
            return
        self._jar.update_cookies(
            build_cookie(name, value, max_age), response_url=self.base_url
        )
        self._records[name] = {"value": value, "expires_at": time.time() + max_age}
        self._persist()

    def expire(self, name: str) -> None:
        """Expire the cookie immediately (the ``max-age=0`` case)."""
        self._jar.clear(lambda morsel: morsel.key == name)
        if self._records.pop(name, None) is not None:
            self._persist()
