"""Client context owning the shared stores, HTTP session and page factories."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import aiohttp

from .api.auth import AuthAPI
from .api.expenses import ExpenseAPI
from .config.model import ClientConfig
from .constants import (
    AUTH_FAILURE_REDIRECT_DELAY_SECONDS,
    COOKIE_STORE_FILENAME,
    DASHBOARD_PATH,
    LOCAL_STORE_FILENAME,
    LOGIN_PATH,
    LOGIN_REDIRECT_DELAY_SECONDS,
)
from .pages.auth_page import AuthPage
from .pages.dashboard import DashboardPage
from .session.guard import SessionGuard
from .session.navigation import HistoryNavigator
from .session.notifier import LogNotifier, Notifier
from .session.validator import TokenValidator
from .storage.cookies import CookieStore
from .storage.local_store import LocalStore
from .storage.preferences import Preferences
from .storage.token_store import TokenStore


class ExpenseClient:
    """Holds resources shared across page loads.

    Durable state (local store, cookie jar, preferences) and the HTTP
    session live as long as the client. Each ``auth_page`` or
    ``dashboard_page`` call is one page load and gets a fresh guard,
    validator and navigator.
    """

    session: aiohttp.ClientSession | None
    local_store: LocalStore | None
    cookies: CookieStore | None
    token_store: TokenStore | None
    preferences: Preferences | None
    auth_api: AuthAPI | None

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        notifier: Notifier | None = None,
        session: aiohttp.ClientSession | None = None,
        redirect_delay: float = LOGIN_REDIRECT_DELAY_SECONDS,
        failure_delay: float = AUTH_FAILURE_REDIRECT_DELAY_SECONDS,
    ) -> None:
        self.config = config or ClientConfig()
        self.notifier = notifier or LogNotifier()
        self.redirect_delay = redirect_delay
        self.failure_delay = failure_delay
        self.session = session
        self._owns_session = session is None
        self.local_store = None
        self.cookies = None
        self.token_store = None
        self.preferences = None
        self.auth_api = None

    async def __aenter__(self) -> ExpenseClient:
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def open(self) -> None:
        """Create stores and the HTTP session.

        The cookie jar is built here because aiohttp requires a running
        event loop for it.
        """
        if self.auth_api is not None:
            return
        state_dir = Path(self.config.state_dir)
        self.local_store = LocalStore(state_dir / LOCAL_STORE_FILENAME)
        self.cookies = CookieStore(self.config.base_url, state_dir / COOKIE_STORE_FILENAME)
        self.token_store = TokenStore(self.local_store, self.cookies)
        self.preferences = Preferences(self.local_store)
        if self.session is None:
            self.session = aiohttp.ClientSession(cookie_jar=self.cookies.jar)
            self._owns_session = True
            logging.debug("🔗 HTTP session created")
        self.auth_api = AuthAPI(
            self.session, self.config.base_url, request_timeout=self.config.request_timeout
        )
        logging.debug(f"🧪 Expense client ready (state_dir={state_dir})")

    async def close(self) -> None:
        if self.session is not None and self._owns_session:
            try:
                await self.session.close()
                logging.debug("🔒 HTTP session closed")
            except (aiohttp.ClientError, OSError, RuntimeError) as e:
                logging.error(f"💥 Error closing HTTP session: {str(e)}")
        self.session = None
        self.auth_api = None

    def _require_open(self) -> None:
        if self.auth_api is None:
            raise RuntimeError("ExpenseClient is not open")

    def new_guard(self, current_path: str) -> SessionGuard:
        """Start a page load at ``current_path``."""
        self._require_open()
        validator = TokenValidator(
            self.auth_api, self.token_store, timeout=self.config.validation_timeout
        )
        return SessionGuard(self.token_store, validator, HistoryNavigator(current_path))

    def auth_page(self, current_path: str = LOGIN_PATH) -> AuthPage:
        return AuthPage(
            self.new_guard(current_path),
            self.auth_api,
            self.notifier,
            redirect_delay=self.redirect_delay,
        )

    def dashboard_page(
        self,
        current_path: str = DASHBOARD_PATH,
        confirm: Callable[[str], bool] | None = None,
    ) -> DashboardPage:
        guard = self.new_guard(current_path)
        expense_api = ExpenseAPI(
            self.session,
            self.config.base_url,
            guard.auth_headers,
            request_timeout=self.config.request_timeout,
        )
        return DashboardPage(
            guard,
            expense_api,
            self.preferences,
            self.notifier,
            init_timeout=self.config.init_timeout,
            failure_delay=self.failure_delay,
            confirm=confirm,
        )
