"""Login/register page controller."""

from __future__ import annotations

import asyncio
import logging

from ..api.auth import AuthAPI
from ..api.models import AuthResponse
from ..constants import DASHBOARD_PATH, LOGIN_REDIRECT_DELAY_SECONDS
from ..errors.handling import log_error
from ..errors.internal import AuthenticationError, NetworkError, ParsingError
from ..session.guard import GuardState, SessionGuard
from ..session.notifier import NotificationLevel, Notifier

NETWORK_ERROR_MESSAGE = "Network error. Please try again."
LOGIN_SUCCESS_MESSAGE = "Login successful! Redirecting..."
REGISTER_SUCCESS_MESSAGE = "Account created successfully! Redirecting..."
PASSWORD_MISMATCH_MESSAGE = "Passwords do not match"


class AuthPage:
    """Unauthenticated entry page.

    A held token that still validates sends the user straight on to the
    dashboard. Otherwise the page offers login and registration, and a
    successful response schedules the dashboard redirect after
    ``redirect_delay`` so the success notification is seen first.

    Attributes:
        guard: Session guard for this page load.
        pending_redirect: Task performing the delayed post-login redirect.
    """

    def __init__(
        self,
        guard: SessionGuard,
        auth_api: AuthAPI,
        notifier: Notifier,
        *,
        redirect_delay: float = LOGIN_REDIRECT_DELAY_SECONDS,
    ) -> None:
        self.guard = guard
        self.auth_api = auth_api
        self.notifier = notifier
        self.redirect_delay = redirect_delay
        self.pending_redirect: asyncio.Task[None] | None = None

    async def on_load(self) -> GuardState:
        guard = self.guard
        if guard.is_busy:
            logging.debug("⏭️ Auth page check skipped, validation or redirect in progress")
            return guard.state

        token = guard.read_token()
        if not token:
            logging.debug("🔓 No stored token, login required")
            return guard.state

        guard.begin_validation()
        if await guard.validator.validate(token):
            if guard.navigator.current_path != DASHBOARD_PATH:
                guard.redirect(DASHBOARD_PATH)
            else:
                guard.mark_authenticated(initialized=False)
        else:
            guard.token_store.clear()
            guard.mark_unauthenticated()
        return guard.state

    async def login(self, username: str, password: str) -> AuthResponse | None:
        try:
            response = await self.auth_api.login(username, password)
        except AuthenticationError as e:
            logging.warning(f"🚫 Login rejected for {username} (status={e.status})")
            self.notifier.notify(str(e), NotificationLevel.ERROR)
            return None
        except (NetworkError, ParsingError) as e:
            log_error("Login request failed", e, context={"username": username})
            self.notifier.notify(NETWORK_ERROR_MESSAGE, NotificationLevel.ERROR)
            return None
        self._complete_sign_in(response, username, LOGIN_SUCCESS_MESSAGE)
        return response

    async def register(
        self, username: str, email: str, password: str, confirm_password: str
    ) -> AuthResponse | None:
        if password != confirm_password:
            self.notifier.notify(PASSWORD_MISMATCH_MESSAGE, NotificationLevel.ERROR)
            return None
        try:
            response = await self.auth_api.register(username, email, password)
        except AuthenticationError as e:
            logging.warning(f"🚫 Registration refused for {username} (status={e.status})")
            self.notifier.notify(str(e), NotificationLevel.ERROR)
            return None
        except (NetworkError, ParsingError) as e:
            log_error("Registration request failed", e, context={"username": username})
            self.notifier.notify(NETWORK_ERROR_MESSAGE, NotificationLevel.ERROR)
            return None
        self._complete_sign_in(response, username, REGISTER_SUCCESS_MESSAGE)
        return response

    async def wait_for_redirect(self) -> None:
        if self.pending_redirect is not None:
            await self.pending_redirect

    def _complete_sign_in(self, response: AuthResponse, username: str, message: str) -> None:
        self.guard.token_store.write(response.token, response.username or username)
        logging.info(f"🔑 Signed in as {response.username or username}")
        self.notifier.notify(message, NotificationLevel.SUCCESS)
        if self.pending_redirect is None or self.pending_redirect.done():
            self.pending_redirect = asyncio.create_task(self._redirect_after_delay())

    async def _redirect_after_delay(self) -> None:
        await asyncio.sleep(self.redirect_delay)
        self.guard.redirect(DASHBOARD_PATH)
