"""Per-page session guard: the redirect controller's state and flags."""

from __future__ import annotations

import logging
from enum import Enum

from ..api.client import bearer_headers
from ..storage.token_store import TokenStore
from .navigation import Navigator
from .validator import TokenValidator


class GuardState(str, Enum):
    """Redirect controller states for one page load.

    Attributes:
        UNINITIALIZED: Nothing decided yet, or the user must sign in.
        VALIDATING: A held token is being checked with the backend.
        AUTHENTICATED: Token confirmed; the page proceeds.
        REDIRECTING: Navigation away has started; guard logic is inert.
    """

    UNINITIALIZED = "uninitialized"
    VALIDATING = "validating"
    AUTHENTICATED = "authenticated"
    REDIRECTING = "redirecting"


class SessionGuard:
    """Session guard instantiated once per page load.

    Holds the controller state (``REDIRECTING`` doubles as the redirect
    flag) and the ``is_initialized`` flag. Neither is cleared except by ``reset`` on
    logout; a page load ends with the guard.

    Attributes:
        token_store: Token store shared with the rest of the client.
        validator: Validator owning the in-flight validation latch.
        navigator: Navigation surface; only ever used with replace semantics.
        state: Current GuardState.
        is_initialized: Set once the authenticated page's setup completed.
    """

    def __init__(
        self,
        token_store: TokenStore,
        validator: TokenValidator,
        navigator: Navigator,
    ) -> None:
        self.token_store = token_store
        self.validator = validator
        self.navigator = navigator
        self.state = GuardState.UNINITIALIZED
        self.is_initialized = False

    @property
    def is_redirecting(self) -> bool:
        return self.state is GuardState.REDIRECTING

    @property
    def is_busy(self) -> bool:
        """True while a validation or a redirect is in progress."""
        return self.validator.is_validating or self.is_redirecting

    def _transition(self, new_state: GuardState) -> None:
        if new_state is not self.state:
            logging.debug(f"🔀 Session guard {self.state.value} -> {new_state.value}")
        self.state = new_state

    def read_token(self) -> str | None:
        return self.token_store.read()

    def auth_headers(self) -> dict[str, str]:
        """Authorization header for the currently held token."""
        return bearer_headers(self.token_store.read())

    def begin_validation(self) -> bool:
        if self.is_redirecting:
            return False
        self._transition(GuardState.VALIDATING)
        return True

    def mark_authenticated(self, *, initialized: bool = True) -> None:
        if self.is_redirecting:
            return
        if initialized:
            self.is_initialized = True
        self._transition(GuardState.AUTHENTICATED)

    def mark_unauthenticated(self) -> None:
        if self.is_redirecting:
            return
        self._transition(GuardState.UNINITIALIZED)

    def redirect(self, path: str) -> bool:
        """Start the single navigation of this page load.

        Returns:
            True if navigation was issued, False if one already started.
        """
        if self.is_redirecting:
            logging.debug(f"↩️ Redirect to {path} suppressed, already redirecting")
            return False
        self._transition(GuardState.REDIRECTING)
        self.navigator.replace(path)
        logging.info(f"➡️ Redirecting to {path}")
        return True

    def reset(self) -> None:
        """Drop both flags; used only by explicit logout."""
        self.is_initialized = False
        self._transition(GuardState.UNINITIALIZED)
