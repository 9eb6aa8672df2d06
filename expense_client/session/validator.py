"""Token validation with a bounded wait and one shared in-flight call."""

from __future__ import annotations

import asyncio
import logging
import traceback
from enum import Enum

from ..api.auth import AuthAPI
from ..constants import TOKEN_VALIDATION_TIMEOUT_SECONDS
from ..errors.handling import log_error
from ..errors.internal import (
    InternalError,
    InvalidTokenError,
    NetworkError,
    ValidationNetworkError,
    ValidationTimeoutError,
)
from ..storage.token_store import TokenStore
from .timeouts import race_timeout


class ValidationOutcome(str, Enum):
    """Tri-state result of asking the backend about a token.

    Attributes:
        VALID: Backend answered with a success status.
        INVALID: Backend rejected the token.
        INDETERMINATE: Timeout, transport failure or unexpected error.
    """

    VALID = "valid"
    INVALID = "invalid"
    INDETERMINATE = "indeterminate"


class TokenValidator:
    """Confirms a token against the backend, failing closed.

    Only one network validation is outstanding at a time. Callers arriving
    while it runs await the same task and receive its exact result. Any
    outcome other than VALID clears the token store before ``False`` is
    returned.
    """

    def __init__(
        self,
        auth_api: AuthAPI,
        token_store: TokenStore,
        *,
        timeout: float = TOKEN_VALIDATION_TIMEOUT_SECONDS,
    ) -> None:
        self._auth_api = auth_api
        self._token_store = token_store
        self.timeout = timeout
        self._inflight: asyncio.Task[bool] | None = None
        self.last_outcome: ValidationOutcome | None = None

    @property
    def is_validating(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    async def validate(self, token: str) -> bool:
        """Return True iff the backend confirms ``token``.

        Args:
            token: Bearer token to check.

        Returns:
            True when valid; False for invalid, timed out or failed checks.
        """
        if self.is_validating:
            logging.debug("⏳ Validation already in flight, awaiting shared result")
            return await asyncio.shield(self._inflight)
        task = asyncio.create_task(self._run(token))
        self._inflight = task
        # Shielded so one caller giving up does not cancel the call others await.
        return await asyncio.shield(task)

    def cancel(self) -> bool:
        """Cancel the in-flight validation, if any.

        Returns:
            True if a running validation was cancelled.
        """
        if not self.is_validating:
            return False
        self._inflight.cancel()
        logging.debug("🛑 In-flight token validation cancelled")
        return True

    async def _run(self, token: str) -> bool:
        outcome = ValidationOutcome.INDETERMINATE
        try:
            valid = await race_timeout(
                self._auth_api.validate_token(token, timeout=self.timeout),
                self.timeout,
                "Token validation timeout",
            )
            outcome = ValidationOutcome.VALID if valid else ValidationOutcome.INVALID
        except ValidationTimeoutError as e:
            logging.warning(f"⏱️ Token validation timed out after {self.timeout}s")
            log_error("Token validation timeout", e, context={"timeout": self.timeout})
        except NetworkError as e:
            log_error(
                "Token validation network error",
                ValidationNetworkError(str(e), data=e.data),
                level=logging.WARNING,
            )
        except InternalError as e:
            log_error("Token validation failed", e)
        except Exception as e:  # noqa: BLE001
            logging.error(
                f"💥 Unexpected error during token validation: {type(e).__name__} error={str(e)} traceback={traceback.format_exc()}"
            )

        if outcome is ValidationOutcome.INVALID:
            log_error(
                "Token validation",
                InvalidTokenError("backend rejected the session token"),
                level=logging.INFO,
            )
        self.last_outcome = outcome
        if outcome is not ValidationOutcome.VALID:
            self._token_store.clear()
            logging.info(f"🔒 Session token discarded (outcome={outcome.value})")
            return False
        logging.debug("✅ Session token confirmed by backend")
        return True
