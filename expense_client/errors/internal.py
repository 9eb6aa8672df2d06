"""Centralized internal error hierarchy.

These exceptions provide semantic categories for the session guard and the
page controllers. Only raise these inside application/network boundaries –
never surface raw aiohttp / JSON / filesystem errors to callers; wrap them.

Classes:
  InternalError           – Base for all internal errors.
  NetworkError            – Transport level failure (safe to retry for GETs).
  ParsingError            – Response body did not match the expected schema.
  StorageError            – Local store / cookie file could not be read or written.
  ConfigError             – Client configuration file is invalid.
  AuthenticationError     – Backend rejected credentials or the bearer token.
  NotFoundError           – Backend reported a missing resource.
  DataLoadError           – Non-auth endpoint failed after auth succeeded.
  SessionError            – Base for failures that affect the session guard:
    NoTokenError            – No token held.
    InvalidTokenError       – Backend rejected the held token.
    ValidationTimeoutError  – Validation exceeded its bound.
    ValidationNetworkError  – Transport failure during validation.

Authentication-affecting errors always fail closed (token cleared);
data-load errors fail soft (notification only).
"""

from __future__ import annotations

from collections.abc import Mapping


class InternalError(Exception):
    """Base class for all internal application errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class NetworkError(InternalError):
    """Exception raised for network or transport layer errors.

    This includes connection failures, resets and request timeouts.
    """


class ParsingError(InternalError):
    """Exception raised when a response body does not match its model."""


class StorageError(InternalError):
    """Exception raised when the local store or cookie file is unusable."""


class ConfigError(InternalError):
    """Exception raised for an invalid client configuration file."""


class AuthenticationError(InternalError):
    """Exception raised when the backend rejects credentials or a token.

    Args:
        message: Message returned by the backend, or a generic fallback.
        status: HTTP status of the rejecting response, if any.
    """

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message, data={"status": status})
        self.status = status


class NotFoundError(InternalError):
    """Exception raised when the backend reports a missing resource."""


class DataLoadError(InternalError):
    """Exception raised when a data endpoint fails after authentication.

    Args:
        message: Descriptive error message.
        status: HTTP status of the failing response, if any.
    """

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message, data={"status": status})
        self.status = status


class SessionError(InternalError):
    """Base for errors that drive the session guard's state machine."""


class NoTokenError(SessionError):
    """No session token is held."""


class InvalidTokenError(SessionError):
    """The backend rejected the held session token."""


class ValidationTimeoutError(SessionError):
    """Token validation did not settle within its bound."""


class ValidationNetworkError(SessionError):
    """Transport failure while validating the session token."""


__all__ = [
    "InternalError",
    "NetworkError",
    "ParsingError",
    "StorageError",
    "ConfigError",
    "AuthenticationError",
    "NotFoundError",
    "DataLoadError",
    "SessionError",
    "NoTokenError",
    "InvalidTokenError",
    "ValidationTimeoutError",
    "ValidationNetworkError",
]
