"""Error hierarchy and handling helpers."""

from .handling import categorize_error, handle_api_error, log_error
from .internal import (
    AuthenticationError,
    ConfigError,
    DataLoadError,
    InternalError,
    InvalidTokenError,
    NetworkError,
    NoTokenError,
    NotFoundError,
    ParsingError,
    SessionError,
    StorageError,
    ValidationNetworkError,
    ValidationTimeoutError,
)

__all__ = [
    "AuthenticationError",
    "ConfigError",
    "DataLoadError",
    "InternalError",
    "InvalidTokenError",
    "NetworkError",
    "NoTokenError",
    "NotFoundError",
    "ParsingError",
    "SessionError",
    "StorageError",
    "ValidationNetworkError",
    "ValidationTimeoutError",
    "categorize_error",
    "handle_api_error",
    "log_error",
]
