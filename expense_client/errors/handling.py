from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

import aiohttp

from ..logging_config import log_structured_error
from .internal import (
    AuthenticationError,
    DataLoadError,
    InternalError,
    NetworkError,
    ParsingError,
    SessionError,
    StorageError,
    ValidationNetworkError,
)

T = TypeVar("T")


def categorize_error(error: Exception) -> str:
    """Return the structured-logging category for an exception."""
    if isinstance(error, ValidationNetworkError):
        return "network"
    if isinstance(error, AuthenticationError | SessionError):
        return "auth"
    if isinstance(error, NetworkError | aiohttp.ClientError | ConnectionError):
        return "network"
    if isinstance(error, StorageError):
        return "storage"
    if isinstance(error, DataLoadError):
        return "data_load"
    if isinstance(error, ParsingError):
        return "parsing"
    if isinstance(error, OSError):
        return "network"
    if isinstance(error, InternalError):
        return "internal"
    return "unknown"


def log_error(
    message: str, error: Exception, context: dict = None, level: int = logging.ERROR
) -> None:
    """Logs an error message with the associated exception details.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
        level: Logging level; routine session outcomes log below ERROR.
    """
    log_structured_error(
        error_type=categorize_error(error),
        message=f"{message}: {str(error)}",
        exception=error,
        context=context,
        level=level,
    )


async def handle_api_error(operation: Callable[[], Awaitable[T]], context: str) -> T:  # type: ignore[valid-type]
    """Run a backend call and translate transport failures into the hierarchy.

    Internal errors raised by the operation pass through untouched so the
    caller keeps the precise category (auth vs data load).

    Args:
        operation: The async API operation to execute.
        context: Descriptive context for the operation (e.g., "GET /api/expenses").

    Returns:
        The result of the operation if successful.

    Raises:
        NetworkError: On transport failures and request timeouts.
        ParsingError: When the response body cannot be decoded.
    """
    try:
        return await operation()
    except InternalError:
        raise
    except TimeoutError as e:
        raise NetworkError(
            f"Request timed out in {context}", data={"operation": context}
        ) from e
    except aiohttp.ContentTypeError as e:
        raise ParsingError(
            f"Unexpected content type in {context}: {e.message}",
            data={"operation": context},
        ) from e
    except (aiohttp.ClientError, OSError) as e:
        error_context = {"operation": context, "timestamp": time.time()}
        if hasattr(e, "status"):
            error_context["http_status"] = e.status
        raise NetworkError(
            f"Network connectivity issue in {context}. Check that the backend is reachable. Error: {str(e)}",
            data=error_context,
        ) from e
    except ValueError as e:
        raise ParsingError(
            f"Malformed response body in {context}: {str(e)}",
            data={"operation": context},
        ) from e
