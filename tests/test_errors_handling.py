"""Tests for error categorization, structured logging and API error wrapping."""

import logging
from unittest.mock import Mock, patch

import aiohttp
import pytest

from expense_client.errors.handling import categorize_error, handle_api_error, log_error
from expense_client.errors.internal import (
    AuthenticationError,
    ConfigError,
    DataLoadError,
    InvalidTokenError,
    NetworkError,
    NoTokenError,
    ParsingError,
    StorageError,
    ValidationNetworkError,
    ValidationTimeoutError,
)
from expense_client.logging_config import error_aggregator


@pytest.mark.parametrize(
    "error,category",
    [
        (AuthenticationError("no", status=401), "auth"),
        (ValidationTimeoutError("slow"), "auth"),
        (InvalidTokenError("bad"), "auth"),
        (NoTokenError("none"), "auth"),
        (ValidationNetworkError("down"), "network"),
        (NetworkError("down"), "network"),
        (aiohttp.ClientConnectionError("refused"), "network"),
        (StorageError("disk"), "storage"),
        (DataLoadError("500", status=500), "data_load"),
        (ParsingError("json"), "parsing"),
        (ConfigError("conf"), "internal"),
        (RuntimeError("boom"), "unknown"),
    ],
)
def test_categorize_error(error, category):
    assert categorize_error(error) == category


def test_status_kept_on_http_errors():
    error = DataLoadError("failed", status=503)
    assert error.status == 503
    assert error.data == {"status": 503}


def test_log_error_records_category(caplog):
    with caplog.at_level(logging.ERROR):
        log_error("Loading categories failed", DataLoadError("HTTP 500", status=500), {"stage": "categories"})
    summary = error_aggregator.get_error_summary()
    assert summary["data_load"]["total_count"] == 1
    assert "[DATA_LOAD] Loading categories failed: HTTP 500" in caplog.text
    assert "stage=categories" in caplog.text


class TestHandleApiError:
    @pytest.mark.asyncio
    async def test_passes_result_through(self):
        async def operation():
            return 204, None

        assert await handle_api_error(operation, "DELETE /api/expenses/1") == (204, None)

    @pytest.mark.asyncio
    async def test_internal_errors_untouched(self):
        original = AuthenticationError("expired", status=401)

        async def operation():
            raise original

        with pytest.raises(AuthenticationError) as exc_info:
            await handle_api_error(operation, "GET /api/expenses")
        assert exc_info.value is original

    @pytest.mark.asyncio
    async def test_timeout_becomes_network_error(self):
        async def operation():
            raise TimeoutError()

        with pytest.raises(NetworkError, match="timed out in GET /api/expenses"):
            await handle_api_error(operation, "GET /api/expenses")

    @pytest.mark.asyncio
    async def test_client_error_becomes_network_error(self):
        async def operation():
            raise aiohttp.ClientConnectionError("refused")

        with pytest.raises(NetworkError) as exc_info:
            await handle_api_error(operation, "GET /api/expenses")
        assert exc_info.value.data["operation"] == "GET /api/expenses"

    @pytest.mark.asyncio
    async def test_content_type_error_becomes_parsing_error(self):
        async def operation():
            raise aiohttp.ContentTypeError(Mock(real_url="http://x"), (), message="text/html")

        with pytest.raises(ParsingError, match="Unexpected content type"):
            await handle_api_error(operation, "GET /api/expenses")

    @pytest.mark.asyncio
    async def test_value_error_becomes_parsing_error(self):
        async def operation():
            raise ValueError("Expecting value")

        with pytest.raises(ParsingError, match="Malformed response body"):
            await handle_api_error(operation, "GET /api/expenses")

    @pytest.mark.asyncio
    async def test_unrelated_errors_propagate(self):
        async def operation():
            raise KeyError("missing")

        with pytest.raises(KeyError):
            await handle_api_error(operation, "GET /api/expenses")


def test_log_error_uses_structured_logger():
    error = NetworkError("down")
    with patch("expense_client.errors.handling.log_structured_error") as mock_log:
        log_error("Validation failed", error)
    mock_log.assert_called_once_with(
        error_type="network",
        message="Validation failed: down",
        exception=error,
        context=None,
        level=logging.ERROR,
    )
