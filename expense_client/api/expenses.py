"""Client for the ``/api/expenses`` endpoints."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from datetime import date
from pathlib import Path
from typing import Any

import aiohttp
from pydantic import TypeAdapter, ValidationError

from ..constants import DATA_LOAD_MAX_ATTEMPTS, EXPENSES_API_PATH, HTTP_REQUEST_TIMEOUT_SECONDS
from ..errors.internal import (
    AuthenticationError,
    DataLoadError,
    NotFoundError,
    ParsingError,
)
from ..utils.retry import retry_async
from .client import ApiClient, response_message
from .models import Expense, ExpenseFilter, ExpenseSummary

_EXPENSE_LIST = TypeAdapter(list[Expense])
_CATEGORY_LIST = TypeAdapter(list[str])


class ExpenseAPI(ApiClient):
    """Authenticated expense CRUD, summary, categories and CSV export.

    Every request carries the headers returned by ``headers_provider``,
    normally the session guard's ``auth_headers`` helper. GET requests are
    retried on transport failures; mutations are sent once.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        base_url: str,
        headers_provider: Callable[[], dict[str, str]],
        *,
        request_timeout: float = HTTP_REQUEST_TIMEOUT_SECONDS,
        max_attempts: int = DATA_LOAD_MAX_ATTEMPTS,
    ):
        super().__init__(session, base_url, request_timeout=request_timeout)
        self._headers_provider = headers_provider
        self.max_attempts = max_attempts

    async def _call(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json_body: Any = None,
    ) -> Any:
        context = f"{method} {path}"

        async def attempt() -> tuple[int, Any]:
            return await self._request(
                method,
                path,
                headers=self._headers_provider(),
                params=params,
                json_body=json_body,
            )

        if method == "GET":
            status, payload = await retry_async(
                attempt, context=context, max_attempts=self.max_attempts
            )
        else:
            status, payload = await attempt()
        self._raise_for_status(status, payload, context)
        return payload

    @staticmethod
    def _raise_for_status(status: int, payload: Any, context: str) -> None:
        if 200 <= status < 300:
            return
        message = response_message(payload)
        if status in (401, 403):
            raise AuthenticationError(message or f"Not authorized: {context}", status=status)
        if status == 404:
            raise NotFoundError(message or f"Not found: {context}", data={"status": status})
        raise DataLoadError(message or f"{context} failed with HTTP {status}", status=status)

    @staticmethod
    def _parse(adapter_or_model: Any, payload: Any, context: str) -> Any:
        try:
            if isinstance(adapter_or_model, TypeAdapter):
                return adapter_or_model.validate_python(payload)
            return adapter_or_model.model_validate(payload)
        except ValidationError as e:
            raise ParsingError(f"Unexpected response body for {context}: {e}") from e

    async def list_expenses(self, filters: ExpenseFilter | None = None) -> list[Expense]:
        params = filters.to_params() if filters else None
        payload = await self._call("GET", EXPENSES_API_PATH, params=params or None)
        return self._parse(_EXPENSE_LIST, payload, "expense list")

    async def get_expense(self, expense_id: int) -> Expense:
        payload = await self._call("GET", f"{EXPENSES_API_PATH}/{expense_id}")
        return self._parse(Expense, payload, f"expense {expense_id}")

    async def create_expense(self, expense: Expense) -> Expense:
        payload = await self._call("POST", EXPENSES_API_PATH, json_body=expense.to_request())
        return self._parse(Expense, payload, "created expense")

    async def update_expense(self, expense_id: int, expense: Expense) -> Expense:
        payload = await self._call(
            "PUT", f"{EXPENSES_API_PATH}/{expense_id}", json_body=expense.to_request()
        )
        return self._parse(Expense, payload, f"updated expense {expense_id}")

    async def delete_expense(self, expense_id: int) -> None:
        await self._call("DELETE", f"{EXPENSES_API_PATH}/{expense_id}")

    async def get_summary(self) -> ExpenseSummary:
        payload = await self._call("GET", f"{EXPENSES_API_PATH}/summary")
        return self._parse(ExpenseSummary, payload, "expense summary")

    async def get_categories(self) -> list[str]:
        payload = await self._call("GET", f"{EXPENSES_API_PATH}/categories")
        return self._parse(_CATEGORY_LIST, payload, "category list")

    async def export_csv(self, filters: ExpenseFilter | None = None) -> str:
        params = filters.to_params() if filters else None
        payload = await self._call(
            "GET", f"{EXPENSES_API_PATH}/export/csv", params=params or None
        )
        if not isinstance(payload, str):
            raise ParsingError("CSV export did not return text")
        return payload


def write_csv_export(
    content: str, directory: str | os.PathLike[str], today: date | None = None
) -> Path:
    """Save an export as ``expenses_<YYYY-MM-DD>.csv`` inside ``directory``."""
    day = today or date.today()
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / f"expenses_{day.isoformat()}.csv"
    target.write_text(content, encoding="utf-8")
    logging.info(f"💾 Expenses exported to {target}")
    return target
