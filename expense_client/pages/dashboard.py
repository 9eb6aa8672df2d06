"""Authenticated dashboard page controller."""

from __future__ import annotations

import asyncio
import logging
import os
import traceback
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import TypeVar

from ..api.expenses import ExpenseAPI, write_csv_export
from ..api.models import BudgetStatus, Expense, ExpenseFilter, ExpenseSummary
from ..constants import (
    AUTH_FAILURE_REDIRECT_DELAY_SECONDS,
    DASHBOARD_INIT_TIMEOUT_SECONDS,
    DEFAULT_VIEW,
    LOGIN_PATH,
)
from ..errors.handling import log_error
from ..errors.internal import (
    AuthenticationError,
    InternalError,
    NoTokenError,
    ValidationTimeoutError,
)
from ..session.guard import GuardState, SessionGuard
from ..session.notifier import NotificationLevel, Notifier
from ..session.timeouts import race_timeout
from ..storage.preferences import Preferences

T = TypeVar("T")

LOGOUT_PROMPT = "Are you sure you want to logout?"
DELETE_PROMPT = "Are you sure you want to delete this expense?"


def _always_confirm(_prompt: str) -> bool:
    return True


@dataclass
class DashboardState:
    """What the dashboard has loaded so far.

    A stage that failed keeps its previous value and is listed in
    ``failed_loads``.
    """

    categories: list[str] = field(default_factory=list)
    budget: BudgetStatus | None = None
    view: str = DEFAULT_VIEW
    expenses: list[Expense] = field(default_factory=list)
    summary: ExpenseSummary | None = None
    filters: ExpenseFilter | None = None
    failed_loads: list[str] = field(default_factory=list)
    last_error: str | None = None


class DashboardPage:
    """Authenticated entry page.

    ``on_load`` confirms the held token under an outer timeout and then
    loads categories, budget, view preference and expenses one after the
    other. Data failures are reported and tolerated. A rejected token,
    from validation or from any data call, clears the session and sends
    the user to the login page.
    """

    def __init__(
        self,
        guard: SessionGuard,
        expense_api: ExpenseAPI,
        preferences: Preferences,
        notifier: Notifier,
        *,
        init_timeout: float = DASHBOARD_INIT_TIMEOUT_SECONDS,
        failure_delay: float = AUTH_FAILURE_REDIRECT_DELAY_SECONDS,
        confirm: Callable[[str], bool] | None = None,
    ) -> None:
        self.guard = guard
        self.expense_api = expense_api
        self.preferences = preferences
        self.notifier = notifier
        self.init_timeout = init_timeout
        self.failure_delay = failure_delay
        self.confirm = confirm or _always_confirm
        self.state = DashboardState()

    async def on_load(self) -> GuardState:
        guard = self.guard
        if guard.is_initialized or guard.is_busy or guard.state is GuardState.VALIDATING:
            logging.debug("⏭️ Dashboard already initialized, validating or redirecting")
            return guard.state

        try:
            token = guard.read_token()
            if not token:
                log_error("Dashboard load", NoTokenError("no stored session token"), level=logging.INFO)
                guard.redirect(LOGIN_PATH)
                return guard.state

            guard.begin_validation()
            valid = await race_timeout(
                guard.validator.validate(token),
                self.init_timeout,
                "Authentication timeout",
            )
            if not valid:
                guard.token_store.clear()
                if guard.navigator.current_path != LOGIN_PATH:
                    guard.redirect(LOGIN_PATH)
                else:
                    guard.mark_unauthenticated()
                return guard.state

            guard.mark_authenticated()
            logging.info("🏠 Dashboard authenticated, loading data")
            await self.load_data()
        except ValidationTimeoutError as e:
            log_error("Dashboard authentication timed out", e, context={"timeout": self.init_timeout})
            guard.validator.cancel()
            self.notifier.notify(
                "Authentication timed out. Please log in again.", NotificationLevel.ERROR
            )
            await asyncio.sleep(self.failure_delay)
            guard.token_store.clear()
            guard.redirect(LOGIN_PATH)
        except Exception as e:  # noqa: BLE001
            logging.error(
                f"💥 Dashboard initialization failed: {type(e).__name__} error={str(e)} traceback={traceback.format_exc()}"
            )
            if guard.state is GuardState.VALIDATING:
                guard.mark_unauthenticated()
            self.state.last_error = str(e)
            self.notifier.notify(
                "Failed to initialize dashboard. Please refresh the page.",
                NotificationLevel.ERROR,
            )
        return guard.state

    async def load_data(self) -> DashboardState:
        """Run every data-load stage in order; one failing does not stop the rest."""
        stages: list[tuple[str, Callable[[], Awaitable[None]]]] = [
            ("categories", self._load_categories),
            ("budget", self._load_budget),
            ("view preference", self._load_view_preference),
            ("expenses", self._load_expenses),
        ]
        for name, loader in stages:
            if self.guard.is_redirecting:
                break
            await self._load_stage(name, loader)
        return self.state

    async def _load_stage(self, name: str, loader: Callable[[], Awaitable[None]]) -> bool:
        try:
            await loader()
        except AuthenticationError as e:
            self._fail_closed(e)
            return False
        except Exception as e:  # noqa: BLE001
            self.state.failed_loads.append(name)
            self.state.last_error = str(e)
            log_error(f"Failed to load {name}", e, context={"stage": name})
            self.notifier.notify(f"Error loading {name}", NotificationLevel.WARNING)
            return False
        if name in self.state.failed_loads:
            self.state.failed_loads.remove(name)
        return True

    async def _load_categories(self) -> None:
        categories = await self.expense_api.get_categories()
        self.state.categories = list(dict.fromkeys(categories))
        logging.debug(f"📂 Loaded {len(self.state.categories)} categories")

    async def _load_budget(self) -> None:
        summary = await self.expense_api.get_summary()
        self.state.summary = summary
        self._refresh_budget()

    async def _load_view_preference(self) -> None:
        self.state.view = self.preferences.preferred_view

    async def _load_expenses(self) -> None:
        self.state.expenses = await self.expense_api.list_expenses(self.state.filters)
        logging.debug(f"🧾 Loaded {len(self.state.expenses)} expenses")

    def _refresh_budget(self) -> None:
        spent = self.state.summary.total_amount if self.state.summary else 0.0
        status = BudgetStatus.compute(self.preferences.budget, spent)
        self.state.budget = status
        if status.over_budget:
            self.notifier.notify(
                f"Budget exceeded! Spent {status.spent:.2f} of {status.budget:.2f}",
                NotificationLevel.WARNING,
            )

    def _fail_closed(self, error: AuthenticationError) -> None:
        log_error("Session rejected by backend", error, context={"status": error.status})
        self.notifier.notify("Session expired. Please log in again.", NotificationLevel.ERROR)
        self.guard.token_store.clear()
        if self.guard.navigator.current_path != LOGIN_PATH:
            self.guard.redirect(LOGIN_PATH)

    async def _action(  # type: ignore[valid-type]
        self,
        operation: Callable[[], Awaitable[T]],
        failure_message: str,
    ) -> T | None:
        try:
            return await operation()
        except AuthenticationError as e:
            self._fail_closed(e)
        except InternalError as e:
            self.state.last_error = str(e)
            log_error(failure_message, e)
            self.notifier.notify(failure_message, NotificationLevel.ERROR)
        return None

    async def refresh_expenses(self) -> list[Expense]:
        await self._load_stage("expenses", self._load_expenses)
        return self.state.expenses

    async def apply_filters(self, filters: ExpenseFilter | None) -> list[Expense]:
        self.state.filters = filters if filters and filters.has_filters() else None
        return await self.refresh_expenses()

    async def clear_filters(self) -> list[Expense]:
        return await self.apply_filters(None)

    async def save_expense(self, expense: Expense, expense_id: int | None = None) -> Expense | None:
        if expense_id is None:
            saved = await self._action(
                lambda: self.expense_api.create_expense(expense), "Error saving expense"
            )
            success = "Expense added successfully!"
        else:
            saved = await self._action(
                lambda: self.expense_api.update_expense(expense_id, expense),
                "Error saving expense",
            )
            success = "Expense updated successfully!"
        if saved is None:
            return None
        self.notifier.notify(success, NotificationLevel.SUCCESS)
        await self.refresh_expenses()
        await self._load_stage("budget", self._load_budget)
        return saved

    async def delete_expense(self, expense_id: int) -> bool:
        if not self.confirm(DELETE_PROMPT):
            return False

        async def delete() -> bool:
            await self.expense_api.delete_expense(expense_id)
            return True

        if not await self._action(delete, "Error deleting expense"):
            return False
        self.notifier.notify("Expense deleted successfully!", NotificationLevel.SUCCESS)
        await self.refresh_expenses()
        await self._load_stage("budget", self._load_budget)
        return True

    async def export_csv(
        self, directory: str | os.PathLike[str], today: date | None = None
    ) -> Path | None:
        content = await self._action(
            lambda: self.expense_api.export_csv(self.state.filters), "Error exporting expenses"
        )
        if content is None:
            return None
        try:
            target = write_csv_export(content, directory, today)
        except OSError as e:
            log_error("Error writing CSV export", e, context={"directory": str(directory)})
            self.notifier.notify("Error exporting expenses", NotificationLevel.ERROR)
            return None
        self.notifier.notify("Expenses exported successfully!", NotificationLevel.SUCCESS)
        return target

    async def show_summary(self) -> ExpenseSummary | None:
        summary = await self._action(self.expense_api.get_summary, "Error loading summary")
        if summary is not None:
            self.state.summary = summary
            self._refresh_budget()
        return summary

    def switch_view(self, view: str) -> str:
        self.preferences.set_preferred_view(view)
        self.state.view = view
        return view

    def set_budget(self, amount: float | None) -> BudgetStatus:
        self.preferences.set_budget(amount)
        self._refresh_budget()
        if amount is not None:
            self.notifier.notify("Budget saved successfully!", NotificationLevel.SUCCESS)
        return self.state.budget

    def toggle_theme(self) -> str:
        return self.preferences.toggle_theme()

    def logout(self) -> bool:
        """Sign out after confirmation; declining changes nothing."""
        if not self.confirm(LOGOUT_PROMPT):
            logging.debug("↩️ Logout cancelled")
            return False
        guard = self.guard
        guard.token_store.clear()
        guard.reset()
        guard.redirect(LOGIN_PATH)
        logging.info("👋 Logged out")
        return True
