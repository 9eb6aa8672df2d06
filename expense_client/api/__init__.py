"""Asynchronous clients for the expense tracker backend."""

from .auth import AuthAPI
from .client import ApiClient, bearer_headers
from .expenses import ExpenseAPI, write_csv_export
from .models import (
    AuthResponse,
    BudgetStatus,
    Expense,
    ExpenseFilter,
    ExpenseSummary,
    PaymentMethod,
)

__all__ = [
    "ApiClient",
    "AuthAPI",
    "AuthResponse",
    "BudgetStatus",
    "Expense",
    "ExpenseAPI",
    "ExpenseFilter",
    "ExpenseSummary",
    "PaymentMethod",
    "bearer_headers",
    "write_csv_export",
]
