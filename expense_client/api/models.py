"""Wire models for the expense tracker backend (camelCase JSON)."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict using the backend's camelCase names."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class AuthResponse(_CamelModel):
    """Body returned by ``/api/auth/login``, ``/register`` and ``/validate``."""

    token: str | None = None
    username: str | None = None
    email: str | None = None
    message: str | None = None


class PaymentMethod(str, Enum):
    CASH = "CASH"
    UPI = "UPI"


class Expense(_CamelModel):
    """An expense as stored by the backend.

    Attributes:
        id: Backend identifier; None for an expense not yet created.
        amount: Amount spent.
        category: Category name, taken as-is from the backend.
        expense_date: Day the expense happened.
        payment_method: CASH or UPI.
        upi_vpa: UPI virtual payment address (UPI only).
        transaction_id: UPI transaction reference (UPI only).
        payer_name: Optional payer name.
        notes: Free-form notes.
        cash_amount: Backend-computed cash portion.
        upi_amount: Backend-computed UPI portion.
    """

    id: int | None = None
    amount: float
    category: str
    expense_date: date
    payment_method: PaymentMethod
    upi_vpa: str | None = None
    transaction_id: str | None = None
    payer_name: str | None = None
    notes: str | None = None
    cash_amount: float = 0.0
    upi_amount: float = 0.0

    def to_request(self) -> dict[str, Any]:
        """Body for create/update; server-computed fields are left out."""
        return self.model_dump(
            by_alias=True,
            exclude_none=True,
            exclude={"id", "cash_amount", "upi_amount"},
            mode="json",
        )


class ExpenseFilter(_CamelModel):
    """Query filters accepted by ``GET /api/expenses`` and the CSV export."""

    category: str | None = None
    payment_method: PaymentMethod | None = None
    start_date: date | None = None
    end_date: date | None = None
    upi_vpa: str | None = None
    transaction_id: str | None = None

    @field_validator("category", "upi_vpa", "transaction_id", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    def to_params(self) -> dict[str, str]:
        return {k: str(v) for k, v in self.to_payload().items()}

    def has_filters(self) -> bool:
        return bool(self.to_payload())


class ExpenseSummary(_CamelModel):
    total_amount: float = 0.0
    total_cash_amount: float = 0.0
    total_upi_amount: float = 0.0
    total_transactions: int = 0
    category_totals: dict[str, float] = Field(default_factory=dict)
    payment_method_totals: dict[str, float] = Field(default_factory=dict)

    @field_validator(
        "total_amount", "total_cash_amount", "total_upi_amount", mode="before"
    )
    @classmethod
    def null_total_to_zero(cls, v: Any) -> Any:
        return 0.0 if v is None else v

    @field_validator("category_totals", "payment_method_totals", mode="before")
    @classmethod
    def null_map_to_empty(cls, v: Any) -> Any:
        return {} if v is None else v


class BudgetStatus(BaseModel):
    """Spending measured against the cached budget."""

    budget: float | None
    spent: float
    remaining: float | None
    percent_used: float | None
    over_budget: bool

    @classmethod
    def compute(cls, budget: float | None, spent: float) -> BudgetStatus:
        if budget is None:
            return cls(
                budget=None, spent=spent, remaining=None, percent_used=None, over_budget=False
            )
        percent = (spent / budget * 100.0) if budget > 0 else (100.0 if spent > 0 else 0.0)
        return cls(
            budget=budget,
            spent=spent,
            remaining=budget - spent,
            percent_used=round(percent, 2),
            over_budget=spent > budget,
        )
