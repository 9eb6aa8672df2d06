from datetime import date

import pytest
from pydantic import ValidationError

from expense_client.api.models import (
    AuthResponse,
    BudgetStatus,
    Expense,
    ExpenseFilter,
    PaymentMethod,
)


def test_expense_parses_camel_case():
    expense = Expense.model_validate(
        {
            "id": 3,
            "amount": 99.5,
            "category": "Travel",
            "expenseDate": "2024-02-29",
            "paymentMethod": "UPI",
            "upiVpa": "alice@bank",
            "transactionId": "TX1",
        }
    )
    assert expense.expense_date == date(2024, 2, 29)
    assert expense.payment_method is PaymentMethod.UPI
    assert expense.upi_vpa == "alice@bank"


def test_expense_rejects_unknown_payment_method():
    with pytest.raises(ValidationError):
        Expense(amount=1, category="x", expense_date=date(2024, 1, 1), payment_method="CARD")


def test_expense_request_omits_server_fields():
    expense = Expense(
        id=5,
        amount=10,
        category="Food",
        expense_date=date(2024, 1, 2),
        payment_method="UPI",
        upi_vpa="a@b",
        cash_amount=0,
        upi_amount=10,
    )
    assert expense.to_request() == {
        "amount": 10.0,
        "category": "Food",
        "expenseDate": "2024-01-02",
        "paymentMethod": "UPI",
        "upiVpa": "a@b",
    }


def test_filter_blank_values_dropped():
    filters = ExpenseFilter(category="  ", upi_vpa="", transaction_id=" TX ")
    assert filters.to_params() == {"transactionId": "TX"}
    assert filters.has_filters()
    assert not ExpenseFilter().has_filters()


def test_auth_response_tolerates_missing_fields():
    assert AuthResponse.model_validate({}).token is None


@pytest.mark.parametrize(
    "budget,spent,remaining,percent,over",
    [
        (1000.0, 250.0, 750.0, 25.0, False),
        (1000.0, 1000.0, 0.0, 100.0, False),
        (100.0, 150.0, -50.0, 150.0, True),
        (0.0, 0.0, 0.0, 0.0, False),
        (0.0, 5.0, -5.0, 100.0, True),
    ],
)
def test_budget_status(budget, spent, remaining, percent, over):
    status = BudgetStatus.compute(budget, spent)
    assert status.remaining == remaining
    assert status.percent_used == percent
    assert status.over_budget is over


def test_budget_status_without_budget():
    status = BudgetStatus.compute(None, 42.0)
    assert status.budget is None
    assert status.remaining is None
    assert not status.over_budget
