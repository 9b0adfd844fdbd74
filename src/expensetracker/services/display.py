"""Helpers that turn records into table rows for the form UI."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, NamedTuple, Optional

from ..models.category import Category
from ..models.expense import Expense, PaymentMethod

UNKNOWN_CATEGORY = "Unknown"
UNKNOWN_PAYMENT_METHOD = "UNKNOWN"
DATE_FORMAT = "%Y-%m-%d %H:%M"


class ExpenseRow(NamedTuple):
    id: Optional[int]
    category: str
    payment_method: str
    amount: int
    description: str
    expense_date: str


def category_name(category_id: Optional[int], categories: Iterable[Category]) -> str:
    """Return the name of ``category_id`` or ``"Unknown"`` if it is not listed."""

    for category in categories:
        if category.id == category_id:
            return category.name
    return UNKNOWN_CATEGORY


def payment_method_label(value: Optional[PaymentMethod]) -> str:
    if value is None:
        return UNKNOWN_PAYMENT_METHOD
    return value.name


def format_date(value: Optional[datetime]) -> str:
    return value.strftime(DATE_FORMAT) if value is not None else ""


def expense_rows(expenses: Iterable[Expense], categories: Iterable[Category]) -> list[ExpenseRow]:
    """Build display rows, resolving category ids to names."""

    categories = list(categories)
    return [
        ExpenseRow(
            id=expense.id,
            category=category_name(expense.category_id, categories),
            payment_method=payment_method_label(expense.payment_method),
            amount=expense.amount,
            description=expense.description or "",
            expense_date=format_date(expense.expense_date),
        )
        for expense in expenses
    ]
