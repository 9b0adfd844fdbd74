"""SQLModel implementation of Expense repository."""

from __future__ import annotations

from typing import Any

from sqlalchemy.engine import RowMapping

from ...models.expense import Expense, PaymentMethod
from .base import SQLModelRepository
from .columns import EXPENSE_COLUMNS


class SQLModelExpenseRepository(SQLModelRepository[Expense]):
    """SQLModel-based expense repository implementation."""

    column_map = EXPENSE_COLUMNS

    def _to_params(self, record: Expense, fields: tuple[tuple[str, str], ...]) -> dict[str, Any]:
        params = super()._to_params(record, fields)
        method = params.get("payment_method")
        if isinstance(method, PaymentMethod):
            params["payment_method"] = method.to_db()
        return params

    def _from_row(self, row: RowMapping) -> Expense:
        expense = super()._from_row(row)
        expense.payment_method = PaymentMethod.from_db(row["payment_method"], record_id=row["id"])
        amount = row["amount"]
        expense.amount = int(amount) if amount is not None else amount
        return expense
