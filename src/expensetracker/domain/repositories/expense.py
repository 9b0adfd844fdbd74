"""Expense repository protocol."""

from __future__ import annotations

from typing import Protocol

from ...models.expense import Expense


class ExpenseRepository(Protocol):
    """Repository for managing expense records."""

    def create(self, expense: Expense) -> int:
        """Insert an expense and return its generated id."""
        ...

    def update(self, expense: Expense) -> bool:
        """Rewrite the mutable fields of an existing expense."""
        ...

    def delete(self, expense: Expense) -> bool:
        """Delete an expense by its id."""
        ...

    def list_all(self) -> list[Expense]:
        """List every stored expense."""
        ...
