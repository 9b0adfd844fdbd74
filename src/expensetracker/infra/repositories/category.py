"""SQLModel implementation of Category repository."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlmodel import Session

from ...errors import CategoryInUseError
from ...models.category import Category
from ...models.common import is_persisted
from .base import SQLModelRepository
from .columns import CATEGORY_COLUMNS, EXPENSE_COLUMNS


class SQLModelCategoryRepository(SQLModelRepository[Category]):
    """SQLModel-based category repository implementation."""

    column_map = CATEGORY_COLUMNS

    def count_expenses(self, category_id: int) -> int:
        """Return how many expenses reference ``category_id``."""
        with self._session() as session:
            return self._count_expenses(session, category_id)

    def _count_expenses(self, session: Session, category_id: int) -> int:
        expenses = EXPENSE_COLUMNS.table()
        statement = (
            select(func.count())
            .select_from(expenses)
            .where(expenses.c.category_id == category_id)
        )
        return int(self._execute(session, statement).scalar_one())

    def delete(self, category: Category) -> bool:
        """Delete a category that no expense references.

        Raises:
            CategoryInUseError: at least one expense still points at it.
        """
        if not is_persisted(category.id):
            return super().delete(category)
        with self._session() as session:
            in_use = self._count_expenses(session, category.id)
            if in_use:
                self.logger.warning(
                    "Category delete refused",
                    extra={"table": self.table_name, "record_id": category.id, "expenses": in_use},
                )
                raise CategoryInUseError(category.id, in_use)
            rowcount = self._delete(session, category.id)
        return self._report("deleted", category.id, rowcount)
