"""Headless controller behind the category and expense forms.

Each action validates the submitted field values, runs one repository call
through a ListSynchronizer and returns the message the form should show.
Connectivity failures are not turned into messages; they propagate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..domain.repositories import CategoryRepository, ExpenseRepository
from ..errors import ConnectivityError, ExpenseTrackerError, ValidationError
from ..logging_config import get_logger
from ..models.category import Category
from ..models.expense import Expense
from .display import ExpenseRow, expense_rows
from .forms import CategoryForm, ExpenseForm
from .sync import ListSynchronizer

logger = get_logger(__name__)

# Store failures that become a message instead of propagating.
_REPORTABLE_ERRORS = (ExpenseTrackerError, SQLAlchemyError)


def _copy_record(record):
    return type(record)(**record.model_dump())


@dataclass
class ActionResult:
    """What a form action reports back to the user."""

    ok: bool
    message: str
    errors: dict[str, list[str]] = field(default_factory=dict)
    record_id: Optional[int] = None


class ExpenseTracker:
    """Category and expense actions with mutate-then-reload lists."""

    def __init__(self, category_repo: CategoryRepository, expense_repo: ExpenseRepository):
        self.category_repo = category_repo
        self.expense_repo = expense_repo
        self.categories: ListSynchronizer[Category] = ListSynchronizer(
            category_repo.list_all, name="categories"
        )
        self.expenses: ListSynchronizer[Expense] = ListSynchronizer(
            expense_repo.list_all, name="expenses"
        )

    def refresh(self) -> ActionResult:
        """Load both lists from the store."""
        for sync, label in ((self.categories, "categories"), (self.expenses, "expenses")):
            try:
                sync.reload()
            except ConnectivityError:
                raise
            except _REPORTABLE_ERRORS as exc:
                logger.error(f"Failed to load {label}: {exc}", exc_info=True)
                return ActionResult(False, f"Error loading {label}: {exc}")
        return ActionResult(True, "Loaded")

    def expense_table(self) -> list[ExpenseRow]:
        return expense_rows(self.expenses.items, self.categories.items)

    def find_category(self, category_id: Optional[int]) -> Optional[Category]:
        return next((c for c in self.categories.items if c.id == category_id), None)

    def find_expense(self, expense_id: Optional[int]) -> Optional[Expense]:
        return next((e for e in self.expenses.items if e.id == expense_id), None)

    def add_category(self, data: Mapping[str, Any]) -> ActionResult:
        form = CategoryForm.from_mapping(data)
        return self._run(
            self.categories,
            lambda: self.category_repo.create(form.to_record()),
            success="Category added successfully!",
            failure="Failed to add category",
            error_prefix="Database error",
        )

    def update_category(self, category_id: Optional[int], data: Mapping[str, Any]) -> ActionResult:
        selected = self.find_category(category_id)
        if selected is None:
            return ActionResult(False, "Please select a category to update")
        form = CategoryForm.from_mapping(data)
        # a rejected update must leave the displayed record untouched
        edited = _copy_record(selected)
        return self._run(
            self.categories,
            lambda: self.category_repo.update(form.to_record(edited)),
            success="Category updated successfully!",
            failure="Failed to update category",
            error_prefix="Update failed",
            record_id=category_id,
        )

    def delete_category(self, category_id: Optional[int]) -> ActionResult:
        selected = self.find_category(category_id)
        if selected is None:
            return ActionResult(False, "Please select a category to delete")
        return self._run(
            self.categories,
            lambda: self.category_repo.delete(selected),
            success="Category deleted successfully!",
            failure="Failed to delete category",
            error_prefix="Delete failed",
            record_id=category_id,
        )

    def add_expense(self, data: Mapping[str, Any]) -> ActionResult:
        form = ExpenseForm.from_mapping(data)
        return self._run(
            self.expenses,
            lambda: self.expense_repo.create(form.to_record()),
            success="Expense added successfully!",
            failure="Failed to add expense",
            error_prefix="Error adding expense",
        )

    def update_expense(self, expense_id: Optional[int], data: Mapping[str, Any]) -> ActionResult:
        selected = self.find_expense(expense_id)
        if selected is None:
            return ActionResult(False, "Please select an expense to update")
        form = ExpenseForm.from_mapping(data)
        edited = _copy_record(selected)
        return self._run(
            self.expenses,
            lambda: self.expense_repo.update(form.to_record(edited)),
            success="Expense updated successfully!",
            failure="Failed to update expense",
            error_prefix="Update failed",
            record_id=expense_id,
        )

    def delete_expense(self, expense_id: Optional[int]) -> ActionResult:
        selected = self.find_expense(expense_id)
        if selected is None:
            return ActionResult(False, "Please select an expense to delete")
        return self._run(
            self.expenses,
            lambda: self.expense_repo.delete(selected),
            success="Expense deleted successfully!",
            failure="Failed to delete expense",
            error_prefix="Delete failed",
            record_id=expense_id,
        )

    def _run(
        self,
        sync: ListSynchronizer,
        op: Callable[[], Any],
        *,
        success: str,
        failure: str,
        error_prefix: str,
        record_id: Optional[int] = None,
    ) -> ActionResult:
        try:
            outcome = sync.apply_mutation(op)
        except ValidationError as exc:
            return ActionResult(False, str(exc), errors=exc.errors, record_id=record_id)
        except ConnectivityError:
            raise
        except _REPORTABLE_ERRORS as exc:
            logger.error(f"{error_prefix}: {exc}", exc_info=True)
            return ActionResult(False, f"{error_prefix}: {exc}", record_id=record_id)

        if not outcome.succeeded:
            return ActionResult(False, failure, record_id=record_id)
        if isinstance(outcome.value, bool):
            new_id = record_id
        else:
            new_id = outcome.value
        logger.info(success, extra={"list": sync.name, "record_id": new_id})
        return ActionResult(True, success, record_id=new_id)
