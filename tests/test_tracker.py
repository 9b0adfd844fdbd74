"""Tests for the headless tracker controller and display helpers."""

from __future__ import annotations

from datetime import datetime

import pytest

from expensetracker.errors import ConnectivityError
from expensetracker.models import Category, Expense, PaymentMethod
from expensetracker.services.display import (
    UNKNOWN_CATEGORY,
    UNKNOWN_PAYMENT_METHOD,
    category_name,
    expense_rows,
    payment_method_label,
)


def _add_food(tracker) -> int:
    result = tracker.add_category({"name": "Food", "description": "Meals"})
    assert result.ok, result.message
    return result.record_id


def _expense_data(category_id, **overrides):
    data = {
        "category_id": category_id,
        "amount": "500",
        "payment_method": "CASH",
        "description": "Lunch",
        "expense_date": "2024-05-01",
    }
    data.update(overrides)
    return data


def test_refresh_on_empty_store(tracker):
    result = tracker.refresh()

    assert result.ok is True
    assert tracker.categories.items == []
    assert tracker.expenses.items == []


def test_add_category_reloads_list(tracker):
    result = tracker.add_category({"name": "Food", "description": "Meals"})

    assert result.ok is True
    assert result.message == "Category added successfully!"
    assert result.record_id > 0
    assert [(c.id, c.name) for c in tracker.categories.items] == [(result.record_id, "Food")]


def test_invalid_category_is_reported_and_list_unchanged(tracker):
    _add_food(tracker)
    before = tracker.categories.items

    result = tracker.add_category({"name": "", "description": "x"})

    assert result.ok is False
    assert result.message == "Please fill all the fields"
    assert "name" in result.errors
    assert [c.id for c in tracker.categories.items] == [c.id for c in before]


def test_update_category(tracker):
    category_id = _add_food(tracker)

    result = tracker.update_category(category_id, {"name": "Groceries", "description": "Weekly"})

    assert result.ok is True
    assert result.message == "Category updated successfully!"
    assert tracker.find_category(category_id).name == "Groceries"


def test_update_category_requires_selection(tracker):
    result = tracker.update_category(None, {"name": "x", "description": "y"})

    assert result.ok is False
    assert result.message == "Please select a category to update"


def test_rejected_update_leaves_displayed_record_untouched(tracker):
    category_id = _add_food(tracker)

    result = tracker.update_category(category_id, {"name": "", "description": ""})

    assert result.ok is False
    assert tracker.find_category(category_id).name == "Food"


def test_update_of_category_deleted_elsewhere_reports_failure(tracker, category_repo):
    category_id = _add_food(tracker)
    category_repo.delete(Category(id=category_id, name="Food", description="Meals"))

    result = tracker.update_category(category_id, {"name": "Groceries", "description": "Weekly"})

    assert result.ok is False
    assert result.message == "Failed to update category"
    # the failed mutation does not reload, so the stale row is still shown
    assert [c.id for c in tracker.categories.items] == [category_id]


def test_delete_category(tracker):
    category_id = _add_food(tracker)

    result = tracker.delete_category(category_id)

    assert result.ok is True
    assert result.message == "Category deleted successfully!"
    assert tracker.categories.items == []


def test_delete_category_requires_selection(tracker):
    result = tracker.delete_category(123)

    assert result.ok is False
    assert result.message == "Please select a category to delete"


def test_delete_category_in_use_is_reported(tracker):
    category_id = _add_food(tracker)
    assert tracker.add_expense(_expense_data(category_id)).ok

    result = tracker.delete_category(category_id)

    assert result.ok is False
    assert result.message.startswith("Delete failed: ")
    assert [c.id for c in tracker.categories.items] == [category_id]


def test_expense_lifecycle(tracker):
    category_id = _add_food(tracker)

    added = tracker.add_expense(_expense_data(category_id))
    assert added.ok is True
    assert added.message == "Expense added successfully!"
    (expense,) = tracker.expenses.items
    assert expense.id == added.record_id
    assert expense.amount == 500
    assert expense.payment_method is PaymentMethod.CASH

    updated = tracker.update_expense(
        added.record_id, _expense_data(category_id, amount="650", payment_method="BANK_ACCOUNT")
    )
    assert updated.ok is True
    assert updated.message == "Expense updated successfully!"
    (expense,) = tracker.expenses.items
    assert expense.amount == 650
    assert expense.payment_method is PaymentMethod.BANK_ACCOUNT

    deleted = tracker.delete_expense(added.record_id)
    assert deleted.ok is True
    assert deleted.message == "Expense deleted successfully!"
    assert tracker.expenses.items == []


def test_add_expense_validation_messages(tracker):
    category_id = _add_food(tracker)

    result = tracker.add_expense(_expense_data(category_id, amount="0"))

    assert result.ok is False
    assert result.errors["amount"] == ["Amount must be greater than 0"]
    assert tracker.expenses.items == []


def test_add_expense_for_missing_category_reports_store_error(tracker):
    result = tracker.add_expense(_expense_data(999))

    assert result.ok is False
    assert result.message.startswith("Error adding expense: ")
    assert tracker.expenses.items == []


def test_update_and_delete_expense_require_selection(tracker):
    assert tracker.update_expense(None, {}).message == "Please select an expense to update"
    assert tracker.delete_expense(None).message == "Please select an expense to delete"


def test_connectivity_errors_propagate(tracker, monkeypatch):
    def unreachable(category):
        raise ConnectivityError("Could not connect to the database")

    monkeypatch.setattr(tracker.category_repo, "create", unreachable)

    with pytest.raises(ConnectivityError):
        tracker.add_category({"name": "Food", "description": "Meals"})


def test_expense_table_resolves_names(tracker):
    category_id = _add_food(tracker)
    tracker.add_expense(_expense_data(category_id))

    (row,) = tracker.expense_table()

    assert row.category == "Food"
    assert row.payment_method == "CASH"
    assert row.amount == 500
    assert row.expense_date == "2024-05-01 00:00"


def test_display_helpers_fall_back_for_unknown_values():
    categories = [Category(id=1, name="Food", description="")]

    assert category_name(1, categories) == "Food"
    assert category_name(2, categories) == UNKNOWN_CATEGORY
    assert payment_method_label(None) == UNKNOWN_PAYMENT_METHOD
    assert payment_method_label(PaymentMethod.BANK_ACCOUNT) == "BANK_ACCOUNT"
    assert expense_rows([], categories) == []


def test_expense_rows_show_time_to_the_minute_and_unknown_category():
    categories = [Category(id=1, name="Food", description="")]
    expenses = [
        Expense(
            id=7,
            category_id=9,
            payment_method=PaymentMethod.CASH,
            amount=42,
            description="Taxi",
            expense_date=datetime(2024, 3, 15, 18, 45, 30),
        )
    ]

    (row,) = expense_rows(expenses, iter(categories))

    assert row.category == UNKNOWN_CATEGORY
    assert row.expense_date == "2024-03-15 18:45"
