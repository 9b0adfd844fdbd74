"""Pytest configuration and shared fixtures for expense tracker tests.

This module provides database fixtures, record factories and helper utilities
for testing repositories, the list synchronizer and the tracker controller
without touching the real application database.
"""

from __future__ import annotations

from datetime import datetime

import pytest

from expensetracker.config import BaseConfig
from expensetracker.infra.database import bootstrap_database
from expensetracker.infra.repositories import (
    SQLModelCategoryRepository,
    SQLModelExpenseRepository,
)
from expensetracker.models import Category, Expense, PaymentMethod
from expensetracker.services.tracker import ExpenseTracker

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def app_config(tmp_path, monkeypatch) -> BaseConfig:
    """Configuration pointing at a fresh SQLite file under ``tmp_path``."""

    monkeypatch.setenv("EXPENSETRACKER_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("EXPENSETRACKER_DATABASE_URL", raising=False)
    monkeypatch.setenv("EXPENSETRACKER_SQL_ECHO", "false")
    return BaseConfig()


@pytest.fixture
def db_engine_and_factory(app_config):
    """Create an isolated SQLite database for each test.

    Yields:
        tuple: (engine, session_factory) with the schema already created
    """
    engine, session_factory = bootstrap_database(app_config)
    yield engine, session_factory
    engine.dispose()


@pytest.fixture
def db_engine(db_engine_and_factory):
    return db_engine_and_factory[0]


@pytest.fixture
def session_factory(db_engine_and_factory):
    """Session factory matching what the repositories expect."""
    return db_engine_and_factory[1]


@pytest.fixture
def category_repo(session_factory) -> SQLModelCategoryRepository:
    return SQLModelCategoryRepository(session_factory)


@pytest.fixture
def expense_repo(session_factory) -> SQLModelExpenseRepository:
    return SQLModelExpenseRepository(session_factory)


@pytest.fixture
def tracker(category_repo, expense_repo) -> ExpenseTracker:
    tracker = ExpenseTracker(category_repo, expense_repo)
    tracker.refresh()
    return tracker


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def category_factory(category_repo):
    """Factory for creating persisted categories.

    Returns:
        Callable: Function that creates and persists Category instances
    """

    def _create_category(name: str = "Food", description: str = "Meals") -> Category:
        category = Category(name=name, description=description)
        category_repo.create(category)
        return category

    return _create_category


@pytest.fixture
def expense_factory(expense_repo, category_factory):
    """Factory for creating persisted expenses.

    A category is created on demand when ``category_id`` is not given.
    """

    def _create_expense(
        amount: int = 500,
        description: str = "Lunch",
        payment_method: PaymentMethod = PaymentMethod.CASH,
        category_id: int | None = None,
        expense_date: datetime | None = None,
    ) -> Expense:
        if category_id is None:
            category_id = category_factory().id
        expense = Expense(
            category_id=category_id,
            payment_method=payment_method,
            amount=amount,
            description=description,
            expense_date=expense_date or datetime(2024, 3, 15, 12, 30),
        )
        expense_repo.create(expense)
        return expense

    return _create_expense
