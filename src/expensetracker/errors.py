"""Exception hierarchy shared by repositories, services and the CLI."""

from __future__ import annotations

from typing import Any, Mapping


class ExpenseTrackerError(Exception):
    """Base class for all application errors."""


class ConnectivityError(ExpenseTrackerError):
    """The store could not be reached or refused the connection."""


class PersistenceError(ExpenseTrackerError):
    """A write did not have the expected effect on the store."""

    def __init__(self, message: str, *, table: str | None = None, record_id: int | None = None):
        super().__init__(message)
        self.table = table
        self.record_id = record_id


class ConstraintViolationError(PersistenceError):
    """The store rejected a write because of one of its own constraints."""


class CategoryInUseError(PersistenceError):
    """A category still referenced by expenses cannot be deleted."""

    def __init__(self, category_id: int, expense_count: int):
        super().__init__(
            f"Category {category_id} is used by {expense_count} expense(s)",
            table="categories",
            record_id=category_id,
        )
        self.expense_count = expense_count


class RecordMappingError(ExpenseTrackerError):
    """A stored row could not be turned into a record."""

    def __init__(self, message: str, *, table: str, column: str, raw_value: Any = None):
        super().__init__(message)
        self.table = table
        self.column = column
        self.raw_value = raw_value


class PaymentMethodDecodeError(RecordMappingError):
    """Stored payment method text is not a known PaymentMethod name."""

    def __init__(self, raw_value: Any, *, record_id: int | None = None):
        super().__init__(
            f"Unknown payment method {raw_value!r} for expense {record_id}",
            table="expenses",
            column="payment_method",
            raw_value=raw_value,
        )
        self.record_id = record_id


class ValidationError(ExpenseTrackerError):
    """Caller-supplied form values violate a field rule."""

    def __init__(self, errors: Mapping[str, list[str]]):
        self.errors = {field: list(messages) for field, messages in errors.items()}
        first = next(iter(self.errors.values()), ["Invalid input"])
        super().__init__(first[0] if first else "Invalid input")


class SchemaMismatchError(ExpenseTrackerError):
    """Declared column maps disagree with the table metadata."""
