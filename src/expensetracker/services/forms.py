"""Form validation helpers for category and expense input.

The repositories store whatever they are given; these forms are where the
field rules live, before a record is built.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Optional

from ..errors import ValidationError
from ..models.category import Category
from ..models.expense import Expense, PaymentMethod

FILL_ALL_FIELDS = "Please fill all the fields"
INVALID_AMOUNT = "Please enter a valid amount (numbers only)"
# Largest value the BIGINT amount column holds.
MAX_AMOUNT = 2**63 - 1


def _parse_whole_number(text: str) -> Optional[int]:
    """Parse an optionally signed run of ASCII digits, or return None."""

    digits = text[1:] if text[:1] in ("+", "-") else text
    if not (digits.isascii() and digits.isdigit()) or len(digits) > 19:
        return None
    return int(text)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, PaymentMethod):
        return value.name
    return str(value)


@dataclass(slots=True)
class _BaseForm:
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, str] = field(default_factory=dict, init=False)

    keys: ClassVar[tuple[str, ...]] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]):
        """Create a form populated from widget values."""

        form = cls()
        form.load(data)
        return form

    def load(self, data: Mapping[str, Any]) -> None:
        """Bind incoming mapping data to the form state."""

        self.raw_data = {key: _as_text(data.get(key)).strip() for key in self.keys}

    def require_valid(self) -> None:
        """Validate and raise ValidationError if anything is wrong."""

        if not self.validate():
            raise ValidationError(self.errors)

    def validate(self) -> bool:  # pragma: no cover - overridden
        raise NotImplementedError

    def _add_error(self, field_name: str, message: str) -> None:
        """Accumulate validation errors for a specific field."""

        self.errors.setdefault(field_name, []).append(message)


@dataclass(slots=True)
class CategoryForm(_BaseForm):
    """Represents category input prior to validation."""

    name: str = ""
    description: str = ""

    keys: ClassVar[tuple[str, ...]] = ("name", "description")

    def validate(self) -> bool:
        self.errors.clear()
        self.name = self.raw_data.get("name", "")
        self.description = self.raw_data.get("description", "")

        if not self.name:
            self._add_error("name", FILL_ALL_FIELDS)
        elif len(self.name) > 100:
            self._add_error("name", "Name must be 100 characters or fewer.")

        if not self.description:
            self._add_error("description", FILL_ALL_FIELDS)
        elif len(self.description) > 255:
            self._add_error("description", "Description must be 255 characters or fewer.")

        return not self.errors

    def to_record(self, existing: Optional[Category] = None) -> Category:
        """Return ``existing`` updated in place, or a new unsaved Category."""

        self.require_valid()
        if existing is None:
            return Category(name=self.name, description=self.description)
        existing.name = self.name
        existing.description = self.description
        return existing


@dataclass(slots=True)
class ExpenseForm(_BaseForm):
    """Represents expense input prior to validation."""

    amount: Optional[int] = None
    description: str = ""
    category_id: Optional[int] = None
    payment_method: Optional[PaymentMethod] = None
    expense_date: Optional[datetime] = None

    keys: ClassVar[tuple[str, ...]] = (
        "amount",
        "description",
        "category_id",
        "payment_method",
        "expense_date",
    )

    def validate(self) -> bool:
        self.errors.clear()

        amount_raw = self.raw_data.get("amount", "")
        self.description = self.raw_data.get("description", "")
        if not amount_raw or not self.description:
            if not amount_raw:
                self._add_error("amount", FILL_ALL_FIELDS)
            if not self.description:
                self._add_error("description", FILL_ALL_FIELDS)
        elif len(self.description) > 255:
            self._add_error("description", "Description must be 255 characters or fewer.")

        self.category_id = None
        category_raw = self.raw_data.get("category_id", "")
        try:
            parsed_category = int(category_raw)
        except ValueError:
            parsed_category = 0
        if parsed_category <= 0:
            self._add_error("category_id", "Please select a category")
        else:
            self.category_id = parsed_category

        self.payment_method = None
        method_raw = self.raw_data.get("payment_method", "")
        try:
            self.payment_method = PaymentMethod[method_raw]
        except KeyError:
            self._add_error("payment_method", "Please select a payment method")

        self.amount = None
        if amount_raw:
            parsed_amount = _parse_whole_number(amount_raw)
            if parsed_amount is None or parsed_amount > MAX_AMOUNT:
                self._add_error("amount", INVALID_AMOUNT)
            elif parsed_amount <= 0:
                self._add_error("amount", "Amount must be greater than 0")
            else:
                self.amount = parsed_amount

        self.expense_date = None
        date_raw = self.raw_data.get("expense_date", "")
        if date_raw:
            try:
                if len(date_raw) == 10:
                    self.expense_date = datetime.strptime(date_raw, "%Y-%m-%d")
                else:
                    self.expense_date = datetime.fromisoformat(date_raw)
            except ValueError:
                self._add_error("expense_date", "Enter a valid date (YYYY-MM-DD).")

        return not self.errors

    def to_record(self, existing: Optional[Expense] = None) -> Expense:
        """Return ``existing`` updated in place, or a new unsaved Expense.

        ``created_at`` of an existing expense is left alone.
        """

        self.require_valid()
        expense_date = self.expense_date or datetime.now()
        if existing is None:
            return Expense(
                category_id=self.category_id,
                payment_method=self.payment_method,
                amount=self.amount,
                description=self.description,
                expense_date=expense_date,
            )
        existing.category_id = self.category_id
        existing.payment_method = self.payment_method
        existing.amount = self.amount
        existing.description = self.description
        existing.expense_date = self.expense_date or existing.expense_date
        return existing
