"""SQLModel table exports."""

from .category import Category
from .common import UNASSIGNED_ID, is_persisted
from .expense import Expense, PaymentMethod

__all__ = [
    "Category",
    "Expense",
    "PaymentMethod",
    "UNASSIGNED_ID",
    "is_persisted",
]
