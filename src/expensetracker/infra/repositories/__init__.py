"""Concrete repository implementations using SQLModel."""

from .base import NO_ID
from .category import SQLModelCategoryRepository
from .expense import SQLModelExpenseRepository

__all__ = [
    "NO_ID",
    "SQLModelCategoryRepository",
    "SQLModelExpenseRepository",
]
