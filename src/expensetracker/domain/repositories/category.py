"""Category repository protocol."""

from __future__ import annotations

from typing import Protocol

from ...models.category import Category


class CategoryRepository(Protocol):
    """Repository for managing category records."""

    def create(self, category: Category) -> int:
        """Insert a category and return its generated id."""
        ...

    def update(self, category: Category) -> bool:
        """Rewrite name and description of an existing category."""
        ...

    def delete(self, category: Category) -> bool:
        """Delete a category by its id."""
        ...

    def list_all(self) -> list[Category]:
        """List every stored category."""
        ...
