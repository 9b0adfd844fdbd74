"""Mutate-then-reload synchronisation for caller-visible record lists."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from ..logging_config import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


def mutation_succeeded(outcome: Any) -> bool:
    """Interpret a repository result: a positive id or ``True`` is success."""

    if isinstance(outcome, bool):
        return outcome
    if isinstance(outcome, int):
        return outcome > 0
    return False


@dataclass
class MutationOutcome:
    """Result of one ``apply_mutation`` call."""

    succeeded: bool
    value: Any = None


class ListSynchronizer(Generic[T]):
    """Keep a displayed list equal to what the store returns.

    ``items`` is only ever replaced wholesale by ``reload``. A failed or
    raising mutation leaves it exactly as it was.
    """

    def __init__(self, loader: Callable[[], list[T]], *, name: str = "records"):
        self._loader = loader
        self._items: list[T] = []
        self._lock = threading.Lock()
        self.name = name

    @property
    def items(self) -> list[T]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def reload(self) -> list[T]:
        """Replace the displayed list with a fresh ``loader()`` result."""
        with self._lock:
            return self._reload_locked()

    def _reload_locked(self) -> list[T]:
        fresh = list(self._loader())
        self._items = fresh
        logger.debug("List reloaded", extra={"list": self.name, "count": len(fresh)})
        return self.items

    def apply_mutation(
        self,
        op: Callable[[], Any],
        on_success: Optional[Callable[[Any], None]] = None,
    ) -> MutationOutcome:
        """Run ``op`` and reload the list only if it succeeded.

        Exceptions from ``op`` or from the reload propagate unchanged; in
        both cases the previous list is still displayed.
        """
        with self._lock:
            value = op()
            if not mutation_succeeded(value):
                logger.info("Mutation reported failure", extra={"list": self.name, "value": value})
                return MutationOutcome(succeeded=False, value=value)
            self._reload_locked()
        if on_success is not None:
            on_success(value)
        return MutationOutcome(succeeded=True, value=value)
