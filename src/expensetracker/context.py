"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, create_db_engine, create_session_factory, init_database
from .infra.repositories import SQLModelCategoryRepository, SQLModelExpenseRepository
from .services.tracker import ExpenseTracker


@dataclass
class AppContext:
    """Centralized application context with repositories and the tracker."""

    config: BaseConfig
    engine: Engine
    session_factory: SessionFactory
    category_repo: SQLModelCategoryRepository
    expense_repo: SQLModelExpenseRepository
    tracker: ExpenseTracker

    def dispose(self) -> None:
        self.engine.dispose()


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()

    engine = create_db_engine(config)
    try:
        init_database(engine)
    except Exception:
        engine.dispose()
        raise
    session_factory = create_session_factory(engine)

    category_repo = SQLModelCategoryRepository(session_factory)
    expense_repo = SQLModelExpenseRepository(session_factory)

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        category_repo=category_repo,
        expense_repo=expense_repo,
        tracker=ExpenseTracker(category_repo, expense_repo),
    )
