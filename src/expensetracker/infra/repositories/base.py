"""Shared plumbing for the SQLModel repositories.

Each public repository call opens exactly one session from the injected
session factory, runs its statement(s) on that session's connection and
lets the factory commit or roll back. Nothing is cached between calls.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generic, Iterator, Mapping, Optional, TypeVar

from sqlalchemy import Table, delete, insert, select, update
from sqlalchemy.engine import CursorResult, RowMapping
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.sql.expression import Executable
from sqlmodel import Session, SQLModel

from ...errors import ConnectivityError, ConstraintViolationError, PersistenceError
from ...logging_config import get_logger
from ...models.common import is_persisted
from ..database import SessionFactory
from .columns import ColumnMap

RecordT = TypeVar("RecordT", bound=SQLModel)

# Returned by create() when the store accepted the row but reported no key.
NO_ID = -1


class SQLModelRepository(Generic[RecordT]):
    """Base class holding the CRUD round trips shared by every record type."""

    column_map: ColumnMap

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory
        self.logger = get_logger(type(self).__module__)

    @property
    def table(self) -> Table:
        return self.column_map.table()

    @property
    def table_name(self) -> str:
        return self.column_map.table_name

    def _to_params(self, record: RecordT, fields: tuple[tuple[str, str], ...]) -> dict[str, Any]:
        """Bind record fields to column names, in map order."""
        return {column: getattr(record, field) for field, column in fields}

    def _from_row(self, row: RowMapping) -> RecordT:
        """Build a record from a row keyed by column name."""
        values = {field: row[column] for field, column in self.column_map.select_fields}
        return self.column_map.model(**values)  # type: ignore[return-value]

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """Open one session and eagerly check out its connection."""
        with self.session_factory() as session:
            try:
                session.connection()
            except (OperationalError, InterfaceError) as exc:
                self.logger.error(
                    "Database unreachable",
                    extra={"table": self.table_name, "error": str(exc.orig or exc)},
                )
                raise ConnectivityError(f"Could not connect to the database: {exc.orig or exc}") from exc
            yield session

    def _execute(self, session: Session, statement: Executable) -> CursorResult:
        try:
            return session.connection().execute(statement)
        except IntegrityError as exc:
            self.logger.warning(
                "Write rejected by store constraint",
                extra={"table": self.table_name, "error": str(exc.orig)},
            )
            raise ConstraintViolationError(str(exc.orig), table=self.table_name) from exc

    def _insert(self, session: Session, record: RecordT) -> int:
        params = self._to_params(record, self.column_map.insert_fields)
        result = self._execute(session, insert(self.table).values(**params))
        if result.rowcount != 1:
            self.logger.warning(
                "Insert affected unexpected row count",
                extra={"table": self.table_name, "rowcount": result.rowcount},
            )
            raise PersistenceError(
                f"Error while inserting into {self.table_name}", table=self.table_name
            )
        primary_key = result.inserted_primary_key
        new_id: Optional[int] = primary_key[0] if primary_key else None
        if not is_persisted(new_id):
            self.logger.warning(
                "Insert succeeded but no id returned", extra={"table": self.table_name}
            )
            return NO_ID
        return int(new_id)  # type: ignore[arg-type]

    def _update(self, session: Session, record: RecordT) -> int:
        params = self._to_params(record, self.column_map.update_fields)
        statement = (
            update(self.table)
            .where(self.table.c[self.column_map.id_column] == record.id)  # type: ignore[attr-defined]
            .values(**params)
        )
        return self._execute(session, statement).rowcount

    def _delete(self, session: Session, record_id: int) -> int:
        statement = delete(self.table).where(self.table.c[self.column_map.id_column] == record_id)
        return self._execute(session, statement).rowcount

    def create(self, record: RecordT) -> int:
        """Insert ``record`` and return the store-assigned id.

        The id is also written back onto ``record``. Returns ``NO_ID`` when
        the store accepted the row without reporting a key.

        Raises:
            PersistenceError: the insert did not affect exactly one row.
        """
        with self._session() as session:
            new_id = self._insert(session, record)
        if new_id != NO_ID:
            record.id = new_id  # type: ignore[attr-defined]
            self.logger.info("Record created", extra={"table": self.table_name, "record_id": new_id})
        return new_id

    def update(self, record: RecordT) -> bool:
        """Rewrite the mutable columns of ``record``; True iff a row was affected."""
        record_id = record.id  # type: ignore[attr-defined]
        if not is_persisted(record_id):
            self.logger.warning(
                "Update skipped for unpersisted record", extra={"table": self.table_name}
            )
            return False
        with self._session() as session:
            rowcount = self._update(session, record)
        return self._report("updated", record_id, rowcount)

    def delete(self, record: RecordT) -> bool:
        """Delete ``record`` by id; True iff a row was removed."""
        record_id = record.id  # type: ignore[attr-defined]
        if not is_persisted(record_id):
            self.logger.warning(
                "Delete skipped for unpersisted record", extra={"table": self.table_name}
            )
            return False
        with self._session() as session:
            rowcount = self._delete(session, record_id)
        return self._report("deleted", record_id, rowcount)

    def list_all(self) -> list[RecordT]:
        """Return every row mapped into records, in store order."""
        columns = [self.table.c[column] for _, column in self.column_map.select_fields]
        with self._session() as session:
            rows = self._execute(session, select(*columns)).mappings().all()
            return [self._from_row(row) for row in rows]

    def _report(self, verb: str, record_id: int, rowcount: int) -> bool:
        extra: Mapping[str, Any] = {
            "table": self.table_name,
            "record_id": record_id,
            "rowcount": rowcount,
        }
        if rowcount > 0:
            self.logger.info(f"Record {verb}", extra=extra)
            return True
        self.logger.warning(f"No record {verb}", extra=extra)
        return False
