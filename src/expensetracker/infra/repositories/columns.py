"""Field-to-column tables for each record type.

Every statement the repositories issue is built from these maps, in the
order given here. ``verify_column_maps`` checks them against the table
metadata once, when the database is initialised, so a renamed column fails
at startup instead of on the first read.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from sqlalchemy import MetaData, Table
from sqlmodel import SQLModel

from ...errors import SchemaMismatchError
from ...models.category import Category
from ...models.expense import Expense

FieldColumn = tuple[str, str]


@dataclass(frozen=True)
class ColumnMap:
    """Static mapping between a record's fields and its table's columns."""

    model: type[SQLModel]
    table_name: str
    id_field: FieldColumn
    insert_fields: tuple[FieldColumn, ...]
    update_fields: tuple[FieldColumn, ...]

    @property
    def select_fields(self) -> tuple[FieldColumn, ...]:
        return (self.id_field, *self.insert_fields)

    @property
    def id_column(self) -> str:
        return self.id_field[1]

    def table(self, metadata: MetaData | None = None) -> Table:
        source = metadata if metadata is not None else SQLModel.metadata
        return source.tables[self.table_name]


CATEGORY_COLUMNS = ColumnMap(
    model=Category,
    table_name="categories",
    id_field=("id", "id"),
    insert_fields=(
        ("name", "name"),
        ("description", "description"),
    ),
    update_fields=(
        ("name", "name"),
        ("description", "description"),
    ),
)

EXPENSE_COLUMNS = ColumnMap(
    model=Expense,
    table_name="expenses",
    id_field=("id", "id"),
    insert_fields=(
        ("category_id", "category_id"),
        ("payment_method", "payment_method"),
        ("amount", "amount"),
        ("description", "description"),
        ("expense_date", "expense_date"),
        ("created_at", "created_at"),
    ),
    # created_at is written once, on insert
    update_fields=(
        ("category_id", "category_id"),
        ("payment_method", "payment_method"),
        ("amount", "amount"),
        ("description", "description"),
        ("expense_date", "expense_date"),
    ),
)

ALL_COLUMN_MAPS = (CATEGORY_COLUMNS, EXPENSE_COLUMNS)


def verify_column_maps(
    metadata: MetaData | None = None, maps: Iterable[ColumnMap] = ALL_COLUMN_MAPS
) -> None:
    """Raise SchemaMismatchError if any map disagrees with the metadata."""

    source = metadata if metadata is not None else SQLModel.metadata
    problems: list[str] = []
    for column_map in maps:
        table = source.tables.get(column_map.table_name)
        if table is None:
            problems.append(f"table {column_map.table_name!r} is not declared")
            continue

        declared = {field for field, _ in column_map.select_fields}
        model_fields = set(column_map.model.model_fields)
        for field in sorted(model_fields - declared):
            problems.append(f"{column_map.table_name}: field {field!r} has no column")

        for field, column in column_map.select_fields:
            if field not in model_fields:
                problems.append(f"{column_map.table_name}: unknown field {field!r}")
            if column not in table.c:
                problems.append(f"{column_map.table_name}: missing column {column!r}")

        for pair in column_map.update_fields:
            if pair not in column_map.insert_fields:
                problems.append(f"{column_map.table_name}: update-only field {pair[0]!r}")

    if problems:
        raise SchemaMismatchError("; ".join(problems))
