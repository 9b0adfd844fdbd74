"""SQLModel definitions for expenses and payment methods."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Optional

from sqlalchemy import BigInteger, Column, DateTime, String
from sqlmodel import Field, SQLModel

from ..errors import PaymentMethodDecodeError


class PaymentMethod(str, Enum):
    """How an expense was paid. Stored as the member name."""

    CASH = "CASH"
    BANK_ACCOUNT = "BANK_ACCOUNT"

    @classmethod
    def from_db(cls, raw: Any, *, record_id: Optional[int] = None) -> "PaymentMethod":
        """Turn stored text back into a member.

        Raises:
            PaymentMethodDecodeError: ``raw`` is null or not a member name.
        """

        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            raise PaymentMethodDecodeError(raw, record_id=record_id)
        try:
            return cls[raw]
        except KeyError as exc:
            raise PaymentMethodDecodeError(raw, record_id=record_id) from exc

    def to_db(self) -> str:
        return self.name


class Expense(SQLModel, table=True):
    """A single spending entry."""

    __tablename__: ClassVar[str] = "expenses"

    id: Optional[int] = Field(default=None, primary_key=True)
    category_id: Optional[int] = Field(default=None, foreign_key="categories.id", index=True)
    # Plain text column; decoding goes through PaymentMethod.from_db so unknown
    # values surface as a typed error.
    payment_method: Optional[PaymentMethod] = Field(
        default=None, sa_column=Column("payment_method", String(32), nullable=True)
    )
    amount: int = Field(default=0, sa_column=Column("amount", BigInteger, nullable=False))
    description: Optional[str] = Field(default="", nullable=True, max_length=255)
    # Naive local timestamps, as entered.
    expense_date: datetime = Field(
        default_factory=datetime.now,
        sa_column=Column("expense_date", DateTime(timezone=False), nullable=False, index=True),
    )
    created_at: datetime = Field(
        default_factory=datetime.now,
        sa_column=Column("created_at", DateTime(timezone=False), nullable=False),
    )
