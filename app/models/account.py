from decimal import Decimal
from enum import Enum as PyEnum
from sqlalchemy import String, Integer, Numeric, ForeignKey, Enum, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from app.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.book import Book
    from app.models.transaction import Transaction


class AccountType(str, PyEnum):
    """Account type enumeration"""

    DEBIT = "debit"
    CREDIT = "credit"


class Account(Base, TimestampMixin):
    """
    Financial account inside a book.

    Accounts have no soft-delete of their own; they are visible exactly
    when their book (and the book's team) is visible.
    """

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    book_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("books.id"),
        nullable=False,
        index=True,  # Critical for access-chain lookups
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    account_type: Mapped[AccountType] = mapped_column(
        Enum(AccountType, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=AccountType.DEBIT,
    )
    starting_amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=15, scale=2), nullable=False, default=Decimal("0.00")
    )

    # Relationships
    book: Mapped["Book"] = relationship("Book", back_populates="accounts")
    transactions: Mapped[list["Transaction"]] = relationship(
        "Transaction",
        back_populates="account",
        cascade="all, delete-orphan",  # Delete transactions if account deleted
    )
