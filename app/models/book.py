"""Book model, a ledger of accounts, categories and transactions."""

from sqlalchemy import String, Integer, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from app.models.base import Base, TimestampMixin, SoftDeleteMixin

if TYPE_CHECKING:
    from app.models.team import Team
    from app.models.account import Account
    from app.models.category import Category


class Book(Base, TimestampMixin, SoftDeleteMixin):
    """
    A named ledger owned by exactly one team.

    team_id is fixed at creation. A book is visible only while both the
    book and its team are not soft-deleted.
    """

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    team_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("teams.id"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    currency_symbol: Mapped[str] = mapped_column(String(8), nullable=False, default="$")
    week_start: Mapped[str] = mapped_column(String(16), nullable=False, default="monday")

    # Relationships
    team: Mapped["Team"] = relationship("Team", back_populates="books")
    accounts: Mapped[list["Account"]] = relationship("Account", back_populates="book")
    categories: Mapped[list["Category"]] = relationship("Category", back_populates="book")

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, team_id={self.team_id}, deleted={self.is_deleted})>"
