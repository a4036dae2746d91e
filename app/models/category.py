from enum import Enum as PyEnum
from sqlalchemy import String, Integer, ForeignKey, Enum, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from app.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.book import Book


class CategoryType(str, PyEnum):
    """Category type enumeration"""

    EXPENSE = "expense"
    INCOME = "income"


class Category(Base, TimestampMixin):
    """
    Transaction category, optionally nested under a parent category.

    Parent and child always belong to the same book and the parent chain
    never loops; both rules are checked by CategoryTree before writes.
    """

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    book_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("books.id"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    category_type: Mapped[CategoryType] = mapped_column(
        Enum(CategoryType, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=CategoryType.EXPENSE,
    )
    parent_category_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("categories.id"),
        nullable=True,
        index=True,
    )

    # Relationships
    book: Mapped["Book"] = relationship("Book", back_populates="categories")
