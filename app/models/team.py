"""Team model, the tenancy boundary that owns books."""

from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from app.models.base import Base, TimestampMixin, SoftDeleteMixin

if TYPE_CHECKING:
    from app.models.team_membership import TeamMembership
    from app.models.book import Book


class Team(Base, TimestampMixin, SoftDeleteMixin):
    """
    Multi-tenant isolation boundary.

    A team is a group of users who share one or more books. Users access
    team data only through memberships with a role (Admin, Collaborator,
    Viewer); there are no grants on individual books or accounts.

    Soft-deleting a team hides every book under it without touching the
    books or the memberships. Restoring brings back exactly the prior roles.
    """

    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relationships
    memberships: Mapped[list["TeamMembership"]] = relationship(
        "TeamMembership",
        back_populates="team",
    )
    books: Mapped[list["Book"]] = relationship(
        "Book",
        back_populates="team",
    )

    def __repr__(self) -> str:
        return f"<Team(id={self.id}, name='{self.name}', deleted={self.is_deleted})>"
