"""Team membership model linking users to teams with roles."""

from sqlalchemy import Integer, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from app.models.base import Base, TimestampMixin
from app.models.role import TeamRole

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.team import Team


class TeamMembership(Base, TimestampMixin):
    """
    Join table linking users to teams with roles.

    Constraints:
    - Unique(team_id, user_id) - one membership per user per team
    - Each team keeps at least one ADMIN and at least one member
      (enforced by MembershipInvariantGuard inside the write transaction)
    """

    __tablename__ = "team_memberships"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    team_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("teams.id"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[TeamRole] = mapped_column(
        Enum(TeamRole, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=TeamRole.VIEWER,
    )

    # Relationships
    team: Mapped["Team"] = relationship("Team", back_populates="memberships")
    user: Mapped["User"] = relationship("User", back_populates="memberships")

    # Constraints
    __table_args__ = (
        UniqueConstraint("team_id", "user_id", name="uq_team_user"),
    )

    def __repr__(self) -> str:
        return f"<TeamMembership(team_id={self.team_id}, user_id={self.user_id}, role={self.role.value})>"
