"""Repository for TeamMembership model operations."""

from sqlalchemy.orm import Session

from app.database import storage_call
from app.models.team_membership import TeamMembership
from app.models.user import User


class TeamMembershipRepository:
    """
    Repository for TeamMembership model operations.

    The only code allowed to read roles from here is RoleResolver and
    MembershipInvariantGuard.
    """

    def __init__(self, db: Session):
        self.db = db

    @storage_call
    def get_membership(self, user_id: int, team_id: int) -> TeamMembership | None:
        """
        Get membership for a specific user in a specific team.

        Args:
            user_id: User ID
            team_id: Team ID

        Returns:
            TeamMembership object or None if not found
        """
        return (
            self.db.query(TeamMembership)
            .filter(
                TeamMembership.user_id == user_id,
                TeamMembership.team_id == team_id,
            )
            .first()
        )

    @storage_call
    def get_team_members(self, team_id: int, for_update: bool = False) -> list[TeamMembership]:
        """
        Get all memberships for a team.

        Args:
            team_id: Team ID
            for_update: Lock the rows until the current transaction ends
                (SELECT ... FOR UPDATE; ignored by SQLite)

        Returns:
            List of TeamMembership objects for the team
        """
        query = (
            self.db.query(TeamMembership)
            .filter(TeamMembership.team_id == team_id)
            .order_by(TeamMembership.id)
        )
        if for_update:
            query = query.with_for_update()
        return query.all()

    @storage_call
    def get_team_members_with_users(self, team_id: int) -> list[tuple[TeamMembership, User]]:
        """Get memberships of a team joined with their users, ordered by username."""
        return (
            self.db.query(TeamMembership, User)
            .join(User, User.id == TeamMembership.user_id)
            .filter(TeamMembership.team_id == team_id)
            .order_by(User.username, User.id)
            .all()
        )

    @storage_call
    def get_user_memberships(self, user_id: int) -> list[TeamMembership]:
        """
        Get all memberships for a user (all teams they belong to).

        Args:
            user_id: User ID

        Returns:
            List of TeamMembership objects for the user
        """
        return (
            self.db.query(TeamMembership)
            .filter(TeamMembership.user_id == user_id)
            .all()
        )

    @storage_call
    def add(self, membership: TeamMembership) -> TeamMembership:
        """
        Stage a new team membership.

        Raises:
            StorageError: If (team_id, user_id) already exists
        """
        self.db.add(membership)
        self.db.flush()
        return membership

    @storage_call
    def delete(self, membership: TeamMembership) -> None:
        """Remove a user from a team."""
        self.db.delete(membership)
        self.db.flush()

    @storage_call
    def delete_for_team(self, team_id: int) -> int:
        """Delete every membership of a team. Returns the number of rows removed."""
        return (
            self.db.query(TeamMembership)
            .filter(TeamMembership.team_id == team_id)
            .delete()
        )
