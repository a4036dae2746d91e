"""Team role enum for role-based access control."""

from enum import Enum as PyEnum


class TeamRole(str, PyEnum):
    """
    Team membership roles with hierarchical permissions.

    Role Hierarchy (highest to lowest):
    1. ADMIN - Manage team members, delete/restore team and books, write and read
    2. COLLABORATOR - Create/edit/delete accounts, categories and transactions
    3. VIEWER - Read-only access to every book of the team

    A member's role in the team is their role for every book, account,
    category and transaction the team owns.
    """

    ADMIN = "admin"
    COLLABORATOR = "collaborator"
    VIEWER = "viewer"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]

    def satisfies(self, required: "TeamRole") -> bool:
        """Check if this role meets or exceeds the required role."""
        return self.rank >= required.rank


_ROLE_RANK = {
    TeamRole.ADMIN: 3,
    TeamRole.COLLABORATOR: 2,
    TeamRole.VIEWER: 1,
}
