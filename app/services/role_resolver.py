"""Effective role of a user for any entity in a team's ownership tree."""

import logging

from sqlalchemy.orm import Session

from app.models.access import EntityRef
from app.models.role import TeamRole
from app.models.team import Team
from app.models.team_membership import TeamMembership
from app.models.user import User
from app.repositories.team_membership_repository import TeamMembershipRepository
from app.services.cascade_resolver import CascadeResolver
from app.services.entity_lookup import EntityLookup, parse_id

logger = logging.getLogger(__name__)


class RoleResolver:
    """
    Single source of truth for roles.

    A user's role for a team, book, account, category or transaction is
    their membership role in the governing team. If the chain to that team
    does not resolve (missing or soft-deleted), there is no role at all.

    Every read goes to storage; nothing is cached between calls.
    """

    def __init__(self, db: Session, lookup: EntityLookup | None = None):
        self.lookup = lookup or EntityLookup(db)
        self.cascade = CascadeResolver(db, self.lookup)
        self.membership_repo = TeamMembershipRepository(db)

    def role_of(self, ref: EntityRef, user_id, include_deleted: bool = False) -> TeamRole | None:
        """
        Get a user's effective role for an entity.

        Args:
            ref: Entity reference (team, book, account, category, transaction)
            user_id: User ID
            include_deleted: Resolve through a soft-deleted team/book (restore
                and permanent delete only)

        Returns:
            The membership role, or None when the user has no access
        """
        user_id = parse_id(user_id)
        if user_id is None:
            return None

        team = self.cascade.team_of(ref, include_deleted=include_deleted)
        if team is None:
            logger.debug("No governing team for %s", ref)
            return None

        membership = self.membership_repo.get_membership(user_id, team.id)
        return membership.role if membership else None

    def roster(self, team_id: int, lock: bool = False) -> dict[int, TeamRole]:
        """
        Current membership snapshot of a team as {user_id: role}.

        Ignores visibility: the snapshot is used to protect the admin/member
        invariants, which hold whether or not the team is soft-deleted.

        Args:
            team_id: Team ID
            lock: Lock the membership rows for the rest of the transaction
        """
        members = self.membership_repo.get_team_members(team_id, for_update=lock)
        return {m.user_id: m.role for m in members}

    def membership(self, team_id: int, user_id: int) -> TeamMembership | None:
        """Raw membership row, for services that update or delete it."""
        return self.membership_repo.get_membership(user_id, team_id)

    def teams_of(self, user_id) -> list[tuple[Team, TeamRole]]:
        """Visible teams a user belongs to, with the user's role, ordered by name."""
        user_id = parse_id(user_id)
        if user_id is None:
            return []
        roles = {m.team_id: m.role for m in self.membership_repo.get_user_memberships(user_id)}
        return [(team, roles[team.id]) for team in self.lookup.find_teams(list(roles))]

    def members_of(self, team_id: int) -> list[tuple[TeamMembership, User]]:
        """Memberships of a team joined with their users."""
        return self.membership_repo.get_team_members_with_users(team_id)
