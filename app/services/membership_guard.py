"""Structural invariants of team membership."""

from sqlalchemy.orm import Session

from app.models.access import AccessDecision, LAST_ADMIN, LAST_MEMBER
from app.models.role import TeamRole
from app.services.role_resolver import RoleResolver

MEMBER_NOT_FOUND = "member not found"


def check_removal(roster: dict[int, TeamRole], user_id: int) -> AccessDecision:
    """Decide whether user_id can leave a team whose memberships are roster."""
    if user_id not in roster:
        return AccessDecision.not_found(MEMBER_NOT_FOUND)
    if len(roster) <= 1:
        return AccessDecision.invariant_violation(LAST_MEMBER)
    if roster[user_id] == TeamRole.ADMIN and _admin_count(roster) <= 1:
        return AccessDecision.invariant_violation(LAST_ADMIN)
    return AccessDecision.grant()


def check_role_change(roster: dict[int, TeamRole], user_id: int, new_role: TeamRole) -> AccessDecision:
    """Decide whether user_id can take new_role in a team whose memberships are roster."""
    if user_id not in roster:
        return AccessDecision.not_found(MEMBER_NOT_FOUND)
    if roster[user_id] == TeamRole.ADMIN and new_role != TeamRole.ADMIN and _admin_count(roster) <= 1:
        return AccessDecision.invariant_violation(LAST_ADMIN)
    return AccessDecision.grant()


def _admin_count(roster: dict[int, TeamRole]) -> int:
    return sum(1 for role in roster.values() if role == TeamRole.ADMIN)


class MembershipInvariantGuard:
    """
    Keeps every team at one admin or more and one member or more.

    The guard must be the last check before the membership write, inside the
    same transaction. Pass lock=True there so the snapshot rows stay locked
    until commit; two concurrent demotions of the last two admins then
    serialise and the second one sees a single admin.
    """

    def __init__(self, db: Session, roles: RoleResolver | None = None):
        self.roles = roles or RoleResolver(db)

    def can_remove_member(self, team_id: int, user_id: int, lock: bool = False) -> AccessDecision:
        return check_removal(self.roles.roster(team_id, lock=lock), user_id)

    def can_change_role(
        self, team_id: int, user_id: int, new_role: TeamRole, lock: bool = False
    ) -> AccessDecision:
        return check_role_change(self.roles.roster(team_id, lock=lock), user_id, new_role)
