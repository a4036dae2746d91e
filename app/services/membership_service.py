"""Team membership management guarded by the admin/member invariants."""

import logging

from sqlalchemy.orm import Session

from app.core.exceptions import IntegrityViolation
from app.database import transaction
from app.models.access import AccessDecision, EntityRef, OperationResult
from app.models.role import TeamRole
from app.models.team_membership import TeamMembership
from app.repositories.team_membership_repository import TeamMembershipRepository
from app.repositories.user_repository import UserRepository
from app.services.entity_lookup import EntityLookup, parse_id
from app.services.membership_guard import MembershipInvariantGuard
from app.services.permission_gate import PermissionGate
from app.services.role_resolver import RoleResolver

logger = logging.getLogger(__name__)

TEAM_NOT_FOUND = "team not found"
TEAM_DELETED = "team is deleted, restore it first"
USER_NOT_FOUND = "user not found"
ALREADY_A_MEMBER = "already a member"


class MembershipService:
    """
    Add, re-role and remove team members.

    Flow for every mutation:
    1. The team must exist and be active (members of a deleted team are frozen)
    2. The acting user must be ADMIN of the team
    3. Inside the write transaction, MembershipInvariantGuard re-reads the
       locked membership snapshot immediately before the write
    """

    def __init__(self, db: Session):
        self.db = db
        self.lookup = EntityLookup(db)
        self.roles = RoleResolver(db, self.lookup)
        self.gate = PermissionGate(db, self.roles)
        self.guard = MembershipInvariantGuard(db, self.roles)
        self.membership_repo = TeamMembershipRepository(db)
        self.user_repo = UserRepository(db)

    def list_members(self, team_id, user_id) -> OperationResult:
        """List members of a team with their users; any member may read."""
        decision = self._check_team(team_id)
        if decision is None:
            decision = self.gate.can_read(EntityRef.team(team_id), user_id)
        if not decision.allowed:
            return OperationResult.refused(decision)
        return OperationResult.ok(self.roles.members_of(parse_id(team_id)))

    def add_member(self, team_id, actor_id, new_user_id, role: TeamRole) -> OperationResult:
        refusal = self._check_admin(team_id, actor_id)
        if refusal:
            return refusal

        team_pk = parse_id(team_id)
        user_pk = parse_id(new_user_id)
        user = self.user_repo.get_by_id(user_pk) if user_pk else None
        if user is None:
            return OperationResult.refused(AccessDecision.not_found(USER_NOT_FOUND))

        already_member = OperationResult.refused(
            AccessDecision.invariant_violation(ALREADY_A_MEMBER)
        )
        try:
            with transaction(self.db):
                if self.membership_repo.get_membership(user.id, team_pk) is not None:
                    return already_member
                membership = self.membership_repo.add(
                    TeamMembership(team_id=team_pk, user_id=user.id, role=role)
                )
        except IntegrityViolation:
            # A concurrent add won the unique (team, user) key
            return already_member
        logger.info("User %s added to team %s as %s by %s", user.id, team_pk, role.value, actor_id)
        return OperationResult.ok(membership)

    def change_role(self, team_id, actor_id, target_user_id, new_role: TeamRole) -> OperationResult:
        refusal = self._check_admin(team_id, actor_id)
        if refusal:
            return refusal

        team_pk = parse_id(team_id)
        target_pk = parse_id(target_user_id)
        with transaction(self.db):
            decision = self.guard.can_change_role(team_pk, target_pk, new_role, lock=True)
            if not decision.allowed:
                return OperationResult.refused(decision)
            membership = self.roles.membership(team_pk, target_pk)
            membership.role = new_role
            self.db.flush()
        logger.info(
            "User %s in team %s changed to %s by %s", target_pk, team_pk, new_role.value, actor_id
        )
        return OperationResult.ok(membership)

    def remove_member(self, team_id, actor_id, target_user_id) -> OperationResult:
        refusal = self._check_admin(team_id, actor_id)
        if refusal:
            return refusal

        team_pk = parse_id(team_id)
        target_pk = parse_id(target_user_id)
        with transaction(self.db):
            decision = self.guard.can_remove_member(team_pk, target_pk, lock=True)
            if not decision.allowed:
                return OperationResult.refused(decision)
            self.membership_repo.delete(self.roles.membership(team_pk, target_pk))
        logger.info("User %s removed from team %s by %s", target_pk, team_pk, actor_id)
        return OperationResult.ok()

    def _check_team(self, team_id) -> AccessDecision | None:
        team = self.lookup.find_team(team_id, include_deleted=True)
        if team is None:
            return AccessDecision.not_found(TEAM_NOT_FOUND)
        if team.is_deleted:
            return AccessDecision.access_denied(TEAM_DELETED)
        return None

    def _check_admin(self, team_id, actor_id) -> OperationResult | None:
        decision = self._check_team(team_id)
        if decision is None:
            decision = self.gate.can_admin(EntityRef.team(team_id), actor_id)
        if not decision.allowed:
            return OperationResult.refused(decision)
        return None
