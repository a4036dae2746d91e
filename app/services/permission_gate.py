"""Read/write/admin decisions for any entity governed by a team."""

import logging

from sqlalchemy.orm import Session

from app.models.access import (
    AccessDecision,
    EntityRef,
    INSUFFICIENT_PRIVILEGE,
    WRITE_ACCESS_REQUIRED,
)
from app.models.role import TeamRole
from app.services.role_resolver import RoleResolver

logger = logging.getLogger(__name__)


class PermissionGate:
    """
    The three permission checks every route goes through.

    Role tiers:
    - READ: admin, collaborator, viewer
    - WRITE: admin, collaborator
    - ADMIN: admin

    Each check returns an AccessDecision and never raises for a refusal:
    - no role at all           -> ACCESS_DENIED     "access denied"
    - viewer asking to write   -> INSUFFICIENT_ROLE "write access required"
    - non-admin asking to admin -> INSUFFICIENT_ROLE "insufficient privilege"
    """

    def __init__(self, db: Session, roles: RoleResolver | None = None):
        self.roles = roles or RoleResolver(db)

    def can_read(self, ref: EntityRef, user_id) -> AccessDecision:
        role = self.roles.role_of(ref, user_id)
        if role is None:
            return self._deny(ref, user_id, AccessDecision.access_denied())
        return AccessDecision.grant()

    def can_write(self, ref: EntityRef, user_id) -> AccessDecision:
        role = self.roles.role_of(ref, user_id)
        if role is None:
            return self._deny(ref, user_id, AccessDecision.access_denied())
        if not role.satisfies(TeamRole.COLLABORATOR):
            return self._deny(ref, user_id, AccessDecision.insufficient_role(WRITE_ACCESS_REQUIRED))
        return AccessDecision.grant()

    def can_admin(self, ref: EntityRef, user_id, include_deleted: bool = False) -> AccessDecision:
        """
        Check admin rights on an entity.

        include_deleted is for restore and permanent delete, where the entity
        itself is expected to be in the recycle bin.
        """
        role = self.roles.role_of(ref, user_id, include_deleted=include_deleted)
        if role is None:
            return self._deny(ref, user_id, AccessDecision.access_denied())
        if role != TeamRole.ADMIN:
            return self._deny(ref, user_id, AccessDecision.insufficient_role(INSUFFICIENT_PRIVILEGE))
        return AccessDecision.grant()

    @staticmethod
    def _deny(ref: EntityRef, user_id, decision: AccessDecision) -> AccessDecision:
        logger.debug("Denied user %s on %s: %s", user_id, ref, decision.reason)
        return decision
