from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundException, raise_for_decision
from app.database import transaction
from app.models.access import EntityRef
from app.models.team import Team
from app.models.user import User
from app.repositories.team_repository import TeamRepository
from app.schemas.team_schemas import TeamUpdate
from app.services.entity_lookup import EntityLookup
from app.services.permission_gate import PermissionGate
from app.services.role_resolver import RoleResolver


class TeamService:
    """Service layer for team reads and settings"""

    def __init__(self, db: Session):
        self.db = db
        self.lookup = EntityLookup(db)
        self.roles = RoleResolver(db, self.lookup)
        self.gate = PermissionGate(db, self.roles)
        self.team_repo = TeamRepository(db)

    def list_user_teams(self, user: User) -> list[dict]:
        """
        List all active teams that a user belongs to.

        Args:
            user: Authenticated user

        Returns:
            List of teams with user's role in each team
        """
        return [
            {
                "id": team.id,
                "name": team.name,
                "role": role,
                "created_at": team.created_at,
                "updated_at": team.updated_at,
            }
            for team, role in self.roles.teams_of(user.id)
        ]

    def get_team(self, team_id: int, user: User) -> dict:
        """
        Get team details with book counts (any member).

        Raises:
            NotFoundException: If team doesn't exist or is deleted
            ForbiddenException: If user is not a member
        """
        team = self._get_visible_team(team_id)
        raise_for_decision(self.gate.can_read(EntityRef.team(team.id), user.id))
        return self._team_detail(team)

    def update_team(self, team_id: int, team_update: TeamUpdate, user: User) -> dict:
        """
        Rename a team (ADMIN only).

        Raises:
            NotFoundException: If team doesn't exist or is deleted
            ForbiddenException: If user is not ADMIN
        """
        team = self._get_visible_team(team_id)
        raise_for_decision(self.gate.can_admin(EntityRef.team(team.id), user.id))

        with transaction(self.db):
            team.name = team_update.name.strip()
        return self._team_detail(team)

    def _get_visible_team(self, team_id: int) -> Team:
        team = self.lookup.find_team(team_id)
        if team is None:
            raise NotFoundException("Team not found")
        return team

    def _team_detail(self, team: Team) -> dict:
        return {
            "id": team.id,
            "name": team.name,
            "created_at": team.created_at,
            "updated_at": team.updated_at,
            "deleted_at": team.deleted_at,
            "book_count": self.team_repo.count_books(team.id),
            "deleted_book_count": self.team_repo.count_books(team.id, deleted=True),
        }
