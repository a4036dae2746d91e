from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.core.exceptions import raise_for_decision
from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.services.entity_lifecycle import EntityLifecycle
from app.services.membership_service import MembershipService
from app.services.team_service import TeamService
from app.schemas.team_schemas import (
    TeamCreate,
    TeamUpdate,
    TeamResponse,
    TeamDetailResponse,
    UserTeamResponse,
    TeamMemberResponse,
    TeamMemberAdd,
    TeamRoleUpdate,
)

router = APIRouter()


def _members_payload(db: Session, team_id: int, user: User) -> list[dict]:
    result = MembershipService(db).list_members(team_id, user.id)
    raise_for_decision(result.decision)
    return [
        {
            "user_id": member.id,
            "username": member.display_name,
            "role": membership.role,
            "active": member.active,
            "created_at": membership.created_at,
        }
        for membership, member in result.entity
    ]


@router.get("", response_model=list[UserTeamResponse])
def list_user_teams(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    List all active teams the authenticated user belongs to.

    Returns the user's role in each team.
    """
    return TeamService(db).list_user_teams(user)


@router.post("", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
def create_team(
    data: TeamCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Create a new team.

    - Any authenticated user
    - The creator is enrolled as ADMIN in the same transaction
    """
    result = EntityLifecycle(db).create_team(data.name.strip(), user)
    return result.entity


@router.get("/{team_id}", response_model=TeamDetailResponse)
def get_team(team_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get team details with active and deleted book counts (any member)"""
    return TeamService(db).get_team(team_id, user)


@router.put("/{team_id}", response_model=TeamDetailResponse)
def update_team(
    team_id: int,
    data: TeamUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Rename a team.

    - **Requires ADMIN permissions**
    """
    return TeamService(db).update_team(team_id, data, user)


@router.delete("/{team_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_team(team_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Soft-delete a team.

    - **Requires ADMIN permissions**
    - Books, accounts and transactions become invisible but are kept
    """
    result = EntityLifecycle(db).soft_delete_team(team_id, user.id)
    raise_for_decision(result.decision)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{team_id}/restore", response_model=TeamResponse)
def restore_team(team_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Restore a soft-deleted team.

    - **Requires ADMIN permissions** in the deleted team
    - Members get back exactly the roles they had
    """
    result = EntityLifecycle(db).restore_team(team_id, user.id)
    raise_for_decision(result.decision)
    return result.entity


@router.delete("/{team_id}/permanent", status_code=status.HTTP_204_NO_CONTENT)
def permanently_delete_team(
    team_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """
    Permanently delete a soft-deleted team and everything it owns.

    - **Requires ADMIN permissions**
    - Irreversible
    """
    result = EntityLifecycle(db).permanently_delete_team(team_id, user.id)
    raise_for_decision(result.decision)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{team_id}/users", response_model=list[TeamMemberResponse])
def list_members(team_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """List all members of a team with their roles (any member)"""
    return _members_payload(db, team_id, user)


@router.post(
    "/{team_id}/users",
    response_model=list[TeamMemberResponse],
    status_code=status.HTTP_201_CREATED,
)
def add_member(
    team_id: int,
    data: TeamMemberAdd,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Add a user to a team.

    - **Requires ADMIN permissions**
    - Team must not be deleted
    """
    result = MembershipService(db).add_member(team_id, user.id, data.user_id, data.role)
    raise_for_decision(result.decision)
    return _members_payload(db, team_id, user)


@router.put("/{team_id}/users/{user_id}", response_model=list[TeamMemberResponse])
def update_member_role(
    team_id: int,
    user_id: int,
    data: TeamRoleUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Change a member's role.

    - **Requires ADMIN permissions**
    - The last admin cannot be demoted
    """
    result = MembershipService(db).change_role(team_id, user.id, user_id, data.role)
    raise_for_decision(result.decision)
    return _members_payload(db, team_id, user)


@router.delete("/{team_id}/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_member(
    team_id: int,
    user_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Remove a member from a team.

    - **Requires ADMIN permissions**
    - The last admin and the last member cannot be removed
    """
    result = MembershipService(db).remove_member(team_id, user.id, user_id)
    raise_for_decision(result.decision)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
