from pydantic import BaseModel, Field
from datetime import datetime
from app.models.role import TeamRole


class TeamCreate(BaseModel):
    """Create a team; the creator becomes its ADMIN"""

    name: str = Field(..., min_length=1, max_length=255, pattern=r"\S")


class TeamUpdate(BaseModel):
    """Rename team (ADMIN only)"""

    name: str = Field(..., min_length=1, max_length=255, pattern=r"\S")


class TeamResponse(BaseModel):
    """Team details response"""

    id: int
    name: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None

    model_config = {"from_attributes": True}


class TeamDetailResponse(TeamResponse):
    """Team details with book counts"""

    book_count: int
    deleted_book_count: int


class UserTeamResponse(BaseModel):
    """A team the user belongs to, with the user's role"""

    id: int
    name: str
    role: TeamRole
    created_at: datetime
    updated_at: datetime


class TeamMemberResponse(BaseModel):
    """Team member details with user info"""

    user_id: int
    username: str
    role: TeamRole
    active: bool
    created_at: datetime


class TeamMemberAdd(BaseModel):
    """Add an existing user to a team"""

    user_id: int = Field(..., gt=0)
    role: TeamRole = Field(..., description="Role to assign")


class TeamRoleUpdate(BaseModel):
    """Change member's role (ADMIN only)"""

    role: TeamRole = Field(..., description="New role to assign")
