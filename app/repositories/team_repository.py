"""Repository for Team model operations."""

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.database import storage_call
from app.models.book import Book
from app.models.team import Team


class TeamRepository:
    """
    Repository for Team model operations.

    Returns rows as stored, soft-deleted or not. Visibility rules are applied
    by EntityLookup. Writes are flushed, never committed; the caller owns
    the transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    @storage_call
    def get_by_id(self, team_id: int) -> Team | None:
        """
        Get team by ID.

        Args:
            team_id: Team ID

        Returns:
            Team object or None if not found
        """
        return self.db.get(Team, team_id)

    @storage_call
    def get_by_ids(self, team_ids: list[int]) -> list[Team]:
        if not team_ids:
            return []
        return self.db.query(Team).filter(Team.id.in_(team_ids)).order_by(Team.name).all()

    @storage_call
    def add(self, team: Team) -> Team:
        """
        Stage a new team and assign its ID.

        Args:
            team: Team object to create

        Returns:
            Team object with ID populated
        """
        self.db.add(team)
        self.db.flush()
        return team

    @storage_call
    def delete(self, team: Team) -> None:
        """
        Delete a team row.

        Memberships and books must already be gone.
        """
        self.db.query(Team).filter(Team.id == team.id).delete()

    @storage_call
    def count_books(self, team_id: int, deleted: bool = False) -> int:
        """
        Count books of a team, either active or soft-deleted ones.

        Args:
            team_id: Team ID
            deleted: Count soft-deleted books instead of active ones

        Returns:
            Number of books
        """
        query = self.db.query(func.count(Book.id)).filter(Book.team_id == team_id)
        if deleted:
            query = query.filter(Book.deleted_at.is_not(None))
        else:
            query = query.filter(Book.deleted_at.is_(None))
        return query.scalar() or 0
