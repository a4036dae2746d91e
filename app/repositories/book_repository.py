"""Repository for Book model operations."""

from sqlalchemy.orm import Session

from app.database import storage_call
from app.models.book import Book


class BookRepository:
    """Repository for Book model operations. Rows are returned as stored."""

    def __init__(self, db: Session):
        self.db = db

    @storage_call
    def get_by_id(self, book_id: int) -> Book | None:
        """Get book by ID, soft-deleted or not."""
        return self.db.get(Book, book_id)

    @storage_call
    def get_by_team(self, team_id: int, deleted: bool = False) -> list[Book]:
        """
        Get books of a team.

        Args:
            team_id: Team ID
            deleted: Return the recycle bin (soft-deleted books) instead of active books

        Returns:
            List of books ordered by name
        """
        query = self.db.query(Book).filter(Book.team_id == team_id)
        if deleted:
            query = query.filter(Book.deleted_at.is_not(None))
        else:
            query = query.filter(Book.deleted_at.is_(None))
        return query.order_by(Book.name).all()

    @storage_call
    def get_ids_by_team(self, team_id: int) -> list[int]:
        """IDs of every book of a team, including soft-deleted ones."""
        return [row[0] for row in self.db.query(Book.id).filter(Book.team_id == team_id).all()]

    @storage_call
    def add(self, book: Book) -> Book:
        """Stage a new book and assign its ID (caller commits)."""
        self.db.add(book)
        self.db.flush()
        return book

    @storage_call
    def delete_ids(self, book_ids: list[int]) -> int:
        """Delete book rows; dependents must already be gone."""
        if not book_ids:
            return 0
        return (
            self.db.query(Book)
            .filter(Book.id.in_(book_ids))
            .delete()
        )
