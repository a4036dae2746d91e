from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundException, raise_for_decision
from app.database import transaction
from app.models.access import EntityRef
from app.models.book import Book
from app.models.user import User
from app.schemas.book_schemas import BookUpdate
from app.services.entity_lookup import EntityLookup
from app.services.permission_gate import PermissionGate
from app.services.role_resolver import RoleResolver


class BookService:
    """Service layer for book reads and settings"""

    def __init__(self, db: Session):
        self.db = db
        self.lookup = EntityLookup(db)
        self.roles = RoleResolver(db, self.lookup)
        self.gate = PermissionGate(db, self.roles)

    def list_books(self, team_id: int, user: User, deleted: bool = False) -> list[Book]:
        """
        List books of a team.

        Any member sees active books; only admins see the recycle bin.

        Raises:
            NotFoundException: If team doesn't exist or is deleted
            ForbiddenException: If user lacks the required role
        """
        if self.lookup.find_team(team_id) is None:
            raise NotFoundException("Team not found")

        ref = EntityRef.team(team_id)
        decision = self.gate.can_admin(ref, user.id) if deleted else self.gate.can_read(ref, user.id)
        raise_for_decision(decision)
        return self.lookup.list_books(team_id, deleted=deleted)

    def get_book(self, book_id: int, user: User) -> Book:
        """
        Get a visible book (any member of its team).

        Raises:
            NotFoundException: If book or its team doesn't exist or is deleted
            ForbiddenException: If user is not a member of the book's team
        """
        book = self._get_visible_book(book_id)
        raise_for_decision(self.gate.can_read(EntityRef.book(book.id), user.id))
        return book

    def update_book(self, book_id: int, data: BookUpdate, user: User) -> Book:
        """Update book settings (ADMIN or COLLABORATOR)"""
        book = self._get_visible_book(book_id)
        raise_for_decision(self.gate.can_write(EntityRef.book(book.id), user.id))

        with transaction(self.db):
            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(book, field, value)
        self.db.refresh(book)
        return book

    def get_book_users(self, book_id: int, user: User) -> list[dict]:
        """Users with access to a book through its team, with their roles"""
        book = self.get_book(book_id, user)
        return [
            {
                "id": member.id,
                "username": member.display_name,
                "role": membership.role,
                "active": member.active,
            }
            for membership, member in self.roles.members_of(book.team_id)
        ]

    def _get_visible_book(self, book_id: int) -> Book:
        book = self.lookup.find_book(book_id)
        if book is None:
            raise NotFoundException("Book not found")
        return book
