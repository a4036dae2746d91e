"""Creation, soft delete, restore and permanent delete of teams and books."""

import logging

from sqlalchemy.orm import Session

from app.database import transaction
from app.models.access import AccessDecision, EntityRef, OperationResult
from app.models.base import utcnow
from app.models.book import Book
from app.models.role import TeamRole
from app.models.team import Team
from app.models.team_membership import TeamMembership
from app.models.user import User
from app.repositories.account_repository import AccountRepository
from app.repositories.book_repository import BookRepository
from app.repositories.category_repository import CategoryRepository
from app.repositories.team_membership_repository import TeamMembershipRepository
from app.repositories.team_repository import TeamRepository
from app.repositories.transaction_repository import TransactionRepository
from app.services.entity_lookup import EntityLookup
from app.services.permission_gate import PermissionGate
from app.services.role_resolver import RoleResolver

logger = logging.getLogger(__name__)

TEAM_NOT_FOUND = "team not found"
BOOK_NOT_FOUND = "book not found"
NOT_DELETED = "not deleted"
MUST_SOFT_DELETE_FIRST = "must be soft-deleted first"


class EntityLifecycle:
    """
    State machine for teams and books: active <-> deleted -> gone.

    - soft delete (active -> deleted): stamps deleted_at. Children are not
      touched; they stop being visible because their chain no longer resolves.
    - restore (deleted -> active): clears deleted_at. A book can only be
      restored while its team is active.
    - permanent delete (deleted -> gone): removes the entity and all rows
      that reference it, in one transaction.

    Every transition needs admin rights on the entity. Refusals are returned
    as OperationResult values; only StorageError is raised.
    """

    def __init__(self, db: Session):
        self.db = db
        self.lookup = EntityLookup(db)
        self.gate = PermissionGate(db, RoleResolver(db, self.lookup))
        self.team_repo = TeamRepository(db)
        self.book_repo = BookRepository(db)
        self.membership_repo = TeamMembershipRepository(db)
        self.account_repo = AccountRepository(db)
        self.category_repo = CategoryRepository(db)
        self.transaction_repo = TransactionRepository(db)

    # Creation

    def create_team(self, name: str, creator: User) -> OperationResult:
        """
        Create a team and enroll its creator as ADMIN atomically.

        If the enrollment fails the team insert is rolled back too.
        """
        with transaction(self.db):
            team = self.team_repo.add(Team(name=name))
            self.membership_repo.add(
                TeamMembership(team_id=team.id, user_id=creator.id, role=TeamRole.ADMIN)
            )
        self.db.refresh(team)
        logger.info("Team %s created by user %s", team.id, creator.id)
        return OperationResult.ok(team)

    def create_book(self, team_id, creator: User, **fields) -> OperationResult:
        """
        Create a book in a team.

        Requires write access on the team. The creator's team membership
        governs the new book; no separate grant is made.
        """
        team = self.lookup.find_team(team_id)
        if team is None:
            return OperationResult.refused(AccessDecision.not_found(TEAM_NOT_FOUND))

        decision = self.gate.can_write(EntityRef.team(team.id), creator.id)
        if not decision.allowed:
            return OperationResult.refused(decision)

        with transaction(self.db):
            book = self.book_repo.add(Book(team_id=team.id, **fields))
        self.db.refresh(book)
        logger.info("Book %s created in team %s by user %s", book.id, book.team_id, creator.id)
        return OperationResult.ok(book)

    # Teams

    def soft_delete_team(self, team_id, user_id) -> OperationResult:
        team = self.lookup.find_team(team_id)
        if team is None:
            return OperationResult.refused(AccessDecision.not_found(TEAM_NOT_FOUND))

        decision = self.gate.can_admin(EntityRef.team(team.id), user_id)
        if not decision.allowed:
            return OperationResult.refused(decision)

        with transaction(self.db):
            team.deleted_at = utcnow()
        logger.info("Team %s soft-deleted by user %s", team.id, user_id)
        return OperationResult.ok(team)

    def restore_team(self, team_id, user_id) -> OperationResult:
        team = self.lookup.find_team(team_id, include_deleted=True)
        if team is None:
            return OperationResult.refused(AccessDecision.not_found(TEAM_NOT_FOUND))

        decision = self.gate.can_admin(EntityRef.team(team.id), user_id, include_deleted=True)
        if not decision.allowed:
            return OperationResult.refused(decision)

        if not team.is_deleted:
            return OperationResult.refused(AccessDecision.invariant_violation(f"team {NOT_DELETED}"))

        with transaction(self.db):
            team.deleted_at = None
        logger.info("Team %s restored by user %s", team.id, user_id)
        return OperationResult.ok(team)

    def permanently_delete_team(self, team_id, user_id) -> OperationResult:
        """
        Remove a soft-deleted team with its books, their contents, and its memberships.

        Rows go in foreign-key order: transactions, categories, accounts,
        books, memberships, team.
        """
        team = self.lookup.find_team(team_id, include_deleted=True)
        if team is None:
            return OperationResult.refused(AccessDecision.not_found(TEAM_NOT_FOUND))

        decision = self.gate.can_admin(EntityRef.team(team.id), user_id, include_deleted=True)
        if not decision.allowed:
            return OperationResult.refused(decision)

        if not team.is_deleted:
            return OperationResult.refused(
                AccessDecision.invariant_violation(f"team {MUST_SOFT_DELETE_FIRST}")
            )

        team_pk = team.id
        with transaction(self.db):
            book_ids = self.book_repo.get_ids_by_team(team_pk)
            self._delete_book_contents(book_ids)
            self.book_repo.delete_ids(book_ids)
            self.membership_repo.delete_for_team(team_pk)
            self.team_repo.delete(team)
        logger.info(
            "Team %s permanently deleted by user %s (%d books)", team_pk, user_id, len(book_ids)
        )
        return OperationResult.ok()

    # Books

    def soft_delete_book(self, book_id, user_id) -> OperationResult:
        book = self.lookup.find_book(book_id)
        if book is None:
            return OperationResult.refused(AccessDecision.not_found(BOOK_NOT_FOUND))

        decision = self.gate.can_admin(EntityRef.book(book.id), user_id)
        if not decision.allowed:
            return OperationResult.refused(decision)

        with transaction(self.db):
            book.deleted_at = utcnow()
        logger.info("Book %s soft-deleted by user %s", book.id, user_id)
        return OperationResult.ok(book)

    def restore_book(self, book_id, user_id) -> OperationResult:
        """
        Restore a soft-deleted book.

        Admin rights are checked first, so non-admins learn nothing about the
        state of the team. For an admin, the governing team must still be
        active; otherwise the result is NOT_FOUND rather than a restore nobody
        could see.
        """
        book = self.lookup.find_book(book_id, include_deleted=True)
        if book is None:
            return OperationResult.refused(AccessDecision.not_found(BOOK_NOT_FOUND))

        decision = self.gate.can_admin(EntityRef.book(book.id), user_id, include_deleted=True)
        if not decision.allowed:
            return OperationResult.refused(decision)

        if self.lookup.find_team(book.team_id) is None:
            return OperationResult.refused(AccessDecision.not_found(TEAM_NOT_FOUND))

        if not book.is_deleted:
            return OperationResult.refused(AccessDecision.invariant_violation(f"book {NOT_DELETED}"))

        with transaction(self.db):
            book.deleted_at = None
        logger.info("Book %s restored by user %s", book.id, user_id)
        return OperationResult.ok(book)

    def permanently_delete_book(self, book_id, user_id) -> OperationResult:
        book = self.lookup.find_book(book_id, include_deleted=True)
        if book is None:
            return OperationResult.refused(AccessDecision.not_found(BOOK_NOT_FOUND))

        decision = self.gate.can_admin(EntityRef.book(book.id), user_id, include_deleted=True)
        if not decision.allowed:
            return OperationResult.refused(decision)

        if not book.is_deleted:
            return OperationResult.refused(
                AccessDecision.invariant_violation(f"book {MUST_SOFT_DELETE_FIRST}")
            )

        book_pk = book.id
        with transaction(self.db):
            self._delete_book_contents([book_pk])
            self.book_repo.delete_ids([book_pk])
        logger.info("Book %s permanently deleted by user %s", book_pk, user_id)
        return OperationResult.ok()

    def _delete_book_contents(self, book_ids: list[int]) -> None:
        # Transactions reference accounts and categories, so they go first
        self.transaction_repo.delete_for_books(book_ids)
        self.category_repo.delete_for_books(book_ids)
        self.account_repo.delete_for_books(book_ids)
