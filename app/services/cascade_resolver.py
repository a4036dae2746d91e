"""Walk the ownership chain up to the team that governs an entity."""

from sqlalchemy.orm import Session

from app.models.access import EntityKind, EntityRef
from app.models.account import Account
from app.models.book import Book
from app.models.team import Team
from app.services.entity_lookup import EntityLookup


class CascadeResolver:
    """
    Resolve the governing book/team of lower-level entities.

    Chain: Transaction -> Account -> Book -> Team, and Category -> Book -> Team.
    Every hop goes back through EntityLookup, so a deleted link anywhere in
    the chain resolves to None instead of a stale parent.
    """

    def __init__(self, db: Session, lookup: EntityLookup | None = None):
        self.lookup = lookup or EntityLookup(db)

    def team_of_book(self, book_id) -> Team | None:
        book = self.lookup.find_book(book_id)
        if book is None:
            return None
        return self.lookup.find_team(book.team_id)

    def book_of_account(self, account_id) -> Book | None:
        account = self.lookup.find_account(account_id)
        if account is None:
            return None
        return self.lookup.find_book(account.book_id)

    def team_of_account(self, account_id) -> Team | None:
        book = self.book_of_account(account_id)
        if book is None:
            return None
        return self.team_of_book(book.id)

    def book_of_category(self, category_id) -> Book | None:
        category = self.lookup.find_category(category_id)
        if category is None:
            return None
        return self.lookup.find_book(category.book_id)

    def account_of_transaction(self, transaction_id) -> Account | None:
        transaction = self.lookup.find_transaction(transaction_id)
        if transaction is None:
            return None
        return self.lookup.find_account(transaction.account_id)

    def team_of(self, ref: EntityRef, include_deleted: bool = False) -> Team | None:
        """
        Resolve any entity reference to its governing team.

        include_deleted lets a soft-deleted team or book (and a book under a
        soft-deleted team) resolve; it is used only to authorise restore and
        permanent delete. Lower-level entities always require a visible chain.
        """
        if ref.kind == EntityKind.TEAM:
            return self.lookup.find_team(ref.id, include_deleted=include_deleted)

        if ref.kind == EntityKind.BOOK:
            if not include_deleted:
                return self.team_of_book(ref.id)
            book = self.lookup.find_book(ref.id, include_deleted=True)
            if book is None:
                return None
            return self.lookup.find_team(book.team_id, include_deleted=True)

        if ref.kind == EntityKind.ACCOUNT:
            return self.team_of_account(ref.id)

        if ref.kind == EntityKind.CATEGORY:
            book = self.book_of_category(ref.id)
            return self.team_of_book(book.id) if book else None

        if ref.kind == EntityKind.TRANSACTION:
            account = self.account_of_transaction(ref.id)
            return self.team_of_account(account.id) if account else None

        raise ValueError(f"Unsupported entity kind: {ref.kind!r}")
