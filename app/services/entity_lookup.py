"""Visibility-aware lookup of teams, books and the rows they own."""

from sqlalchemy.orm import Session

from app.models.account import Account
from app.models.book import Book
from app.models.category import Category
from app.models.team import Team
from app.models.transaction import Transaction
from app.repositories.account_repository import AccountRepository
from app.repositories.book_repository import BookRepository
from app.repositories.category_repository import CategoryRepository
from app.repositories.team_repository import TeamRepository
from app.repositories.transaction_repository import TransactionRepository


def parse_id(raw) -> int | None:
    """
    Normalise an entity id.

    Accepts positive ints and strings of digits. Anything else (bools,
    negatives, zero, floats, junk strings, None) is treated as an id that
    matches nothing.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw > 0 else None
    if isinstance(raw, str):
        text = raw.strip()
        if text.isdigit():
            value = int(text)
            return value if value > 0 else None
    return None


class EntityLookup:
    """
    Resolve entities by id while applying soft-delete visibility.

    This is the one place where deleted_at is interpreted:
    - a team is visible when it is not soft-deleted;
    - a book is visible when neither it nor its team is soft-deleted;
    - accounts, categories and transactions have no state of their own and
      are visible exactly when their book is.

    Lookups return None for missing, invisible or malformed ids. Storage
    failures raise StorageError.
    """

    def __init__(self, db: Session):
        self.db = db
        self.team_repo = TeamRepository(db)
        self.book_repo = BookRepository(db)
        self.account_repo = AccountRepository(db)
        self.category_repo = CategoryRepository(db)
        self.transaction_repo = TransactionRepository(db)

    def find_team(self, team_id, include_deleted: bool = False) -> Team | None:
        """
        Get a team by ID.

        Args:
            team_id: Team ID
            include_deleted: Also return a soft-deleted team

        Returns:
            Team or None if missing (or soft-deleted and not requested)
        """
        team_id = parse_id(team_id)
        if team_id is None:
            return None
        team = self.team_repo.get_by_id(team_id)
        if team is None:
            return None
        if team.is_deleted and not include_deleted:
            return None
        return team

    def find_teams(self, team_ids: list[int]) -> list[Team]:
        """Visible teams among the given IDs, ordered by name."""
        teams = self.team_repo.get_by_ids([i for i in map(parse_id, team_ids) if i is not None])
        return [team for team in teams if not team.is_deleted]

    def find_book(self, book_id, include_deleted: bool = False) -> Book | None:
        """
        Get a book by ID.

        Without include_deleted, returns None when the book or its team is
        soft-deleted. A book whose team row no longer exists is never returned.
        """
        book_id = parse_id(book_id)
        if book_id is None:
            return None
        book = self.book_repo.get_by_id(book_id)
        if book is None:
            return None
        team = self.team_repo.get_by_id(book.team_id)
        if team is None:
            return None
        if not include_deleted and (book.is_deleted or team.is_deleted):
            return None
        return book

    def find_account(self, account_id) -> Account | None:
        """Get an account whose book and team are both visible."""
        account_id = parse_id(account_id)
        if account_id is None:
            return None
        account = self.account_repo.get_by_id(account_id)
        if account is None or self.find_book(account.book_id) is None:
            return None
        return account

    def find_category(self, category_id) -> Category | None:
        """Get a category whose book and team are both visible."""
        category_id = parse_id(category_id)
        if category_id is None:
            return None
        category = self.category_repo.get_by_id(category_id)
        if category is None or self.find_book(category.book_id) is None:
            return None
        return category

    def find_transaction(self, transaction_id) -> Transaction | None:
        """Get a transaction whose account is visible."""
        transaction_id = parse_id(transaction_id)
        if transaction_id is None:
            return None
        transaction = self.transaction_repo.get_by_id(transaction_id)
        if transaction is None or self.find_account(transaction.account_id) is None:
            return None
        return transaction

    def list_books(self, team_id, deleted: bool = False) -> list[Book]:
        """
        Books of a visible team.

        Args:
            team_id: Team ID
            deleted: Return the team's soft-deleted books (recycle bin) instead

        Returns:
            Books ordered by name, or an empty list if the team is not visible
        """
        team = self.find_team(team_id)
        if team is None:
            return []
        return self.book_repo.get_by_team(team.id, deleted=deleted)
