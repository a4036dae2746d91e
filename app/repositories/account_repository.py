from sqlalchemy.orm import Session
from app.database import storage_call
from app.models.account import Account


class AccountRepository:
    """Repository for Account model operations"""

    def __init__(self, db: Session):
        self.db = db

    @storage_call
    def get_by_id(self, account_id: int) -> Account | None:
        """Get account by ID regardless of its book's state"""
        return self.db.get(Account, account_id)

    @storage_call
    def get_by_book(self, book_id: int) -> list[Account]:
        """Get all accounts of a book"""
        return (
            self.db.query(Account)
            .filter(Account.book_id == book_id)
            .order_by(Account.name)
            .all()
        )

    @storage_call
    def add(self, account: Account) -> Account:
        """Stage new account (caller commits)"""
        self.db.add(account)
        self.db.flush()
        return account

    @storage_call
    def delete(self, account: Account) -> None:
        """Delete account; the ORM cascade removes its transactions"""
        self.db.delete(account)
        self.db.flush()

    @storage_call
    def delete_for_books(self, book_ids: list[int]) -> int:
        if not book_ids:
            return 0
        return (
            self.db.query(Account)
            .filter(Account.book_id.in_(book_ids))
            .delete()
        )
