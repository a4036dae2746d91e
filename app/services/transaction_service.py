from datetime import date
from typing import Optional
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundException, ValidationException, raise_for_decision
from app.database import transaction as storage_transaction
from app.models.access import EntityRef
from app.models.account import Account
from app.models.transaction import Transaction
from app.models.user import User
from app.repositories.transaction_repository import TransactionRepository
from app.schemas.transaction_schemas import TransactionCreate, TransactionUpdate
from app.services.entity_lookup import EntityLookup
from app.services.permission_gate import PermissionGate
from app.services.role_resolver import RoleResolver


class TransactionService:
    """Service layer for transaction business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.lookup = EntityLookup(db)
        self.gate = PermissionGate(db, RoleResolver(db, self.lookup))
        self.transaction_repo = TransactionRepository(db)

    def create_transaction(self, transaction_data: TransactionCreate, user: User) -> Transaction:
        """
        Create a new transaction on an account.

        Args:
            transaction_data: Transaction creation data
            user: Current user (for permission check)

        Returns:
            Created transaction

        Raises:
            NotFoundException: If account doesn't exist or is not visible
            ForbiddenException: If user lacks write access to the account's book
            ValidationException: If the category belongs to another book
        """
        account = self._get_visible_account(transaction_data.account_id)
        raise_for_decision(self.gate.can_write(EntityRef.account(account.id), user.id))
        self._check_category(account, transaction_data.category_id)

        with storage_transaction(self.db):
            transaction = self.transaction_repo.add(
                Transaction(
                    account_id=account.id,
                    category_id=transaction_data.category_id,
                    description=transaction_data.description,
                    note=transaction_data.note,
                    amount=transaction_data.amount,
                    date=transaction_data.date,
                    exercised=transaction_data.exercised,
                )
            )
        self.db.refresh(transaction)
        return transaction

    def get_transaction(self, transaction_id: int, user: User) -> Transaction:
        """
        Get transaction by ID with permission check.

        Raises:
            NotFoundException: If transaction doesn't exist or its book is not visible
            ForbiddenException: If user is not a member of the governing team
        """
        transaction = self.lookup.find_transaction(transaction_id)
        if transaction is None:
            raise NotFoundException(f"Transaction {transaction_id} not found")
        raise_for_decision(self.gate.can_read(EntityRef.transaction(transaction.id), user.id))
        return transaction

    def list_transactions(
        self,
        account_id: int,
        user: User,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Transaction], int]:
        """
        List transactions of an account with filtering and pagination.

        Returns:
            Tuple of (transactions list, total count)
        """
        account = self._get_visible_account(account_id)
        raise_for_decision(self.gate.can_read(EntityRef.account(account.id), user.id))
        return self.transaction_repo.get_by_account(
            account.id,
            start_date=start_date,
            end_date=end_date,
            category_id=category_id,
            limit=limit,
            offset=offset,
        )

    def list_book_transactions(
        self,
        book_id: int,
        user: User,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Transaction]:
        """
        List transactions across all accounts of a book, oldest first.

        Raises:
            NotFoundException: If the book is not visible, or account_id names
                an account outside the book
            ForbiddenException: If user is not a member of the governing team
        """
        book = self.lookup.find_book(book_id)
        if book is None:
            raise NotFoundException("Book not found")
        raise_for_decision(self.gate.can_read(EntityRef.book(book.id), user.id))

        if account_id is not None:
            account = self.lookup.find_account(account_id)
            if account is None or account.book_id != book.id:
                raise NotFoundException("Account not found in this book")

        return self.transaction_repo.get_by_book(
            book.id, account_id=account_id, start_date=start_date, end_date=end_date
        )

    def update_transaction(
        self, transaction_id: int, transaction_data: TransactionUpdate, user: User
    ) -> Transaction:
        """Update transaction fields (ADMIN or COLLABORATOR)"""
        transaction = self.lookup.find_transaction(transaction_id)
        if transaction is None:
            raise NotFoundException(f"Transaction {transaction_id} not found")
        raise_for_decision(self.gate.can_write(EntityRef.transaction(transaction.id), user.id))

        changes = transaction_data.model_dump(exclude_unset=True)
        if changes.get("category_id") is not None:
            self._check_category(transaction.account, changes["category_id"])

        with storage_transaction(self.db):
            for field, value in changes.items():
                setattr(transaction, field, value)
        self.db.refresh(transaction)
        return transaction

    def delete_transaction(self, transaction_id: int, user: User) -> None:
        """Delete transaction (ADMIN or COLLABORATOR)"""
        transaction = self.lookup.find_transaction(transaction_id)
        if transaction is None:
            raise NotFoundException(f"Transaction {transaction_id} not found")
        raise_for_decision(self.gate.can_write(EntityRef.transaction(transaction.id), user.id))

        with storage_transaction(self.db):
            self.transaction_repo.delete(transaction)

    def _get_visible_account(self, account_id: int) -> Account:
        account = self.lookup.find_account(account_id)
        if account is None:
            raise NotFoundException(f"Account {account_id} not found")
        return account

    def _check_category(self, account: Account, category_id: Optional[int]) -> None:
        if category_id is None:
            return
        category = self.lookup.find_category(category_id)
        if category is None:
            raise NotFoundException(f"Category {category_id} not found")
        if category.book_id != account.book_id:
            raise ValidationException("Category must belong to the account's book")
