from datetime import date
from typing import Optional
from decimal import Decimal
from sqlalchemy import case, func
from sqlalchemy.orm import Session

from app.database import storage_call
from app.models.transaction import Transaction
from app.models.account import Account


class TransactionRepository:
    """Repository for Transaction data access"""

    def __init__(self, db: Session):
        self.db = db

    @storage_call
    def add(self, transaction: Transaction) -> Transaction:
        """Stage single transaction without committing (caller commits)"""
        self.db.add(transaction)
        self.db.flush()
        return transaction

    @storage_call
    def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID"""
        return self.db.get(Transaction, transaction_id)

    @storage_call
    def get_by_account(
        self,
        account_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Transaction], int]:
        """
        Get transactions of an account with optional filters and pagination.

        Args:
            account_id: Account ID
            start_date: Filter transactions on or after this date
            end_date: Filter transactions on or before this date
            category_id: Filter by category
            limit: Maximum number of results
            offset: Number of results to skip

        Returns:
            Tuple of (transactions list, total count before pagination)
        """
        query = self.db.query(Transaction).filter(Transaction.account_id == account_id)

        if start_date:
            query = query.filter(Transaction.date >= start_date)
        if end_date:
            query = query.filter(Transaction.date <= end_date)
        if category_id is not None:
            query = query.filter(Transaction.category_id == category_id)

        total = query.count()

        transactions = (
            query.order_by(Transaction.date.desc(), Transaction.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )

        return transactions, total

    @storage_call
    def get_by_book(
        self,
        book_id: int,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Transaction]:
        """Get transactions across all accounts of a book, oldest first"""
        query = (
            self.db.query(Transaction)
            .join(Account, Transaction.account_id == Account.id)
            .filter(Account.book_id == book_id)
        )

        if account_id is not None:
            query = query.filter(Transaction.account_id == account_id)
        if start_date:
            query = query.filter(Transaction.date >= start_date)
        if end_date:
            query = query.filter(Transaction.date <= end_date)

        return query.order_by(Transaction.date.asc(), Transaction.id.asc()).all()

    @storage_call
    def get_account_balance(self, account_id: int, up_to_date: date) -> tuple[Decimal, Decimal]:
        """
        Sum an account's transactions dated on or before up_to_date.

        Returns:
            Tuple of (exercised balance, projected balance). The exercised
            balance only counts transactions marked as exercised.
        """
        exercised, projected = (
            self.db.query(
                func.sum(case((Transaction.exercised.is_(True), Transaction.amount), else_=0)),
                func.sum(Transaction.amount),
            )
            .filter(Transaction.account_id == account_id, Transaction.date <= up_to_date)
            .one()
        )
        return Decimal(exercised or 0), Decimal(projected or 0)

    @storage_call
    def delete(self, transaction: Transaction) -> None:
        """Delete transaction"""
        self.db.delete(transaction)
        self.db.flush()

    @storage_call
    def delete_for_books(self, book_ids: list[int]) -> int:
        """Delete every transaction booked on an account of the given books."""
        if not book_ids:
            return 0
        account_ids = self.db.query(Account.id).filter(Account.book_id.in_(book_ids))
        return (
            self.db.query(Transaction)
            .filter(Transaction.account_id.in_(account_ids.scalar_subquery()))
            .delete()
        )

    @storage_call
    def clear_category(self, category_id: int) -> int:
        """Detach transactions from a category that is about to be deleted"""
        return (
            self.db.query(Transaction)
            .filter(Transaction.category_id == category_id)
            .update({Transaction.category_id: None})
        )
