from datetime import date
from typing import Optional
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundException, raise_for_decision
from app.database import transaction
from app.models.access import EntityRef
from app.models.account import Account
from app.models.user import User
from app.repositories.account_repository import AccountRepository
from app.repositories.transaction_repository import TransactionRepository
from app.schemas.account_schemas import AccountBalanceResponse, AccountCreate, AccountUpdate
from app.services.entity_lookup import EntityLookup
from app.services.permission_gate import PermissionGate
from app.services.role_resolver import RoleResolver


class AccountService:
    """Service for account business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.lookup = EntityLookup(db)
        self.gate = PermissionGate(db, RoleResolver(db, self.lookup))
        self.repo = AccountRepository(db)
        self.transaction_repo = TransactionRepository(db)

    def create_account(self, data: AccountCreate, user: User) -> Account:
        """Create new account in a book (ADMIN or COLLABORATOR)"""
        book = self.lookup.find_book(data.book_id)
        if book is None:
            raise NotFoundException("Book not found")
        raise_for_decision(self.gate.can_write(EntityRef.book(book.id), user.id))

        with transaction(self.db):
            account = self.repo.add(
                Account(
                    book_id=book.id,
                    name=data.name,
                    note=data.note,
                    account_type=data.account_type,
                    starting_amount=data.starting_amount,
                )
            )
        self.db.refresh(account)
        return account

    def get_book_accounts(self, book_id: int, user: User) -> list[Account]:
        """Get all accounts of a book (any member)"""
        book = self.lookup.find_book(book_id)
        if book is None:
            raise NotFoundException("Book not found")
        raise_for_decision(self.gate.can_read(EntityRef.book(book.id), user.id))
        return self.repo.get_by_book(book.id)

    def get_account(self, account_id: int, user: User) -> Account:
        """
        Get specific account if user can read its book.

        Raises:
            NotFoundException: If account not found or its book is not visible
            ForbiddenException: If user is not a member of the governing team
        """
        account = self._get_visible_account(account_id)
        raise_for_decision(self.gate.can_read(EntityRef.account(account.id), user.id))
        return account

    def get_balance(
        self, account_id: int, user: User, up_to_date: Optional[date] = None
    ) -> AccountBalanceResponse:
        """
        Balance of an account's transactions dated on or before up_to_date.

        The projected balance sums every transaction, the exercised balance only
        the exercised ones. up_to_date defaults to today.
        """
        account = self._get_visible_account(account_id)
        raise_for_decision(self.gate.can_read(EntityRef.account(account.id), user.id))

        up_to_date = up_to_date or date.today()
        exercised, projected = self.transaction_repo.get_account_balance(account.id, up_to_date)
        return AccountBalanceResponse(
            account_id=account.id,
            up_to_date=up_to_date,
            exercised_balance=float(exercised),
            projected_balance=float(projected),
        )

    def update_account(self, account_id: int, data: AccountUpdate, user: User) -> Account:
        """Update account details"""
        account = self._get_visible_account(account_id)
        raise_for_decision(self.gate.can_write(EntityRef.account(account.id), user.id))

        with transaction(self.db):
            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(account, field, value)
        self.db.refresh(account)
        return account

    def delete_account(self, account_id: int, user: User) -> None:
        """Delete account and all transactions (cascade)"""
        account = self._get_visible_account(account_id)
        raise_for_decision(self.gate.can_write(EntityRef.account(account.id), user.id))

        with transaction(self.db):
            self.repo.delete(account)

    def _get_visible_account(self, account_id: int) -> Account:
        account = self.lookup.find_account(account_id)
        if account is None:
            raise NotFoundException("Account not found")
        return account
