from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.core.exceptions import raise_for_decision
from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.services.book_service import BookService
from app.services.entity_lifecycle import EntityLifecycle
from app.services.transaction_service import TransactionService
from app.schemas.book_schemas import BookCreate, BookUpdate, BookResponse, BookUserResponse
from app.schemas.transaction_schemas import TransactionResponse

router = APIRouter()


@router.get("", response_model=list[BookResponse])
def list_books(
    team_id: int = Query(..., description="Team whose books to list"),
    deleted: bool = Query(False, description="List the recycle bin instead (ADMIN only)"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List books of a team"""
    return BookService(db).list_books(team_id, user, deleted=deleted)


@router.post("", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
def create_book(
    data: BookCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Create a book in a team.

    - Requires ADMIN or COLLABORATOR role in the team
    """
    result = EntityLifecycle(db).create_book(
        data.team_id, user, **data.model_dump(exclude={"team_id"})
    )
    raise_for_decision(result.decision)
    return result.entity


@router.get("/{book_id}", response_model=BookResponse)
def get_book(book_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get book details (any member of the book's team)"""
    return BookService(db).get_book(book_id, user)


@router.put("/{book_id}", response_model=BookResponse)
def update_book(
    book_id: int,
    data: BookUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update book settings (ADMIN or COLLABORATOR)"""
    return BookService(db).update_book(book_id, data, user)


@router.get("/{book_id}/users", response_model=list[BookUserResponse])
def get_book_users(book_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Users with access to the book through its team"""
    return BookService(db).get_book_users(book_id, user)


@router.get("/{book_id}/transactions", response_model=list[TransactionResponse])
def list_book_transactions(
    book_id: int,
    account_id: Optional[int] = Query(None, description="Only this account of the book"),
    start_date: Optional[date] = Query(None, description="Filter from date (inclusive)"),
    end_date: Optional[date] = Query(None, description="Filter to date (inclusive)"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Transactions of every account in the book, oldest first"""
    return TransactionService(db).list_book_transactions(
        book_id, user, account_id=account_id, start_date=start_date, end_date=end_date
    )


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_book(book_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Soft-delete a book.

    - **Requires ADMIN permissions**
    """
    result = EntityLifecycle(db).soft_delete_book(book_id, user.id)
    raise_for_decision(result.decision)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{book_id}/restore", response_model=BookResponse)
def restore_book(book_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Restore a soft-deleted book.

    - **Requires ADMIN permissions**
    - The book's team must be active
    """
    result = EntityLifecycle(db).restore_book(book_id, user.id)
    raise_for_decision(result.decision)
    return result.entity


@router.delete("/{book_id}/permanent", status_code=status.HTTP_204_NO_CONTENT)
def permanently_delete_book(
    book_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """
    Permanently delete a soft-deleted book with its accounts, categories and transactions.

    - **Requires ADMIN permissions**
    """
    result = EntityLifecycle(db).permanently_delete_book(book_id, user.id)
    raise_for_decision(result.decision)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
