from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Response, status, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.services.transaction_service import TransactionService
from app.schemas.transaction_schemas import (
    TransactionCreate,
    TransactionUpdate,
    TransactionResponse,
    TransactionListResponse,
)

router = APIRouter()


@router.post("", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
def create_transaction(
    transaction_data: TransactionCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Create a new transaction.

    - Requires ADMIN or COLLABORATOR role in the account's team
    - category_id, when given, must belong to the account's book
    """
    service = TransactionService(db)
    return service.create_transaction(transaction_data, user)


@router.get("", response_model=TransactionListResponse)
def list_transactions(
    account_id: int = Query(..., description="Account whose transactions to list"),
    start_date: Optional[date] = Query(None, description="Filter from date (inclusive)"),
    end_date: Optional[date] = Query(None, description="Filter to date (inclusive)"),
    category_id: Optional[int] = Query(None, description="Filter by category"),
    limit: int = Query(100, ge=1, le=1000, description="Max results"),
    offset: int = Query(0, ge=0, description="Pagination offset"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    List transactions of an account with optional filtering.

    - Sorted by date descending (newest first)
    """
    service = TransactionService(db)
    transactions, total = service.list_transactions(
        account_id,
        user,
        start_date=start_date,
        end_date=end_date,
        category_id=category_id,
        limit=limit,
        offset=offset,
    )
    return TransactionListResponse(transactions=transactions, total=total)


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get a single transaction by ID"""
    service = TransactionService(db)
    return service.get_transaction(transaction_id, user)


@router.put("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: int,
    transaction_data: TransactionUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update a transaction (partial update)"""
    service = TransactionService(db)
    return service.update_transaction(transaction_id, transaction_data, user)


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(
    transaction_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete a transaction"""
    service = TransactionService(db)
    service.delete_transaction(transaction_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
