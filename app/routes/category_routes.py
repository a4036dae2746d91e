from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.services.category_service import CategoryService
from app.schemas.category_schemas import CategoryCreate, CategoryUpdate, CategoryResponse

router = APIRouter()


@router.get("", response_model=list[CategoryResponse])
def list_categories(
    book_id: int = Query(..., description="Book whose categories to list"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get all categories of a book"""
    return CategoryService(db).list_categories(book_id, user)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    data: CategoryCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """
    Create a category.

    - Requires ADMIN or COLLABORATOR role
    - parent_category_id must be a category of the same book
    """
    return CategoryService(db).create_category(data, user)


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(
    category_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    return CategoryService(db).get_category(category_id, user)


@router.put("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    data: CategoryUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update a category; a new parent may not be the category itself or one of its descendants"""
    return CategoryService(db).update_category(category_id, data, user)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Delete a category without subcategories"""
    CategoryService(db).delete_category(category_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
