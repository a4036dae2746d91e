from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundException, ValidationException, raise_for_decision
from app.database import transaction
from app.models.access import EntityRef
from app.models.category import Category
from app.models.user import User
from app.repositories.category_repository import CategoryRepository
from app.repositories.transaction_repository import TransactionRepository
from app.schemas.category_schemas import CategoryCreate, CategoryUpdate
from app.services.category_tree import CategoryTree
from app.services.entity_lookup import EntityLookup
from app.services.permission_gate import PermissionGate
from app.services.role_resolver import RoleResolver


class CategoryService:
    """Service for category business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.lookup = EntityLookup(db)
        self.gate = PermissionGate(db, RoleResolver(db, self.lookup))
        self.repo = CategoryRepository(db)
        self.transaction_repo = TransactionRepository(db)

    def list_categories(self, book_id: int, user: User) -> list[Category]:
        """Get all categories of a book (any member)"""
        book = self.lookup.find_book(book_id)
        if book is None:
            raise NotFoundException("Book not found")
        raise_for_decision(self.gate.can_read(EntityRef.book(book.id), user.id))
        return self.repo.get_by_book(book.id)

    def get_category(self, category_id: int, user: User) -> Category:
        """
        Get category if user can read its book.

        Raises:
            NotFoundException: If category not found or its book is not visible
        """
        category = self.lookup.find_category(category_id)
        if category is None:
            raise NotFoundException("Category not found")
        raise_for_decision(self.gate.can_read(EntityRef.category(category.id), user.id))
        return category

    def create_category(self, data: CategoryCreate, user: User) -> Category:
        """
        Create a category in a book (ADMIN or COLLABORATOR).

        Raises:
            NotFoundException: If book or parent category not found
            ValidationException: If parent belongs to another book
        """
        book = self.lookup.find_book(data.book_id)
        if book is None:
            raise NotFoundException("Book not found")
        raise_for_decision(self.gate.can_write(EntityRef.book(book.id), user.id))

        self._check_parent(book.id, None, data.parent_category_id)

        with transaction(self.db):
            category = self.repo.add(
                Category(
                    book_id=book.id,
                    name=data.name,
                    note=data.note,
                    category_type=data.category_type,
                    parent_category_id=data.parent_category_id,
                )
            )
        self.db.refresh(category)
        return category

    def update_category(self, category_id: int, data: CategoryUpdate, user: User) -> Category:
        """Update category details; re-parenting is validated against the book's tree"""
        category = self.lookup.find_category(category_id)
        if category is None:
            raise NotFoundException("Category not found")
        raise_for_decision(self.gate.can_write(EntityRef.category(category.id), user.id))

        changes = data.model_dump(exclude_unset=True)
        if "parent_category_id" in changes:
            self._check_parent(category.book_id, category.id, changes["parent_category_id"])

        with transaction(self.db):
            for field, value in changes.items():
                setattr(category, field, value)
        self.db.refresh(category)
        return category

    def delete_category(self, category_id: int, user: User) -> None:
        """
        Delete a leaf category; its transactions become uncategorised.

        Raises:
            ValidationException: If the category still has subcategories
        """
        category = self.lookup.find_category(category_id)
        if category is None:
            raise NotFoundException("Category not found")
        raise_for_decision(self.gate.can_write(EntityRef.category(category.id), user.id))

        if self.repo.count_children(category.id) > 0:
            raise ValidationException("Category has subcategories")

        with transaction(self.db):
            self.transaction_repo.clear_category(category.id)
            self.repo.delete(category)

    def _check_parent(self, book_id: int, category_id: int | None, parent_id: int | None) -> None:
        if parent_id is None:
            return
        if self.lookup.find_category(parent_id) is None:
            raise NotFoundException("Parent category not found")
        tree = CategoryTree.from_categories(book_id, self.repo.get_by_book(book_id))
        raise_for_decision(tree.check_parent(category_id, parent_id))
