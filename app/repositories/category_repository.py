from sqlalchemy.orm import Session
from app.database import storage_call
from app.models.category import Category


class CategoryRepository:
    """Repository for Category model operations"""

    def __init__(self, db: Session):
        self.db = db

    @storage_call
    def get_by_id(self, category_id: int) -> Category | None:
        """Get category by ID"""
        return self.db.get(Category, category_id)

    @storage_call
    def get_by_book(self, book_id: int) -> list[Category]:
        """Get all categories of a book ordered by name"""
        return (
            self.db.query(Category)
            .filter(Category.book_id == book_id)
            .order_by(Category.name, Category.id)
            .all()
        )

    @storage_call
    def count_children(self, category_id: int) -> int:
        """Number of categories whose parent is the given category"""
        return (
            self.db.query(Category)
            .filter(Category.parent_category_id == category_id)
            .count()
        )

    @storage_call
    def add(self, category: Category) -> Category:
        """Stage new category (caller commits)"""
        self.db.add(category)
        self.db.flush()
        return category

    @storage_call
    def delete(self, category: Category) -> None:
        self.db.delete(category)
        self.db.flush()

    @storage_call
    def delete_for_books(self, book_ids: list[int]) -> int:
        """
        Delete every category of the given books.

        Parent links are cleared first so the self-referencing foreign key
        never blocks the delete, whatever the depth of the tree.
        """
        if not book_ids:
            return 0
        self.db.query(Category).filter(Category.book_id.in_(book_ids)).update(
            {Category.parent_category_id: None}
        )
        return (
            self.db.query(Category)
            .filter(Category.book_id.in_(book_ids))
            .delete()
        )
