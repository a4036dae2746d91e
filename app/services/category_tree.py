"""In-memory arena of a book's category tree."""

from dataclasses import dataclass

from app.models.access import AccessDecision
from app.models.category import Category

CROSS_BOOK_PARENT = "parent category must belong to the same book"
CATEGORY_CYCLE = "parent category would create a cycle"


@dataclass
class CategoryNode:
    id: int
    parent_id: int | None


class CategoryTree:
    """
    Categories of one book indexed by id, with parent pointers.

    The schema only guarantees that parent_category_id points at some
    category row. Same-book parentage and acyclicity are checked here
    before any insert or re-parenting.
    """

    def __init__(self, book_id: int, nodes: dict[int, CategoryNode]):
        self.book_id = book_id
        self.nodes = nodes

    @classmethod
    def from_categories(cls, book_id: int, categories: list[Category]) -> "CategoryTree":
        nodes = {
            c.id: CategoryNode(c.id, c.parent_category_id)
            for c in categories
            if c.book_id == book_id
        }
        return cls(book_id, nodes)

    def ancestors(self, category_id: int) -> list[int]:
        """Parent chain of a category, nearest first. Stops if the stored data loops."""
        chain: list[int] = []
        seen = {category_id}
        node = self.nodes.get(category_id)
        while node is not None and node.parent_id is not None and node.parent_id not in seen:
            chain.append(node.parent_id)
            seen.add(node.parent_id)
            node = self.nodes.get(node.parent_id)
        return chain

    def check_parent(self, category_id: int | None, parent_id: int | None) -> AccessDecision:
        """
        Validate a parent link for a new (category_id=None) or existing category.

        Returns an INVARIANT_VIOLATION decision when the parent lives in
        another book, or when it is the category itself or one of its
        descendants.
        """
        if parent_id is None:
            return AccessDecision.grant()
        if parent_id not in self.nodes:
            return AccessDecision.invariant_violation(CROSS_BOOK_PARENT)
        if category_id is not None:
            if parent_id == category_id or category_id in self.ancestors(parent_id):
                return AccessDecision.invariant_violation(CATEGORY_CYCLE)
        return AccessDecision.grant()
