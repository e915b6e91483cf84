"""Category domain service."""

from salesboard.database.base import Database
from salesboard.domain.entities import Category
from salesboard.domain.errors import ConflictError, ValidationError, duplicate_name


class CategoryService:
    """Service for managing sale categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(self, name: str) -> int:
        """Create a category.

        Raises:
            ValidationError: If the name is blank
            ConflictError: If the category already exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Category name is required")
        if self.db.get_category_by_name(name) is not None:
            raise ConflictError(duplicate_name("Category", name))
        return self.db.create_category(name)

    def list_categories(self) -> list[Category]:
        """List all categories."""
        return self.db.list_categories()
