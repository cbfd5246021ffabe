"""Comment repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.comment import Comment, CommentWithUser


class ICommentRepository(Protocol):
    """Repository interface for Comment entities."""

    async def get(self, id: UUID) -> Comment | None:
        """Get a comment by ID."""
        ...

    async def get_for_recipe(self, recipe_id: UUID) -> list[CommentWithUser]:
        """Get a recipe's comments with author names, oldest first."""
        ...

    async def count_for_recipe(self, recipe_id: UUID) -> int:
        """Comment count from the get_recipe_comment_count function."""
        ...

    async def create(self, comment: Comment) -> Comment:
        """Create a new comment."""
        ...

    async def update(self, comment: Comment) -> Comment:
        """Update an existing comment."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a comment and return success status."""
        ...
