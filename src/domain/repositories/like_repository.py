"""Like repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.like import Like


class ILikeRepository(Protocol):
    """Repository interface for Like entities."""

    async def get_for_recipe(self, recipe_id: UUID) -> list[Like]:
        """Get all likes of a recipe, newest first."""
        ...

    async def count_for_recipe(self, recipe_id: UUID) -> int:
        """Like count from the get_recipe_like_count function."""
        ...

    async def has_liked(self, user_id: UUID, recipe_id: UUID) -> bool:
        """Like existence from the has_user_liked_recipe function."""
        ...

    async def create(self, like: Like) -> Like:
        """Insert a like. Raises IntegrityError if the pair already exists."""
        ...

    async def delete_for_user(self, user_id: UUID, recipe_id: UUID) -> bool:
        """Delete a user's like of a recipe."""
        ...
