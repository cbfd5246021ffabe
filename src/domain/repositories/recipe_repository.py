"""Recipe repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.recipe import Recipe, RecipeFilters


class IRecipeRepository(Protocol):
    """Repository interface for Recipe entities."""

    async def get(self, id: UUID) -> Recipe | None:
        """Get a recipe by ID, with owner info."""
        ...

    async def get_owner_id(self, id: UUID) -> UUID | None:
        """Get only the owner ID of a recipe."""
        ...

    async def list_page(self, offset: int, limit: int) -> list[Recipe]:
        """Get a page of recipes, newest first, with owner info."""
        ...

    async def count(self) -> int:
        """Count all recipes."""
        ...

    async def get_all_for_user(self, user_id: UUID) -> list[Recipe]:
        """Get all recipes owned by a user, newest first."""
        ...

    async def search(self, query: str, filters: RecipeFilters) -> list[Recipe]:
        """Case-insensitive text search combined with equality/range filters."""
        ...

    async def get_liked_by_user(self, user_id: UUID) -> list[Recipe]:
        """Get recipes a user liked, most recently liked first."""
        ...

    async def create(self, recipe: Recipe) -> Recipe:
        """Create a new recipe."""
        ...

    async def update(self, recipe: Recipe) -> Recipe:
        """Update an existing recipe (never its owner)."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a recipe with its comments and likes."""
        ...
