"""Recipe stats repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.like import RecipeStats


class IStatsRepository(Protocol):
    """Read-only access to the recipe_stats view."""

    async def get(self, recipe_id: UUID) -> RecipeStats | None:
        """Get stats for one recipe."""
        ...

    async def list_page(self, limit: int, offset: int) -> list[RecipeStats]:
        """Get stats rows, newest recipe first."""
        ...

    async def get_for_recipes(self, recipe_ids: list[UUID]) -> list[RecipeStats]:
        """Get stats for several recipes. Order is not guaranteed."""
        ...
