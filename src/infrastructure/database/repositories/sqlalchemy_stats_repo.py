"""SQLAlchemy implementation of the recipe stats repository."""

from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.like import RecipeStats
from infrastructure.database.models import recipe_stats_view


class SQLAlchemyStatsRepository:
    """Reads the recipe_stats view. Nothing here writes."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, recipe_id: UUID) -> RecipeStats | None:
        stmt = select(recipe_stats_view).where(recipe_stats_view.c.recipe_id == recipe_id)
        result = await self._session.execute(stmt)
        row = result.one_or_none()
        return self._to_entity(row) if row else None

    async def list_page(self, limit: int, offset: int) -> list[RecipeStats]:
        stmt = (
            select(recipe_stats_view)
            .order_by(recipe_stats_view.c.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result]

    async def get_for_recipes(self, recipe_ids: list[UUID]) -> list[RecipeStats]:
        if not recipe_ids:
            return []

        stmt = select(recipe_stats_view).where(recipe_stats_view.c.recipe_id.in_(recipe_ids))
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result]

    def _to_entity(self, row: Any) -> RecipeStats:
        return RecipeStats(
            recipe_id=row.recipe_id,
            title=row.title,
            like_count=row.like_count or 0,
            comment_count=row.comment_count or 0,
            created_at=row.created_at,
        )
