"""Recipe stats service layer (reads the recipe_stats view)."""

from collections.abc import Callable
from uuid import UUID

import structlog
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import PersistenceError
from domain.entities.like import RecipeStats
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger(__name__)


class StatsService:
    """Service layer for like/comment aggregates."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_recipe_stats(self, recipe_id: UUID) -> RecipeStats | None:
        try:
            async with self._uow_factory() as uow:
                return await uow.stats.get(recipe_id)  # type: ignore[no-any-return]
        except SQLAlchemyError as exc:
            logger.error("get_recipe_stats_failed", recipe_id=str(recipe_id), error=str(exc))
            raise PersistenceError("get_recipe_stats") from exc

    async def get_recipes_with_stats(self, limit: int = 10, offset: int = 0) -> list[RecipeStats]:
        """Stats rows, newest recipe first."""
        try:
            async with self._uow_factory() as uow:
                return await uow.stats.list_page(limit=limit, offset=offset)  # type: ignore[no-any-return]
        except SQLAlchemyError as exc:
            logger.error("get_recipes_with_stats_failed", error=str(exc))
            raise PersistenceError("get_recipes_with_stats") from exc

    async def get_stats_for_recipes(self, recipe_ids: list[UUID]) -> list[RecipeStats]:
        """Stats for the given recipes, in no particular order."""
        if not recipe_ids:
            return []
        try:
            async with self._uow_factory() as uow:
                return await uow.stats.get_for_recipes(recipe_ids)  # type: ignore[no-any-return]
        except SQLAlchemyError as exc:
            logger.error("get_stats_for_recipes_failed", count=len(recipe_ids), error=str(exc))
            raise PersistenceError("get_stats_for_recipes") from exc
