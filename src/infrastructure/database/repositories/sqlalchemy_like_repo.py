"""SQLAlchemy implementation of Like repository."""

from uuid import UUID

from sqlalchemy import Boolean, Integer, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.like import Like
from infrastructure.database.models import LikeModel


class SQLAlchemyLikeRepository:
    """SQLAlchemy implementation of ILikeRepository.

    Counts and existence checks go through the server-side functions so they
    see the same numbers as the recipe_stats view.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_for_recipe(self, recipe_id: UUID) -> list[Like]:
        """Get all likes of a recipe, newest first."""
        stmt = (
            select(LikeModel)
            .where(LikeModel.recipe_id == recipe_id)
            .order_by(LikeModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def count_for_recipe(self, recipe_id: UUID) -> int:
        """Count likes with the get_recipe_like_count server function."""
        stmt = select(func.get_recipe_like_count(recipe_id, type_=Integer))
        result = await self._session.execute(stmt)
        return result.scalar() or 0

    async def has_liked(self, user_id: UUID, recipe_id: UUID) -> bool:
        """Check a like with the has_user_liked_recipe server function."""
        stmt = select(func.has_user_liked_recipe(recipe_id, user_id, type_=Boolean))
        result = await self._session.execute(stmt)
        return bool(result.scalar())

    async def create(self, like: Like) -> Like:
        """Insert a like. The unique constraint rejects a second one."""
        model = self._to_model(like)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def delete_for_user(self, user_id: UUID, recipe_id: UUID) -> bool:
        """Delete a user's like of a recipe."""
        stmt = delete(LikeModel).where(
            LikeModel.user_id == user_id,
            LikeModel.recipe_id == recipe_id,
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0

    def _to_entity(self, model: LikeModel) -> Like:
        """Convert ORM model to domain entity."""
        return Like(
            id=model.id,
            user_id=model.user_id,
            recipe_id=model.recipe_id,
            created_at=model.created_at,
        )

    def _to_model(self, entity: Like) -> LikeModel:
        """Convert domain entity to ORM model."""
        return LikeModel(
            id=entity.id,
            user_id=entity.user_id,
            recipe_id=entity.recipe_id,
            created_at=entity.created_at,
        )
