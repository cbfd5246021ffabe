"""Like service layer."""

from collections.abc import Callable
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from core.exceptions import LikeConflictError, PersistenceError, RecipeNotFoundError
from domain.entities.like import Like, LikeToggleResult
from domain.entities.recipe import Recipe
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger(__name__)


class LikeService:
    """Service layer for recipe likes.

    Database failures are raised as PersistenceError. A second like of the
    same recipe by the same user is rejected by the likes unique constraint
    and raised as LikeConflictError.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_recipe_like_count(self, recipe_id: UUID) -> int:
        """Count a recipe's likes."""
        try:
            async with self._uow_factory() as uow:
                return await uow.likes.count_for_recipe(recipe_id)  # type: ignore[no-any-return]
        except SQLAlchemyError as exc:
            logger.error("get_recipe_like_count_failed", recipe_id=str(recipe_id), error=str(exc))
            raise PersistenceError("get_recipe_like_count") from exc

    async def has_user_liked_recipe(self, user_id: UUID, recipe_id: UUID) -> bool:
        """Whether the user has liked the recipe."""
        try:
            async with self._uow_factory() as uow:
                return await uow.likes.has_liked(user_id, recipe_id)  # type: ignore[no-any-return]
        except SQLAlchemyError as exc:
            logger.error(
                "has_user_liked_recipe_failed",
                recipe_id=str(recipe_id),
                user_id=str(user_id),
                error=str(exc),
            )
            raise PersistenceError("has_user_liked_recipe") from exc

    async def get_recipe_likes(self, recipe_id: UUID) -> list[Like]:
        """All like rows of a recipe, newest first."""
        try:
            async with self._uow_factory() as uow:
                return await uow.likes.get_for_recipe(recipe_id)  # type: ignore[no-any-return]
        except SQLAlchemyError as exc:
            logger.error("get_recipe_likes_failed", recipe_id=str(recipe_id), error=str(exc))
            raise PersistenceError("get_recipe_likes") from exc

    async def like_recipe(self, user_id: UUID, recipe_id: UUID) -> Like:
        """Insert a like."""
        try:
            async with self._uow_factory() as uow:
                if await uow.recipes.get_owner_id(recipe_id) is None:
                    raise RecipeNotFoundError(str(recipe_id))

                like = await uow.likes.create(Like(user_id=user_id, recipe_id=recipe_id))
                await uow.commit()
        except IntegrityError as exc:
            raise LikeConflictError(str(recipe_id)) from exc
        except SQLAlchemyError as exc:
            logger.error("like_recipe_failed", recipe_id=str(recipe_id), error=str(exc))
            raise PersistenceError("like_recipe") from exc
        return like

    async def unlike_recipe(self, user_id: UUID, recipe_id: UUID) -> bool:
        """Remove a like. Returns False if there was none."""
        try:
            async with self._uow_factory() as uow:
                deleted = await uow.likes.delete_for_user(user_id, recipe_id)
                await uow.commit()
        except SQLAlchemyError as exc:
            logger.error("unlike_recipe_failed", recipe_id=str(recipe_id), error=str(exc))
            raise PersistenceError("unlike_recipe") from exc
        return deleted  # type: ignore[no-any-return]

    async def toggle_recipe_like(self, user_id: UUID, recipe_id: UUID) -> LikeToggleResult:
        """Flip the user's like on a recipe and report the new count.

        This is a read followed by a write followed by a second read, not one
        atomic statement. Two concurrent toggles by the same user can both
        observe the same starting state: one then fails with LikeConflictError
        or both delete, and ``like_count`` may already be stale when returned.
        """
        try:
            async with self._uow_factory() as uow:
                if await uow.recipes.get_owner_id(recipe_id) is None:
                    raise RecipeNotFoundError(str(recipe_id))

                if await uow.likes.has_liked(user_id, recipe_id):
                    await uow.likes.delete_for_user(user_id, recipe_id)
                    liked = False
                else:
                    await uow.likes.create(Like(user_id=user_id, recipe_id=recipe_id))
                    liked = True
                await uow.commit()

                like_count = await uow.likes.count_for_recipe(recipe_id)
        except IntegrityError as exc:
            logger.warning(
                "like_toggle_conflict", recipe_id=str(recipe_id), user_id=str(user_id)
            )
            raise LikeConflictError(str(recipe_id)) from exc
        except SQLAlchemyError as exc:
            logger.error("toggle_recipe_like_failed", recipe_id=str(recipe_id), error=str(exc))
            raise PersistenceError("toggle_recipe_like") from exc

        logger.info(
            "recipe_like_toggled",
            recipe_id=str(recipe_id),
            user_id=str(user_id),
            liked=liked,
        )
        return LikeToggleResult(liked=liked, like_count=like_count)

    async def get_user_liked_recipes(self, user_id: UUID) -> list[Recipe]:
        """Recipes the user liked, most recent like first."""
        try:
            async with self._uow_factory() as uow:
                return await uow.recipes.get_liked_by_user(user_id)  # type: ignore[no-any-return]
        except SQLAlchemyError as exc:
            logger.error("get_user_liked_recipes_failed", user_id=str(user_id), error=str(exc))
            raise PersistenceError("get_user_liked_recipes") from exc
