"""Comment service layer."""

from collections.abc import Callable
from uuid import UUID

import structlog
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import (
    CommentNotFoundError,
    CommentValidationError,
    PersistenceError,
    RecipeNotFoundError,
)
from domain.entities.comment import (
    COMMENT_MAX_LENGTH,
    Comment,
    CommentWithUser,
    comment_length_ok,
)
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger(__name__)


def _validate_content(content: str) -> None:
    if not comment_length_ok(content):
        raise CommentValidationError(len(content), COMMENT_MAX_LENGTH)


class CommentService:
    """Service layer for recipe comments.

    Database failures are raised as PersistenceError.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_recipe_comments(self, recipe_id: UUID) -> list[CommentWithUser]:
        """Get a recipe's comments with author names, oldest first."""
        try:
            async with self._uow_factory() as uow:
                return await uow.comments.get_for_recipe(recipe_id)  # type: ignore[no-any-return]
        except SQLAlchemyError as exc:
            logger.error("get_recipe_comments_failed", recipe_id=str(recipe_id), error=str(exc))
            raise PersistenceError("get_recipe_comments") from exc

    async def get_recipe_comment_count(self, recipe_id: UUID) -> int:
        """Count a recipe's comments."""
        try:
            async with self._uow_factory() as uow:
                return await uow.comments.count_for_recipe(recipe_id)  # type: ignore[no-any-return]
        except SQLAlchemyError as exc:
            logger.error(
                "get_recipe_comment_count_failed", recipe_id=str(recipe_id), error=str(exc)
            )
            raise PersistenceError("get_recipe_comment_count") from exc

    async def create_comment(self, user_id: UUID, recipe_id: UUID, content: str) -> Comment:
        """Create a top-level comment on a recipe."""
        _validate_content(content)
        try:
            async with self._uow_factory() as uow:
                if await uow.recipes.get_owner_id(recipe_id) is None:
                    raise RecipeNotFoundError(str(recipe_id))

                created = await uow.comments.create(
                    Comment(user_id=user_id, recipe_id=recipe_id, content=content)
                )
                await uow.commit()
        except SQLAlchemyError as exc:
            logger.error("create_comment_failed", recipe_id=str(recipe_id), error=str(exc))
            raise PersistenceError("create_comment") from exc

        logger.info("comment_created", comment_id=str(created.id), recipe_id=str(recipe_id))
        return created

    async def update_comment(self, comment_id: UUID, user_id: UUID, content: str) -> Comment:
        """Replace a comment's content. Author only."""
        _validate_content(content)
        try:
            async with self._uow_factory() as uow:
                comment = await uow.comments.get(comment_id)
                if comment is None or comment.user_id != user_id:
                    raise CommentNotFoundError(str(comment_id))

                comment.edit(content)
                updated = await uow.comments.update(comment)
                await uow.commit()
        except SQLAlchemyError as exc:
            logger.error("update_comment_failed", comment_id=str(comment_id), error=str(exc))
            raise PersistenceError("update_comment") from exc

        return updated

    async def delete_comment(self, comment_id: UUID, user_id: UUID) -> bool:
        """Delete a comment. Author only."""
        try:
            async with self._uow_factory() as uow:
                comment = await uow.comments.get(comment_id)
                if comment is None or comment.user_id != user_id:
                    raise CommentNotFoundError(str(comment_id))

                deleted = await uow.comments.delete(comment_id)
                await uow.commit()
        except SQLAlchemyError as exc:
            logger.error("delete_comment_failed", comment_id=str(comment_id), error=str(exc))
            raise PersistenceError("delete_comment") from exc

        logger.info("comment_deleted", comment_id=str(comment_id))
        return deleted  # type: ignore[no-any-return]
