"""SQLAlchemy implementation of Comment repository."""

from uuid import UUID

from sqlalchemy import Integer, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.comment import Comment, CommentWithUser
from infrastructure.database.models import CommentModel, comments_with_users_view


class SQLAlchemyCommentRepository:
    """SQLAlchemy implementation of ICommentRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Comment | None:
        """Get a comment by ID."""
        stmt = select(CommentModel).where(CommentModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_for_recipe(self, recipe_id: UUID) -> list[CommentWithUser]:
        """Get a recipe's comments from the comments_with_users view, oldest first."""
        view = comments_with_users_view
        stmt = (
            select(view)
            .where(view.c.recipe_id == recipe_id)
            .order_by(view.c.created_at.asc())
        )
        result = await self._session.execute(stmt)
        return [
            CommentWithUser(
                id=row.id,
                recipe_id=row.recipe_id,
                user_id=row.user_id,
                content=row.content,
                created_at=row.created_at,
                updated_at=row.updated_at,
                parent_id=row.parent_id,
                username=row.username,
                full_name=row.full_name,
            )
            for row in result
        ]

    async def count_for_recipe(self, recipe_id: UUID) -> int:
        """Count comments with the get_recipe_comment_count server function."""
        stmt = select(func.get_recipe_comment_count(recipe_id, type_=Integer))
        result = await self._session.execute(stmt)
        return result.scalar() or 0

    async def create(self, comment: Comment) -> Comment:
        """Create a new comment."""
        model = self._to_model(comment)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, comment: Comment) -> Comment:
        """Update a comment's content."""
        stmt = select(CommentModel).where(CommentModel.id == comment.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Comment {comment.id} not found")

        model.content = comment.content
        model.updated_at = comment.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a comment."""
        stmt = select(CommentModel).where(CommentModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    def _to_entity(self, model: CommentModel) -> Comment:
        """Convert ORM model to domain entity."""
        return Comment(
            id=model.id,
            user_id=model.user_id,
            recipe_id=model.recipe_id,
            content=model.content,
            parent_id=model.parent_id,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Comment) -> CommentModel:
        """Convert domain entity to ORM model. parent_id is never written."""
        return CommentModel(
            id=entity.id,
            user_id=entity.user_id,
            recipe_id=entity.recipe_id,
            content=entity.content,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
