"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.comment_repository import ICommentRepository
from domain.repositories.like_repository import ILikeRepository
from domain.repositories.profile_repository import IProfileRepository
from domain.repositories.recipe_repository import IRecipeRepository
from domain.repositories.stats_repository import IStatsRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface for managing transactions."""

    profiles: IProfileRepository
    recipes: IRecipeRepository
    comments: ICommentRepository
    likes: ILikeRepository
    stats: IStatsRepository

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...
