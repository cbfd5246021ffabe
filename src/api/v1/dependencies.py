"""Dependency injection factories for API v1."""

from functools import lru_cache

from api.dependencies.services import get_uow_factory
from domain.services.comment_service import CommentService
from domain.services.like_service import LikeService
from domain.services.recipe_service import RecipeService
from domain.services.stats_service import StatsService


@lru_cache
def get_recipe_service() -> RecipeService:
    """Get Recipe service instance."""
    return RecipeService(get_uow_factory())


@lru_cache
def get_comment_service() -> CommentService:
    """Get Comment service instance."""
    return CommentService(get_uow_factory())


@lru_cache
def get_like_service() -> LikeService:
    """Get Like service instance."""
    return LikeService(get_uow_factory())


@lru_cache
def get_stats_service() -> StatsService:
    """Get recipe stats service instance."""
    return StatsService(get_uow_factory())
