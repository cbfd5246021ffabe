"""Process-wide service factories shared by the auth dependencies and API v1."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.profile_service import ProfileService
from infrastructure.auth.supabase_auth import SupabaseAuthAPI
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(get_uow_factory())


@lru_cache
def get_supabase_auth_api() -> SupabaseAuthAPI:
    """Get the process-wide Supabase auth HTTP client."""
    return SupabaseAuthAPI(
        base_url=settings.supabase_auth_url,
        anon_key=settings.supabase_anon_key,
        timeout=settings.auth_timeout_seconds,
    )
