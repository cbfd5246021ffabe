"""Profile service layer."""

from collections.abc import Callable
from dataclasses import replace
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import PersistenceError, ProfileNotFoundError
from domain.entities.profile import EDITABLE_PROFILE_FIELDS, Profile
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger(__name__)


class ProfileService:
    """Service layer for user profiles."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_profile(self, user_id: UUID) -> Profile | None:
        """Look a profile up by its auth user ID."""
        try:
            async with self._uow_factory() as uow:
                return await uow.profiles.get(user_id)  # type: ignore[no-any-return]
        except SQLAlchemyError as exc:
            logger.error("get_profile_failed", user_id=str(user_id), error=str(exc))
            raise PersistenceError("get_profile") from exc

    async def ensure_profile(
        self,
        user_id: UUID,
        email: str,
        username: str | None = None,
        full_name: str | None = None,
    ) -> Profile:
        """Insert the profile row if the signup trigger has not already done so."""
        profile = Profile(id=user_id, email=email, username=username, full_name=full_name)
        try:
            async with self._uow_factory() as uow:
                stored = await uow.profiles.create_if_absent(profile)
                await uow.commit()
        except SQLAlchemyError as exc:
            logger.error("ensure_profile_failed", user_id=str(user_id), error=str(exc))
            raise PersistenceError("ensure_profile") from exc
        return stored  # type: ignore[no-any-return]

    async def update_profile(self, user_id: UUID, updates: dict[str, Any]) -> Profile:
        """Update username/full_name/bio and return the stored row."""
        changes = {k: v for k, v in updates.items() if k in EDITABLE_PROFILE_FIELDS}
        try:
            async with self._uow_factory() as uow:
                profile = await uow.profiles.get(user_id)
                if profile is None:
                    raise ProfileNotFoundError(str(user_id))

                updated = await uow.profiles.update(replace(profile, **changes))
                await uow.commit()
        except SQLAlchemyError as exc:
            logger.error("update_profile_failed", user_id=str(user_id), error=str(exc))
            raise PersistenceError("update_profile") from exc

        logger.info("profile_updated", user_id=str(user_id), fields=sorted(changes))
        return updated  # type: ignore[no-any-return]
