"""SQLAlchemy implementation of Profile repository."""

from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import Profile
from infrastructure.database.models import ProfileModel

logger = structlog.get_logger(__name__)


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by its auth user ID."""
        stmt = select(ProfileModel).where(ProfileModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create_if_absent(self, profile: Profile) -> Profile:
        """Insert a profile unless one exists for the same ID.

        The signup trigger usually creates the row first. A conflicting insert
        is rolled back to a savepoint and the stored row is returned instead.
        """
        existing = await self.get(profile.id)
        if existing:
            return existing

        try:
            async with self._session.begin_nested():
                self._session.add(self._to_model(profile))
        except IntegrityError:
            logger.info("profile_already_exists", user_id=str(profile.id))
            existing = await self.get(profile.id)
            if existing is None:
                raise
            return existing

        return profile

    async def update(self, profile: Profile) -> Profile:
        """Update the editable columns of a profile."""
        stmt = select(ProfileModel).where(ProfileModel.id == profile.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Profile {profile.id} not found")

        model.username = profile.username
        model.full_name = profile.full_name
        model.bio = profile.bio

        await self._session.flush()
        return self._to_entity(model)

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            email=model.email,
            username=model.username,
            full_name=model.full_name,
            bio=model.bio,
            created_at=model.created_at,
        )

    def _to_model(self, entity: Profile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            id=entity.id,
            email=entity.email,
            username=entity.username,
            full_name=entity.full_name,
            bio=entity.bio,
            created_at=entity.created_at,
        )
