"""Profile repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for Profile entities."""

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by its auth user ID."""
        ...

    async def create_if_absent(self, profile: Profile) -> Profile:
        """Insert the profile unless a row with its ID exists; return the stored row."""
        ...

    async def update(self, profile: Profile) -> Profile:
        """Update an existing profile."""
        ...
