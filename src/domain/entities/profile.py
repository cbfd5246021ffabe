"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

# Columns a user may change on their own profile
EDITABLE_PROFILE_FIELDS = frozenset({"username", "full_name", "bio"})


@dataclass
class Profile:
    """Application-level user record, one per Supabase auth identity.

    ``id`` is the auth user id, so the profile is looked up by primary key.
    """

    id: UUID
    email: str
    username: str | None = None
    full_name: str | None = None
    bio: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Store blank optional text as NULL."""
        self.username = self.username or None
        self.full_name = self.full_name or None
        self.bio = self.bio or None
