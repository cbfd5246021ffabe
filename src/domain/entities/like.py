"""Like and recipe stats domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class Like:
    """Domain entity for a Like. At most one per (user_id, recipe_id)."""

    user_id: UUID
    recipe_id: UUID
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass(frozen=True, slots=True)
class LikeToggleResult:
    """Like state after a toggle, as far as the follow-up count read knows."""

    liked: bool
    like_count: int


@dataclass(frozen=True, slots=True)
class RecipeStats:
    """Read-only row of the recipe_stats view."""

    recipe_id: UUID
    title: str
    like_count: int
    comment_count: int
    created_at: datetime
