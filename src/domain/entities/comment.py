"""Comment domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

COMMENT_MAX_LENGTH = 1000


def comment_length_ok(content: str) -> bool:
    """Check content against the comments.content length bounds."""
    return 1 <= len(content) <= COMMENT_MAX_LENGTH


@dataclass
class Comment:
    """Domain entity for a Comment.

    ``parent_id`` is a deprecated column. Comments are always flat and the
    service never writes it.
    """

    user_id: UUID
    recipe_id: UUID
    content: str
    id: UUID = field(default_factory=uuid4)
    parent_id: UUID | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def edit(self, content: str) -> None:
        """Replace the content and bump updated_at."""
        self.content = content
        self.updated_at = datetime.utcnow()

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at


@dataclass(frozen=True, slots=True)
class CommentWithUser:
    """Read-only row of the comments_with_users view."""

    id: UUID
    recipe_id: UUID
    user_id: UUID
    content: str
    created_at: datetime
    updated_at: datetime
    parent_id: UUID | None = None
    username: str | None = None
    full_name: str | None = None
