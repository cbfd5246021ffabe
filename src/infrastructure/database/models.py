"""SQLAlchemy ORM models and read-only view tables."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ProfileModel(Base):
    """User profile model (one row per Supabase auth user)."""

    __tablename__ = "profiles"

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    username: Mapped[str | None] = mapped_column(String(50))
    full_name: Mapped[str | None] = mapped_column(String(100))
    bio: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    recipes: Mapped[list["RecipeModel"]] = relationship(
        "RecipeModel",
        back_populates="user",
        cascade="all, delete-orphan",
    )


class RecipeModel(Base):
    """Recipe model."""

    __tablename__ = "recipes"
    __table_args__ = (
        CheckConstraint(
            "difficulty IN ('easy', 'medium', 'hard')",
            name="ck_recipes_difficulty",
        ),
        CheckConstraint(
            "cooking_time IS NULL OR cooking_time > 0",
            name="ck_recipes_cooking_time",
        ),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    ingredients: Mapped[str] = mapped_column(Text, nullable=False)
    cooking_time: Mapped[int | None] = mapped_column(Integer)
    difficulty: Mapped[str] = mapped_column(String(10), nullable=False, default="medium")
    category: Mapped[str | None] = mapped_column(String(50), index=True)
    instructions: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)

    # Relationships
    user: Mapped["ProfileModel"] = relationship("ProfileModel", back_populates="recipes")
    comments: Mapped[list["CommentModel"]] = relationship(
        "CommentModel",
        back_populates="recipe",
        cascade="all, delete-orphan",
    )
    likes: Mapped[list["LikeModel"]] = relationship(
        "LikeModel",
        back_populates="recipe",
        cascade="all, delete-orphan",
    )


class CommentModel(Base):
    """Comment model."""

    __tablename__ = "comments"
    __table_args__ = (
        CheckConstraint(
            "length(content) BETWEEN 1 AND 1000",
            name="ck_comments_content_length",
        ),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    recipe_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("recipes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Deprecated: comments are flat, nothing writes this column
    parent_id: Mapped[UUID | None] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("comments.id", ondelete="CASCADE"),
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    recipe: Mapped["RecipeModel"] = relationship("RecipeModel", back_populates="comments")


class LikeModel(Base):
    """Like model. The unique constraint is the only guard against double likes."""

    __tablename__ = "likes"
    __table_args__ = (UniqueConstraint("user_id", "recipe_id", name="uq_likes_user_recipe"),)

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    recipe_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("recipes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    recipe: Mapped["RecipeModel"] = relationship("RecipeModel", back_populates="likes")


# Views live on their own MetaData so Base.metadata.create_all never
# creates them as tables. They are created by migrations from the SQL below.
view_metadata = MetaData()

recipe_stats_view = Table(
    "recipe_stats",
    view_metadata,
    Column("recipe_id", PG_UUID(as_uuid=True), primary_key=True),
    Column("title", String(255)),
    Column("like_count", Integer),
    Column("comment_count", Integer),
    Column("created_at", DateTime),
)

comments_with_users_view = Table(
    "comments_with_users",
    view_metadata,
    Column("id", PG_UUID(as_uuid=True), primary_key=True),
    Column("created_at", DateTime),
    Column("updated_at", DateTime),
    Column("content", Text),
    Column("parent_id", PG_UUID(as_uuid=True)),
    Column("recipe_id", PG_UUID(as_uuid=True)),
    Column("user_id", PG_UUID(as_uuid=True)),
    Column("username", String(50)),
    Column("full_name", String(100)),
)

RECIPE_STATS_VIEW_SQL = """
CREATE VIEW recipe_stats AS
SELECT
    r.id AS recipe_id,
    r.title AS title,
    (SELECT COUNT(*) FROM likes l WHERE l.recipe_id = r.id) AS like_count,
    (SELECT COUNT(*) FROM comments c WHERE c.recipe_id = r.id) AS comment_count,
    r.created_at AS created_at
FROM recipes r
"""

COMMENTS_WITH_USERS_VIEW_SQL = """
CREATE VIEW comments_with_users AS
SELECT
    c.id,
    c.created_at,
    c.updated_at,
    c.content,
    c.parent_id,
    c.recipe_id,
    c.user_id,
    p.username,
    p.full_name
FROM comments c
LEFT JOIN profiles p ON p.id = c.user_id
"""
