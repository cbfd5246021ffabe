"""Recipe domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4

# Fields a recipe owner may change after creation. user_id is not one of them.
UPDATABLE_RECIPE_FIELDS = frozenset(
    {
        "title",
        "description",
        "ingredients",
        "cooking_time",
        "difficulty",
        "category",
        "instructions",
    }
)


class RecipeDifficulty(StrEnum):
    """Difficulty labels accepted by the recipes.difficulty check constraint."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True, slots=True)
class RecipeOwner:
    """Abbreviated owner info embedded in recipe listings."""

    username: str | None = None
    full_name: str | None = None


@dataclass
class Recipe:
    """Domain entity for a Recipe."""

    user_id: UUID
    title: str
    ingredients: str
    instructions: str
    id: UUID = field(default_factory=uuid4)
    description: str | None = None
    cooking_time: int | None = None
    difficulty: RecipeDifficulty = RecipeDifficulty.MEDIUM
    category: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    owner: RecipeOwner | None = None

    def __post_init__(self) -> None:
        """Normalize optional text to NULL and validate difficulty/cooking time."""
        self.description = self.description or None
        self.category = self.category or None
        self.difficulty = RecipeDifficulty(self.difficulty)
        if self.cooking_time is not None and self.cooking_time <= 0:
            raise ValueError("cooking_time must be a positive number of minutes")


@dataclass(frozen=True, slots=True)
class RecipeFilters:
    """Optional equality/range filters for recipe search."""

    category: str | None = None
    difficulty: RecipeDifficulty | None = None
    max_cooking_time: int | None = None


@dataclass(frozen=True, slots=True)
class RecipePage:
    """One page of recipes plus the total number of recipes."""

    recipes: list[Recipe]
    count: int

    @classmethod
    def empty(cls) -> "RecipePage":
        return cls(recipes=[], count=0)
