"""Pydantic schemas for Recipe API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from api.v1.schemas.common import blank_to_none
from domain.entities.recipe import Recipe, RecipeDifficulty


class RecipeCreate(BaseModel):
    """Schema for creating a Recipe. The owner is the authenticated user."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    ingredients: str = Field(..., min_length=1)
    instructions: str = Field(..., min_length=1)
    cooking_time: int | None = Field(None, gt=0, description="Minutes")
    difficulty: RecipeDifficulty = RecipeDifficulty.MEDIUM
    category: str | None = Field(None, max_length=50)

    @field_validator("description", "category", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> Any:
        return blank_to_none(v)


class RecipeUpdate(BaseModel):
    """Schema for a partial Recipe update. Only sent fields change."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    ingredients: str | None = Field(None, min_length=1)
    instructions: str | None = Field(None, min_length=1)
    cooking_time: int | None = Field(None, gt=0)
    difficulty: RecipeDifficulty | None = None
    category: str | None = Field(None, max_length=50)

    @field_validator("description", "category", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> Any:
        return blank_to_none(v)

    @field_validator("title", "ingredients", "instructions", "difficulty")
    @classmethod
    def not_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("field cannot be null")
        return v


class RecipeOwnerResponse(BaseModel):
    """Recipe owner display fields."""

    username: str | None = None
    full_name: str | None = None


class RecipeResponse(BaseModel):
    """Schema for Recipe response."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "user_id": "456e4567-e89b-12d3-a456-426614174000",
                "title": "Chocolate Cake",
                "description": None,
                "ingredients": "flour\nsugar\ncocoa",
                "cooking_time": 45,
                "difficulty": "medium",
                "category": "dessert",
                "instructions": "Mix and bake.",
                "created_at": "2026-01-28T10:00:00",
                "owner": {"username": "baker", "full_name": "Bea Baker"},
            }
        },
    )

    id: UUID
    user_id: UUID
    title: str
    description: str | None = None
    ingredients: str
    cooking_time: int | None = None
    difficulty: RecipeDifficulty
    category: str | None = None
    instructions: str
    created_at: datetime
    owner: RecipeOwnerResponse | None = None

    @classmethod
    def from_entity(cls, recipe: Recipe) -> "RecipeResponse":
        owner = None
        if recipe.owner:
            owner = RecipeOwnerResponse(
                username=recipe.owner.username,
                full_name=recipe.owner.full_name,
            )
        return cls(
            id=recipe.id,
            user_id=recipe.user_id,
            title=recipe.title,
            description=recipe.description,
            ingredients=recipe.ingredients,
            cooking_time=recipe.cooking_time,
            difficulty=recipe.difficulty,
            category=recipe.category,
            instructions=recipe.instructions,
            created_at=recipe.created_at,
            owner=owner,
        )


class RecipeListResponse(BaseModel):
    """Schema for a list of Recipes."""

    data: list[RecipeResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class RecipeDetailResponse(BaseModel):
    """Schema for single Recipe."""

    data: RecipeResponse
