"""Pydantic schemas for recipe stats API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class RecipeStatsResponse(BaseModel):
    """One row of the recipe_stats view."""

    recipe_id: UUID
    title: str
    like_count: int
    comment_count: int
    created_at: datetime


class RecipeStatsDetailResponse(BaseModel):
    data: RecipeStatsResponse


class RecipeStatsListResponse(BaseModel):
    data: list[RecipeStatsResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class RecipeStatsLookup(BaseModel):
    """Schema for a batch stats lookup."""

    recipe_ids: list[UUID] = Field(default_factory=list, max_length=100)
