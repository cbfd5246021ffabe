"""Pydantic schemas for Like API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class LikeResponse(BaseModel):
    """Schema for a Like row."""

    id: UUID
    user_id: UUID
    recipe_id: UUID
    created_at: datetime


class LikeListResponse(BaseModel):
    """A recipe's likes plus the aggregate count and the caller's state."""

    data: list[LikeResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class LikeToggleData(BaseModel):
    liked: bool
    like_count: int


class LikeToggleResponse(BaseModel):
    """Schema for the result of a like toggle."""

    data: LikeToggleData
