"""Pydantic schemas for Comment API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from domain.entities.comment import COMMENT_MAX_LENGTH


class CommentBody(BaseModel):
    """Schema for creating or editing a Comment."""

    content: str = Field(..., min_length=1, max_length=COMMENT_MAX_LENGTH)


class CommentResponse(BaseModel):
    """Schema for Comment response. Author fields are absent on writes."""

    id: UUID
    recipe_id: UUID
    user_id: UUID
    content: str
    created_at: datetime
    updated_at: datetime
    username: str | None = None
    full_name: str | None = None


class CommentListResponse(BaseModel):
    """Schema for a recipe's comments."""

    data: list[CommentResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class CommentDetailResponse(BaseModel):
    """Schema for single Comment."""

    data: CommentResponse
