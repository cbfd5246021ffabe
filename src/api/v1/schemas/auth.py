"""Pydantic schemas for auth and profile API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from api.v1.schemas.common import blank_to_none
from domain.entities.profile import Profile


class SignInRequest(BaseModel):
    """Schema for email/password sign-in."""

    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Invalid email address")
        return v


class SignUpRequest(SignInRequest):
    """Schema for account creation. username/full_name go into user metadata."""

    password: str = Field(..., min_length=6)
    username: str | None = Field(None, max_length=50)
    full_name: str | None = Field(None, max_length=100)

    @field_validator("username", "full_name", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> Any:
        return blank_to_none(v)


class ProfileUpdate(BaseModel):
    """Schema for updating the caller's profile."""

    model_config = ConfigDict(str_strip_whitespace=True)

    username: str | None = Field(None, max_length=50)
    full_name: str | None = Field(None, max_length=100)
    bio: str | None = None

    @field_validator("username", "full_name", "bio", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> Any:
        return blank_to_none(v)


class ProfileResponse(BaseModel):
    """Schema for Profile response."""

    id: UUID
    email: str
    username: str | None = None
    full_name: str | None = None
    bio: str | None = None
    created_at: datetime

    @classmethod
    def from_entity(cls, profile: Profile) -> "ProfileResponse":
        return cls(
            id=profile.id,
            email=profile.email,
            username=profile.username,
            full_name=profile.full_name,
            bio=profile.bio,
            created_at=profile.created_at,
        )


class ProfileDetailResponse(BaseModel):
    data: ProfileResponse


class AuthUserResponse(BaseModel):
    id: UUID
    email: str
    user_metadata: dict[str, Any] = Field(default_factory=dict)


class SessionTokens(BaseModel):
    access_token: str
    refresh_token: str | None = None
    expires_at: int | None = None
    token_type: str = "bearer"


class SessionData(BaseModel):
    """Session manager state as seen by the caller."""

    user: AuthUserResponse | None = None
    profile: ProfileResponse | None = None
    session: SessionTokens | None = None


class SessionResponse(BaseModel):
    data: SessionData


class SignUpData(BaseModel):
    """Result of a sign-up. ``confirmation_required`` means no session yet."""

    user: AuthUserResponse | None = None
    session: SessionTokens | None = None
    confirmation_required: bool


class SignUpResponse(BaseModel):
    data: SignUpData
