"""Auth session domain entities (mirrors of the Supabase auth payloads)."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any
from uuid import UUID


class AuthChangeEvent(StrEnum):
    """Session change notifications published by the auth client."""

    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"


@dataclass(frozen=True, slots=True)
class AuthUser:
    """An authentication identity. ``id`` doubles as the profile primary key."""

    id: UUID
    email: str
    user_metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "AuthUser":
        return cls(
            id=UUID(payload["id"]),
            email=payload.get("email") or "",
            user_metadata=payload.get("user_metadata") or {},
        )


@dataclass(frozen=True, slots=True)
class AuthSession:
    """Tokens issued by the auth provider for one signed-in user."""

    access_token: str
    user: AuthUser
    refresh_token: str | None = None
    expires_at: int | None = None
    token_type: str = "bearer"

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "AuthSession":
        return cls(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token"),
            expires_at=payload.get("expires_at"),
            token_type=payload.get("token_type", "bearer"),
            user=AuthUser.from_payload(payload["user"]),
        )


@dataclass(frozen=True, slots=True)
class SignUpOutcome:
    """Result of an account creation.

    ``session`` is None when the project requires email confirmation.
    """

    user: AuthUser | None
    session: AuthSession | None = None


@dataclass(frozen=True, slots=True)
class AuthError:
    """Error descriptor returned instead of raising across the session boundary."""

    message: str


@dataclass(frozen=True, slots=True)
class AuthResult:
    """Outcome of a session manager operation, discriminated by ``error``."""

    error: AuthError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, message: str) -> "AuthResult":
        return cls(error=AuthError(message=message))
