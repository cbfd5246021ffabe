"""Bearer token validation protocol."""

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol
from uuid import UUID


@dataclass
class TokenUser:
    """The caller identified by a validated access token."""

    id: UUID
    email: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    role: Optional[str] = None
    user_metadata: dict[str, Any] = field(default_factory=dict)


class IAuthProvider(Protocol):
    """Protocol for access token validators."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate an access token.

        Args:
            token: The bearer token to validate

        Returns:
            TokenUser if valid, None if invalid
        """
        ...

    def create_token(self, user: TokenUser) -> str:
        """
        Create an access token for a user.

        Args:
            user: The user to create a token for

        Returns:
            The generated token string
        """
        ...
