"""Auth client protocol consumed by the session manager."""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from domain.entities.session import AuthChangeEvent, AuthSession, SignUpOutcome

AuthStateListener = Callable[[AuthChangeEvent, AuthSession | None], Awaitable[None]]


class IAuthSubscription(Protocol):
    """Handle returned by on_auth_state_change."""

    def unsubscribe(self) -> None:
        """Stop delivering events to the listener."""
        ...


class IAuthClient(Protocol):
    """One consumer's view of the authentication provider."""

    async def get_session(self) -> AuthSession | None:
        """Get the current session, if any."""
        ...

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Sign in and publish SIGNED_IN."""
        ...

    async def sign_up(
        self, email: str, password: str, data: dict[str, Any] | None = None
    ) -> SignUpOutcome:
        """Create an account with user metadata."""
        ...

    async def sign_out(self) -> None:
        """Revoke the current session and publish SIGNED_OUT."""
        ...

    def on_auth_state_change(self, listener: AuthStateListener) -> IAuthSubscription:
        """Subscribe to session change events."""
        ...
