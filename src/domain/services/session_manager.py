"""Scoped authentication session state.

An ``AuthSessionManager`` owns the signed-in user, their profile and the
provider session for one consumer (one HTTP request, one CLI run, one test).
There is no process-wide session: create a manager, ``start()`` it, and
``close()`` it when done, or use it as an async context manager::

    async with AuthSessionManager(client, profiles) as auth:
        result = await auth.sign_in(email, password)
        if not result.ok:
            ...
"""

from typing import Any, Optional

import structlog

from core.exceptions import AppException
from domain.entities.profile import Profile
from domain.entities.session import AuthChangeEvent, AuthResult, AuthSession, AuthUser
from domain.repositories.auth_client import IAuthClient, IAuthSubscription
from domain.services.profile_service import ProfileService

logger = structlog.get_logger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


class AuthSessionManager:
    """Tracks user, profile, session and loading state for one consumer."""

    def __init__(self, auth_client: IAuthClient, profile_service: ProfileService) -> None:
        self._auth = auth_client
        self._profiles = profile_service
        self._subscription: Optional[IAuthSubscription] = None
        self._closed = False

        self.user: AuthUser | None = None
        self.profile: Profile | None = None
        self.session: AuthSession | None = None
        self.loading = True

    async def start(self) -> "AuthSessionManager":
        """Load the existing session and subscribe to auth changes."""
        self.loading = True
        try:
            await self._apply_session(await self._auth.get_session())
        except AppException as exc:
            logger.warning("auth_session_load_failed", error=exc.message)
            await self._apply_session(None)
        finally:
            self.loading = False

        self._subscription = self._auth.on_auth_state_change(self._on_auth_state_change)
        return self

    async def close(self) -> None:
        """Unsubscribe from the auth client. Later events are ignored."""
        self._closed = True
        if self._subscription:
            self._subscription.unsubscribe()
            self._subscription = None

    async def __aenter__(self) -> "AuthSessionManager":
        return await self.start()

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def sign_in(self, email: str, password: str) -> AuthResult:
        """Sign in with email and password."""
        try:
            await self._auth.sign_in_with_password(email, password)
        except AppException as exc:
            logger.info("sign_in_failed", error=exc.message)
            return AuthResult.failure(exc.message)
        except Exception:
            logger.exception("sign_in_unexpected_error")
            return AuthResult.failure(UNEXPECTED_ERROR_MESSAGE)
        return AuthResult()

    async def sign_up(
        self, email: str, password: str, user_data: dict[str, Any] | None = None
    ) -> AuthResult:
        """Create an account, then make sure its profile row exists.

        The database trigger normally creates the profile. The insert here is a
        no-op when the row is already there, and a failure is only logged.
        """
        user_data = user_data or {}
        try:
            outcome = await self._auth.sign_up(email, password, data=user_data)
        except AppException as exc:
            logger.info("sign_up_failed", error=exc.message)
            return AuthResult.failure(exc.message)
        except Exception:
            logger.exception("sign_up_unexpected_error")
            return AuthResult.failure(UNEXPECTED_ERROR_MESSAGE)

        if outcome.user:
            try:
                profile = await self._profiles.ensure_profile(
                    user_id=outcome.user.id,
                    email=email,
                    username=user_data.get("username"),
                    full_name=user_data.get("full_name"),
                )
            except Exception as exc:
                logger.warning(
                    "profile_fallback_insert_failed",
                    user_id=str(outcome.user.id),
                    error=str(exc),
                )
            else:
                # SIGNED_IN fired before the row existed
                if self.user and self.user.id == profile.id and self.profile is None:
                    self.profile = profile
        return AuthResult()

    async def sign_out(self) -> None:
        """Revoke the session at the provider and clear local state."""
        await self._auth.sign_out()
        await self._apply_session(None)

    async def update_profile(self, updates: dict[str, Any]) -> AuthResult:
        """Update the current user's profile and keep the stored row."""
        if self.user is None:
            return AuthResult.failure("No user logged in")

        try:
            self.profile = await self._profiles.update_profile(self.user.id, updates)
        except AppException as exc:
            logger.warning("update_profile_failed", user_id=str(self.user.id), error=exc.message)
            return AuthResult.failure(exc.message)
        except Exception:
            logger.exception("update_profile_unexpected_error", user_id=str(self.user.id))
            return AuthResult.failure(UNEXPECTED_ERROR_MESSAGE)
        return AuthResult()

    async def _on_auth_state_change(
        self, event: AuthChangeEvent, session: AuthSession | None
    ) -> None:
        if self._closed:
            return
        logger.debug("auth_state_changed", auth_event=event.value)
        await self._apply_session(session)

    async def _apply_session(self, session: AuthSession | None) -> None:
        self.session = session
        self.user = session.user if session else None
        self.profile = await self._resolve_profile() if self.user else None

    async def _resolve_profile(self) -> Profile | None:
        assert self.user is not None
        try:
            return await self._profiles.get_profile(self.user.id)
        except AppException as exc:
            logger.warning("profile_fetch_failed", user_id=str(self.user.id), error=exc.message)
            return None
