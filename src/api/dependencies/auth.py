"""Authentication dependencies for FastAPI."""

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.dependencies.services import get_profile_service, get_supabase_auth_api
from core.exceptions import AuthenticationError, ErrorCode
from domain.entities.session import AuthSession, AuthUser
from domain.services.profile_service import ProfileService
from domain.services.session_manager import AuthSessionManager
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.auth.supabase_auth import SupabaseAuthAPI, SupabaseAuthClient

# Security scheme for OpenAPI docs
security = HTTPBearer(auto_error=False)

_auth_provider: JWTAuthProvider | None = None


def get_auth_provider() -> JWTAuthProvider:
    """Get or create the token validator singleton."""
    global _auth_provider
    if _auth_provider is None:
        _auth_provider = JWTAuthProvider()
    return _auth_provider


async def get_current_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> TokenUser:
    """
    Dependency to get the current authenticated user.

    Raises:
        AuthenticationError: If no token provided or token is invalid
    """
    if not credentials:
        raise AuthenticationError(
            message="Authorization header required",
            error_code=ErrorCode.UNAUTHORIZED,
        )

    user = await auth_provider.validate_token(credentials.credentials)
    if not user:
        raise AuthenticationError(
            message="Invalid or expired token",
            error_code=ErrorCode.INVALID_TOKEN,
        )

    return user


async def get_optional_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> TokenUser | None:
    """The caller if a valid token was sent, otherwise None (never raises)."""
    if not credentials:
        return None

    return await auth_provider.validate_token(credentials.credentials)


CurrentUser = Annotated[TokenUser, Depends(get_current_user)]
OptionalUser = Annotated[TokenUser | None, Depends(get_optional_user)]


async def get_session_manager(
    user: OptionalUser,
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    auth_api: SupabaseAuthAPI = Depends(get_supabase_auth_api),
    profile_service: ProfileService = Depends(get_profile_service),
) -> AsyncIterator[AuthSessionManager]:
    """A session manager scoped to this request.

    A valid bearer token seeds the session, so the manager starts signed in.
    """
    session = None
    if user and credentials:
        session = AuthSession(
            access_token=credentials.credentials,
            user=AuthUser(id=user.id, email=user.email, user_metadata=user.user_metadata),
        )

    async with AuthSessionManager(SupabaseAuthClient(auth_api, session), profile_service) as manager:
        yield manager


SessionManager = Annotated[AuthSessionManager, Depends(get_session_manager)]
