"""Auth and profile API routes.

Each request gets its own AuthSessionManager (see api.dependencies.auth),
seeded from the bearer token when one is sent.
"""

from fastapi import APIRouter, Request, status

from api.dependencies.auth import CurrentUser, SessionManager
from api.v1.schemas.auth import (
    AuthUserResponse,
    ProfileDetailResponse,
    ProfileResponse,
    ProfileUpdate,
    SessionData,
    SessionResponse,
    SessionTokens,
    SignInRequest,
    SignUpData,
    SignUpRequest,
    SignUpResponse,
)
from core.exceptions import (
    AppException,
    AuthenticationError,
    AuthProviderError,
    ErrorCode,
    ProfileNotFoundError,
)
from core.rate_limit import AUTH_LIMIT, READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.session_manager import AuthSessionManager

router = APIRouter(prefix="/auth", tags=["auth"])
profile_router = APIRouter(prefix="/profile", tags=["profile"])


def _session_data(manager: AuthSessionManager) -> SessionData:
    user = manager.user
    session = manager.session
    return SessionData(
        user=AuthUserResponse(id=user.id, email=user.email, user_metadata=user.user_metadata)
        if user
        else None,
        profile=ProfileResponse.from_entity(manager.profile) if manager.profile else None,
        session=SessionTokens(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_at=session.expires_at,
            token_type=session.token_type,
        )
        if session
        else None,
    )


@router.post(
    "/sign-in",
    response_model=SessionResponse,
    summary="Sign in with email and password",
    responses={401: {"description": "Invalid credentials"}},
)
@limiter.limit(AUTH_LIMIT)  # type: ignore[untyped-decorator]
async def sign_in(
    request: Request,
    body: SignInRequest,
    manager: SessionManager,
) -> SessionResponse:
    result = await manager.sign_in(body.email, body.password)
    if result.error:
        raise AuthenticationError(message=result.error.message)
    return SessionResponse(data=_session_data(manager))


@router.post(
    "/sign-up",
    response_model=SignUpResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
)
@limiter.limit(AUTH_LIMIT)  # type: ignore[untyped-decorator]
async def sign_up(
    request: Request,
    body: SignUpRequest,
    manager: SessionManager,
) -> SignUpResponse:
    """Create an account. Without a session the provider wants email confirmation."""
    user_data = {"username": body.username, "full_name": body.full_name}
    result = await manager.sign_up(
        body.email,
        body.password,
        {k: v for k, v in user_data.items() if v is not None},
    )
    if result.error:
        raise AuthProviderError(result.error.message)

    data = _session_data(manager)
    return SignUpResponse(
        data=SignUpData(
            user=data.user,
            session=data.session,
            confirmation_required=data.session is None,
        )
    )


@router.post(
    "/sign-out",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Sign out",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def sign_out(
    request: Request,
    user: CurrentUser,
    manager: SessionManager,
) -> None:
    """Revoke the caller's refresh tokens at the auth provider."""
    await manager.sign_out()
    return None


@router.get(
    "/session",
    response_model=SessionResponse,
    summary="Current session state",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_session(request: Request, manager: SessionManager) -> SessionResponse:
    """User and profile for the sent token. All fields are null when signed out."""
    return SessionResponse(data=_session_data(manager))


@profile_router.get(
    "",
    response_model=ProfileDetailResponse,
    summary="Get the caller's profile",
    responses={404: {"description": "Profile row missing"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_profile(
    request: Request,
    user: CurrentUser,
    manager: SessionManager,
) -> ProfileDetailResponse:
    if manager.profile is None:
        raise ProfileNotFoundError(str(user.id))
    return ProfileDetailResponse(data=ProfileResponse.from_entity(manager.profile))


@profile_router.patch(
    "",
    response_model=ProfileDetailResponse,
    summary="Update the caller's profile",
    responses={404: {"description": "Profile row missing"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_profile(
    request: Request,
    body: ProfileUpdate,
    user: CurrentUser,
    manager: SessionManager,
) -> ProfileDetailResponse:
    if manager.profile is None:
        raise ProfileNotFoundError(str(user.id))

    result = await manager.update_profile(body.model_dump(exclude_unset=True))
    if result.error or manager.profile is None:
        raise AppException(
            error_code=ErrorCode.DATABASE_ERROR,
            message=result.error.message if result.error else "Profile update failed",
            status_code=503,
        )
    return ProfileDetailResponse(data=ProfileResponse.from_entity(manager.profile))
