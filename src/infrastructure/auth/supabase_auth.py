"""Client for the Supabase auth (GoTrue) REST API.

``SupabaseAuthAPI`` is a stateless HTTP wrapper shared by the whole process.
``SupabaseAuthClient`` wraps it for a single consumer: it holds that
consumer's session and notifies subscribers when the session changes.
"""

import time
from typing import Any

import httpx
import structlog

from core.exceptions import AuthProviderError
from domain.entities.session import AuthChangeEvent, AuthSession, AuthUser, SignUpOutcome
from domain.repositories.auth_client import AuthStateListener

logger = structlog.get_logger(__name__)

# Refresh a session this many seconds before it expires
EXPIRY_MARGIN_SECONDS = 10


def _error_message(response: httpx.Response) -> str:
    """Pull the human readable message out of a GoTrue error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"Auth request failed with status {response.status_code}"
    if isinstance(body, dict):
        for key in ("msg", "message", "error_description", "error"):
            if body.get(key):
                return str(body[key])
    return f"Auth request failed with status {response.status_code}"


def _malformed(path: str, exc: Exception) -> AuthProviderError:
    logger.error("supabase_auth_malformed_response", path=path, error=repr(exc))
    return AuthProviderError("Unexpected response from authentication service", status_code=502)


def _parse_session(path: str, payload: dict[str, Any]) -> AuthSession:
    try:
        return AuthSession.from_payload(payload)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise _malformed(path, exc) from exc


def _parse_user(path: str, payload: dict[str, Any]) -> AuthUser:
    try:
        return AuthUser.from_payload(payload)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise _malformed(path, exc) from exc


class SupabaseAuthAPI:
    """Async HTTP client for the Supabase auth endpoints.

    Attributes:
        base_url: ``{SUPABASE_URL}/auth/v1``.
        anon_key: Project API key sent as the ``apikey`` header.
        timeout: HTTP request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    async def initialize(self) -> None:
        """Create the pooled HTTP client."""
        if self._http_client is not None:
            return

        self._http_client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            headers={"apikey": self.anon_key, "Content-Type": "application/json"},
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
            transport=self._transport,
        )
        logger.info("supabase_auth_client_initialized", base_url=self.base_url)

    async def shutdown(self) -> None:
        """Close the HTTP client and release connections."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
            logger.debug("supabase_auth_client_shutdown")

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        if self._http_client is None:
            await self.initialize()
        assert self._http_client is not None

        headers = {"Authorization": f"Bearer {access_token}"} if access_token else None
        try:
            response = await self._http_client.request(
                method, path, params=params, json=json, headers=headers
            )
        except httpx.HTTPError as exc:
            logger.error("supabase_auth_unreachable", path=path, error=str(exc))
            raise AuthProviderError("Authentication service unavailable", status_code=503) from exc

        if response.status_code >= 400:
            message = _error_message(response)
            logger.info(
                "supabase_auth_request_rejected",
                path=path,
                status_code=response.status_code,
                error=message,
            )
            status_code = response.status_code if response.status_code < 500 else 502
            raise AuthProviderError(message, status_code=status_code)

        if response.status_code == 204 or not response.content:
            return {}
        try:
            body = response.json()
        except ValueError as exc:
            raise _malformed(path, exc) from exc
        if not isinstance(body, dict):
            raise _malformed(path, TypeError(f"expected an object, got {type(body).__name__}"))
        return body

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Exchange email and password for a session."""
        payload = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return _parse_session("/token", payload)

    async def sign_up(
        self, email: str, password: str, data: dict[str, Any] | None = None
    ) -> SignUpOutcome:
        """Create an account. ``data`` is stored as the user's metadata.

        When email confirmation is enabled GoTrue returns only the user.
        """
        payload = await self._request(
            "POST",
            "/signup",
            json={"email": email, "password": password, "data": data or {}},
        )
        if "access_token" in payload:
            session = _parse_session("/signup", payload)
            return SignUpOutcome(user=session.user, session=session)
        user_payload = payload.get("user") or payload
        if not isinstance(user_payload, dict) or not user_payload.get("id"):
            return SignUpOutcome(user=None)
        return SignUpOutcome(user=_parse_user("/signup", user_payload))

    async def sign_out(self, access_token: str) -> None:
        """Revoke the refresh tokens behind an access token."""
        await self._request("POST", "/logout", access_token=access_token)

    async def refresh_session(self, refresh_token: str) -> AuthSession:
        """Trade a refresh token for a new session."""
        payload = await self._request(
            "POST",
            "/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
        return _parse_session("/token", payload)

    async def get_user(self, access_token: str) -> AuthUser:
        """Fetch the user an access token belongs to."""
        payload = await self._request("GET", "/user", access_token=access_token)
        return _parse_user("/user", payload)


class _Subscription:
    def __init__(self, client: "SupabaseAuthClient", listener: AuthStateListener) -> None:
        self._client = client
        self._listener = listener

    def unsubscribe(self) -> None:
        self._client._listeners.discard(self._listener)


class SupabaseAuthClient:
    """One consumer's auth state on top of a shared ``SupabaseAuthAPI``."""

    def __init__(self, api: SupabaseAuthAPI, session: AuthSession | None = None) -> None:
        self._api = api
        self._session = session
        self._listeners: set[AuthStateListener] = set()

    async def get_session(self) -> AuthSession | None:
        """Current session, refreshed first if it is about to expire."""
        session = self._session
        if session and session.refresh_token and session.expires_at:
            if session.expires_at - EXPIRY_MARGIN_SECONDS <= time.time():
                return await self.refresh_session()
        return session

    async def refresh_session(self) -> AuthSession | None:
        if not self._session or not self._session.refresh_token:
            return self._session
        self._session = await self._api.refresh_session(self._session.refresh_token)
        await self._emit(AuthChangeEvent.TOKEN_REFRESHED)
        return self._session

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        self._session = await self._api.sign_in_with_password(email, password)
        await self._emit(AuthChangeEvent.SIGNED_IN)
        return self._session

    async def sign_up(
        self, email: str, password: str, data: dict[str, Any] | None = None
    ) -> SignUpOutcome:
        outcome = await self._api.sign_up(email, password, data)
        if outcome.session:
            self._session = outcome.session
            await self._emit(AuthChangeEvent.SIGNED_IN)
        return outcome

    async def sign_out(self) -> None:
        if self._session:
            await self._api.sign_out(self._session.access_token)
        self._session = None
        await self._emit(AuthChangeEvent.SIGNED_OUT)

    def on_auth_state_change(self, listener: AuthStateListener) -> _Subscription:
        self._listeners.add(listener)
        return _Subscription(self, listener)

    async def _emit(self, event: AuthChangeEvent) -> None:
        for listener in list(self._listeners):
            await listener(event, self._session)
