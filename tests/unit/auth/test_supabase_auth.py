"""Unit tests for the Supabase auth HTTP client, run against httpx.MockTransport."""

import json
import time
from uuid import uuid4

import httpx
import pytest

from core.exceptions import AuthProviderError
from domain.entities.session import AuthChangeEvent, AuthSession, AuthUser
from infrastructure.auth.supabase_auth import SupabaseAuthAPI, SupabaseAuthClient

BASE_URL = "https://example.supabase.co/auth/v1"
USER_ID = str(uuid4())


def _session_payload(access_token: str = "access-1", expires_in: int = 3600) -> dict:
    return {
        "access_token": access_token,
        "refresh_token": "refresh-1",
        "token_type": "bearer",
        "expires_in": expires_in,
        "expires_at": int(time.time()) + expires_in,
        "user": {
            "id": USER_ID,
            "email": "cook@example.com",
            "user_metadata": {"username": "cook"},
        },
    }


class GoTrueStub:
    """Records requests and answers like GoTrue."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.signup_confirms = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/auth/v1")
        body = json.loads(request.content) if request.content else {}

        if path == "/token" and request.url.params["grant_type"] == "password":
            if body["password"] != "secret1":
                return httpx.Response(
                    400,
                    json={"error": "invalid_grant", "error_description": "Invalid login credentials"},
                )
            return httpx.Response(200, json=_session_payload())
        if path == "/token" and request.url.params["grant_type"] == "refresh_token":
            return httpx.Response(200, json=_session_payload(access_token="access-2"))
        if path == "/signup":
            if self.signup_confirms:
                return httpx.Response(
                    200, json={"id": USER_ID, "email": body["email"], "user_metadata": body["data"]}
                )
            return httpx.Response(200, json=_session_payload())
        if path == "/logout":
            return httpx.Response(204)
        if path == "/user":
            return httpx.Response(200, json=_session_payload()["user"])
        return httpx.Response(500, text="boom")


@pytest.fixture
def gotrue() -> GoTrueStub:
    return GoTrueStub()


@pytest.fixture
async def api(gotrue: GoTrueStub):
    client = SupabaseAuthAPI(BASE_URL, "anon-key", transport=httpx.MockTransport(gotrue))
    await client.initialize()
    yield client
    await client.shutdown()


# --- SupabaseAuthAPI ---


class TestSupabaseAuthAPI:
    @pytest.mark.asyncio
    async def test_sign_in_sends_apikey_and_grant(self, api: SupabaseAuthAPI, gotrue: GoTrueStub):
        session = await api.sign_in_with_password("cook@example.com", "secret1")

        request = gotrue.requests[0]
        assert request.headers["apikey"] == "anon-key"
        assert request.url.params["grant_type"] == "password"
        assert session.access_token == "access-1"
        assert str(session.user.id) == USER_ID

    @pytest.mark.asyncio
    async def test_rejected_credentials_raise_with_provider_message(self, api: SupabaseAuthAPI):
        with pytest.raises(AuthProviderError) as exc_info:
            await api.sign_in_with_password("cook@example.com", "wrong")

        assert exc_info.value.message == "Invalid login credentials"
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_sign_up_sends_metadata(self, api: SupabaseAuthAPI, gotrue: GoTrueStub):
        outcome = await api.sign_up("cook@example.com", "secret1", {"username": "cook"})

        assert json.loads(gotrue.requests[0].content)["data"] == {"username": "cook"}
        assert outcome.session is not None
        assert outcome.user is not None

    @pytest.mark.asyncio
    async def test_sign_up_with_confirmation_returns_user_only(
        self, api: SupabaseAuthAPI, gotrue: GoTrueStub
    ):
        gotrue.signup_confirms = True

        outcome = await api.sign_up("cook@example.com", "secret1")

        assert outcome.session is None
        assert outcome.user is not None
        assert str(outcome.user.id) == USER_ID

    @pytest.mark.asyncio
    async def test_sign_out_sends_bearer(self, api: SupabaseAuthAPI, gotrue: GoTrueStub):
        await api.sign_out("access-1")

        assert gotrue.requests[0].headers["Authorization"] == "Bearer access-1"

    @pytest.mark.asyncio
    async def test_server_error_maps_to_bad_gateway(self):
        api = SupabaseAuthAPI(
            BASE_URL,
            "anon-key",
            transport=httpx.MockTransport(lambda r: httpx.Response(500, text="boom")),
        )

        with pytest.raises(AuthProviderError) as exc_info:
            await api.get_user("access-1")

        assert exc_info.value.status_code == 502
        await api.shutdown()

    @pytest.mark.asyncio
    async def test_unreachable_provider_maps_to_unavailable(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        api = SupabaseAuthAPI(BASE_URL, "anon-key", transport=httpx.MockTransport(refuse))

        with pytest.raises(AuthProviderError) as exc_info:
            await api.get_user("access-1")

        assert exc_info.value.status_code == 503
        await api.shutdown()


class TestMalformedResponses:
    @staticmethod
    def _api(response: httpx.Response) -> SupabaseAuthAPI:
        return SupabaseAuthAPI(
            BASE_URL, "anon-key", transport=httpx.MockTransport(lambda r: response)
        )

    @pytest.mark.asyncio
    async def test_session_without_user_is_a_provider_error(self):
        api = self._api(httpx.Response(200, json={"access_token": "a"}))

        with pytest.raises(AuthProviderError) as exc_info:
            await api.sign_in_with_password("cook@example.com", "secret1")

        assert exc_info.value.status_code == 502
        await api.shutdown()

    @pytest.mark.asyncio
    async def test_signup_user_with_bad_id_is_a_provider_error(self):
        api = self._api(httpx.Response(200, json={"id": "not-a-uuid", "email": "n@example.com"}))

        with pytest.raises(AuthProviderError) as exc_info:
            await api.sign_up("n@example.com", "secret1")

        assert exc_info.value.status_code == 502
        await api.shutdown()

    @pytest.mark.asyncio
    async def test_non_json_body_is_a_provider_error(self):
        api = self._api(httpx.Response(200, text="<html>maintenance</html>"))

        with pytest.raises(AuthProviderError):
            await api.get_user("access-1")

        await api.shutdown()

    @pytest.mark.asyncio
    async def test_signup_without_user_id_returns_no_user(self):
        api = self._api(httpx.Response(200, json={"user": None}))

        outcome = await api.sign_up("n@example.com", "secret1")

        assert outcome.user is None
        assert outcome.session is None
        await api.shutdown()


# --- SupabaseAuthClient ---


class TestSupabaseAuthClient:
    @pytest.mark.asyncio
    async def test_sign_in_and_out_publish_events(self, api: SupabaseAuthAPI):
        client = SupabaseAuthClient(api)
        events: list[tuple[AuthChangeEvent, AuthSession | None]] = []

        async def listener(event: AuthChangeEvent, session: AuthSession | None) -> None:
            events.append((event, session))

        client.on_auth_state_change(listener)
        await client.sign_in_with_password("cook@example.com", "secret1")
        await client.sign_out()

        assert [e for e, _ in events] == [AuthChangeEvent.SIGNED_IN, AuthChangeEvent.SIGNED_OUT]
        assert events[0][1] is not None
        assert events[1][1] is None
        assert await client.get_session() is None

    @pytest.mark.asyncio
    async def test_unsubscribed_listener_is_not_called(self, api: SupabaseAuthAPI):
        client = SupabaseAuthClient(api)
        calls: list[AuthChangeEvent] = []

        async def listener(event: AuthChangeEvent, session: AuthSession | None) -> None:
            calls.append(event)

        client.on_auth_state_change(listener).unsubscribe()
        await client.sign_in_with_password("cook@example.com", "secret1")

        assert calls == []

    @pytest.mark.asyncio
    async def test_expiring_session_is_refreshed(self, api: SupabaseAuthAPI, gotrue: GoTrueStub):
        expiring = AuthSession(
            access_token="access-1",
            refresh_token="refresh-1",
            expires_at=int(time.time()) + 5,
            user=AuthUser(id=uuid4(), email="cook@example.com"),
        )
        client = SupabaseAuthClient(api, expiring)

        session = await client.get_session()

        assert session is not None
        assert session.access_token == "access-2"
        assert gotrue.requests[0].url.params["grant_type"] == "refresh_token"

    @pytest.mark.asyncio
    async def test_fresh_session_is_not_refreshed(self, api: SupabaseAuthAPI, gotrue: GoTrueStub):
        fresh = AuthSession.from_payload(_session_payload())
        client = SupabaseAuthClient(api, fresh)

        assert await client.get_session() == fresh
        assert gotrue.requests == []
