"""Pytest configuration and fixtures."""

import json
import os
import time
from collections.abc import AsyncGenerator, Callable
from uuid import UUID, uuid4

# Settings are read at import time
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.auth.supabase_auth import SupabaseAuthAPI
from infrastructure.database.models import (
    COMMENTS_WITH_USERS_VIEW_SQL,
    RECIPE_STATS_VIEW_SQL,
    Base,
    ProfileModel,
)

# Test database URL (SQLite in memory, one connection shared by all sessions)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_USER_ID = UUID("a1111111-1111-4111-8111-11111111111a")
OTHER_USER_ID = UUID("b2222222-2222-4222-8222-22222222222b")
TEST_PASSWORD = "secret1"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh database with tables and views for each test."""
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)

    # Let SQLAlchemy emit BEGIN itself so savepoints behave as on PostgreSQL
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):  # type: ignore[no-untyped-def]
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):  # type: ignore[no-untyped-def]
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.execute(text(RECIPE_STATS_VIEW_SQL))
        await conn.execute(text(COMMENTS_WITH_USERS_VIEW_SQL))

    yield engine
    await engine.dispose()


@pytest.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async with factory() as session:
        session.add_all(
            [
                ProfileModel(
                    id=TEST_USER_ID,
                    email="test@example.com",
                    username="tester",
                    full_name="Test User",
                ),
                ProfileModel(id=OTHER_USER_ID, email="other@example.com", username="other"),
            ]
        )
        await session.commit()

    return factory


@pytest.fixture
def test_user() -> TokenUser:
    """The seeded test user."""
    return TokenUser(id=TEST_USER_ID, email="test@example.com", username="tester")


@pytest.fixture
def other_user() -> TokenUser:
    """A second seeded user."""
    return TokenUser(id=OTHER_USER_ID, email="other@example.com", username="other")


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def auth_headers(auth_provider: JWTAuthProvider, test_user: TokenUser) -> dict[str, str]:
    """Authorization headers for the test user."""
    return {"Authorization": f"Bearer {auth_provider.create_token(test_user)}"}


@pytest.fixture
def other_headers(auth_provider: JWTAuthProvider, other_user: TokenUser) -> dict[str, str]:
    """Authorization headers for the other user."""
    return {"Authorization": f"Bearer {auth_provider.create_token(other_user)}"}


class GoTrueStub:
    """Minimal Supabase auth server: password sign-in, sign-up and logout."""

    def __init__(self) -> None:
        self.users: dict[str, dict] = {
            "test@example.com": {
                "id": str(TEST_USER_ID),
                "email": "test@example.com",
                "user_metadata": {"username": "tester"},
            }
        }
        self.logged_out: list[str] = []

    def _session(self, user: dict) -> dict:
        return {
            "access_token": f"access-{user['id']}",
            "refresh_token": f"refresh-{user['id']}",
            "token_type": "bearer",
            "expires_in": 3600,
            "expires_at": int(time.time()) + 3600,
            "user": user,
        }

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/auth/v1")
        body = json.loads(request.content) if request.content else {}

        if path == "/token":
            user = self.users.get(body.get("email", ""))
            if user is None or body.get("password") != TEST_PASSWORD:
                return httpx.Response(
                    400,
                    json={"error": "invalid_grant", "error_description": "Invalid login credentials"},
                )
            return httpx.Response(200, json=self._session(user))
        if path == "/signup":
            if body["email"] in self.users:
                return httpx.Response(422, json={"msg": "User already registered"})
            user = {"id": str(uuid4()), "email": body["email"], "user_metadata": body["data"]}
            self.users[body["email"]] = user
            return httpx.Response(200, json=self._session(user))
        if path == "/logout":
            self.logged_out.append(request.headers["Authorization"])
            return httpx.Response(204)
        return httpx.Response(404, json={"msg": "not found"})


@pytest.fixture
def gotrue() -> GoTrueStub:
    return GoTrueStub()


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    auth_provider: JWTAuthProvider,
    gotrue: GoTrueStub,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client wired to the in-memory database.

    This client:
    - Uses an in-memory SQLite database with two seeded profiles
    - Validates tokens with the test secret
    - Talks to a stubbed Supabase auth server
    """
    from api.dependencies.auth import get_auth_provider
    from api.dependencies.services import get_profile_service, get_supabase_auth_api
    from api.v1.dependencies import (
        get_comment_service,
        get_like_service,
        get_recipe_service,
        get_stats_service,
    )
    from domain.services.comment_service import CommentService
    from domain.services.like_service import LikeService
    from domain.services.profile_service import ProfileService
    from domain.services.recipe_service import RecipeService
    from domain.services.stats_service import StatsService
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
    from main import create_app

    app = create_app()

    def test_uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    auth_api = SupabaseAuthAPI(
        "https://test-project.supabase.co/auth/v1",
        "test-anon-key",
        transport=httpx.MockTransport(gotrue),
    )

    overrides: dict[Callable, Callable] = {
        get_auth_provider: lambda: auth_provider,
        get_recipe_service: lambda: RecipeService(test_uow_factory),
        get_comment_service: lambda: CommentService(test_uow_factory),
        get_like_service: lambda: LikeService(test_uow_factory),
        get_stats_service: lambda: StatsService(test_uow_factory),
        get_profile_service: lambda: ProfileService(test_uow_factory),
        get_supabase_auth_api: lambda: auth_api,
    }
    app.dependency_overrides.update(overrides)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
    await auth_api.shutdown()
