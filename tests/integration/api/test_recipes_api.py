"""Integration tests for Recipes API."""

from uuid import UUID, uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.models import CommentModel, LikeModel, RecipeModel
from tests.conftest import OTHER_USER_ID, TEST_USER_ID


async def _create(client: AsyncClient, headers: dict[str, str], **fields) -> dict:
    body = {
        "title": "Tomato Soup",
        "ingredients": "tomatoes, salt",
        "instructions": "Simmer.",
    }
    body.update(fields)
    response = await client.post("/api/v1/recipes", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestCreateRecipe:
    """POST /api/v1/recipes"""

    @pytest.mark.asyncio
    async def test_create_recipe(self, client: AsyncClient, auth_headers: dict[str, str]) -> None:
        data = await _create(
            client,
            auth_headers,
            title="Chocolate Cake",
            description="Rich and dark",
            cooking_time=45,
            difficulty="hard",
            category="dessert",
        )

        assert data["title"] == "Chocolate Cake"
        assert data["user_id"] == str(TEST_USER_ID)
        assert data["difficulty"] == "hard"
        assert data["cooking_time"] == 45

    @pytest.mark.asyncio
    async def test_blank_optionals_are_stored_as_null(
        self,
        client: AsyncClient,
        auth_headers: dict[str, str],
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        data = await _create(client, auth_headers, description="", category="   ")

        async with session_factory() as session:
            model = await session.get(RecipeModel, UUID(data["id"]))

        assert model is not None
        assert model.description is None
        assert model.category is None
        assert model.cooking_time is None
        assert model.difficulty == "medium"

    @pytest.mark.asyncio
    async def test_requires_auth(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/recipes",
            json={"title": "X", "ingredients": "y", "instructions": "z"},
        )

        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_validation_error(self, client: AsyncClient, auth_headers: dict[str, str]) -> None:
        response = await client.post(
            "/api/v1/recipes",
            json={"title": "", "ingredients": "y", "instructions": "z", "cooking_time": 0},
            headers=auth_headers,
        )

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"


class TestListRecipes:
    """GET /api/v1/recipes"""

    @pytest.mark.asyncio
    async def test_pages_are_newest_first_with_stable_count(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        titles = [f"Recipe {i}" for i in range(5)]
        for title in titles:
            await _create(client, auth_headers, title=title)

        first = (await client.get("/api/v1/recipes", params={"page": 1, "page_size": 2})).json()
        third = (await client.get("/api/v1/recipes", params={"page": 3, "page_size": 2})).json()

        assert [r["title"] for r in first["data"]] == ["Recipe 4", "Recipe 3"]
        assert [r["title"] for r in third["data"]] == ["Recipe 0"]
        assert first["meta"]["count"] == third["meta"]["count"] == 5
        assert first["data"][0]["owner"] == {"username": "tester", "full_name": "Test User"}

    @pytest.mark.asyncio
    async def test_page_past_the_end_is_empty(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/recipes", params={"page": 9})

        assert response.status_code == 200
        assert response.json()["data"] == []
        assert response.json()["meta"]["count"] == 0

    @pytest.mark.asyncio
    async def test_page_size_is_capped(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/recipes", params={"page_size": 500})

        assert response.status_code == 422


class TestSearchRecipes:
    """GET /api/v1/recipes/search"""

    @pytest.mark.asyncio
    async def test_partial_case_insensitive_match(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        await _create(client, auth_headers, title="Chocolate Cake")
        await _create(client, auth_headers, title="Lemon Tart", ingredients="lemons, dark choc chips")
        await _create(client, auth_headers, title="Bread")

        response = await client.get("/api/v1/recipes/search", params={"q": "choc"})

        titles = {r["title"] for r in response.json()["data"]}
        assert titles == {"Chocolate Cake", "Lemon Tart"}

    @pytest.mark.asyncio
    async def test_difficulty_filter_excludes_others(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        await _create(client, auth_headers, title="Chocolate Cake", difficulty="hard")
        await _create(client, auth_headers, title="Chocolate Milk", difficulty="easy")

        response = await client.get(
            "/api/v1/recipes/search", params={"q": "choc", "difficulty": "easy"}
        )

        assert [r["title"] for r in response.json()["data"]] == ["Chocolate Milk"]

    @pytest.mark.asyncio
    async def test_wildcards_are_literal(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        await _create(client, auth_headers, title="100% Rye")
        await _create(client, auth_headers, title="Rye Bread")

        response = await client.get("/api/v1/recipes/search", params={"q": "%"})

        assert [r["title"] for r in response.json()["data"]] == ["100% Rye"]


class TestRecipeOwnership:
    """GET/PATCH/DELETE on a single recipe"""

    @pytest.mark.asyncio
    async def test_get_missing_recipe_is_404(self, client: AsyncClient) -> None:
        response = await client.get(f"/api/v1/recipes/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error_code"] == "RECIPE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_is_recipe_creator(
        self,
        client: AsyncClient,
        auth_headers: dict[str, str],
        other_headers: dict[str, str],
    ) -> None:
        recipe = await _create(client, auth_headers)
        url = f"/api/v1/recipes/{recipe['id']}/ownership"

        assert (await client.get(url, headers=auth_headers)).json()["data"] is True
        assert (await client.get(url, headers=other_headers)).json()["data"] is False
        missing = f"/api/v1/recipes/{uuid4()}/ownership"
        assert (await client.get(missing, headers=auth_headers)).json()["data"] is False

    @pytest.mark.asyncio
    async def test_owner_updates_and_blank_clears(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        recipe = await _create(client, auth_headers, description="Old")

        response = await client.patch(
            f"/api/v1/recipes/{recipe['id']}",
            json={"title": "New Soup", "description": ""},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "New Soup"
        assert data["description"] is None
        assert data["user_id"] == str(TEST_USER_ID)

    @pytest.mark.asyncio
    async def test_non_owner_cannot_update_or_delete(
        self,
        client: AsyncClient,
        auth_headers: dict[str, str],
        other_headers: dict[str, str],
    ) -> None:
        recipe = await _create(client, auth_headers)
        url = f"/api/v1/recipes/{recipe['id']}"

        patched = await client.patch(url, json={"title": "Mine"}, headers=other_headers)
        deleted = await client.delete(url, headers=other_headers)

        assert patched.status_code == 404
        assert deleted.status_code == 404
        assert (await client.get(url)).json()["data"]["title"] == "Tomato Soup"

    @pytest.mark.asyncio
    async def test_delete_removes_recipe_from_pages_stats_and_children(
        self,
        client: AsyncClient,
        auth_headers: dict[str, str],
        other_headers: dict[str, str],
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        recipe = await _create(client, auth_headers)
        await client.post(
            f"/api/v1/recipes/{recipe['id']}/comments",
            json={"content": "Yum"},
            headers=other_headers,
        )
        async with session_factory() as session:
            session.add(LikeModel(user_id=OTHER_USER_ID, recipe_id=UUID(recipe["id"])))
            await session.commit()

        response = await client.delete(f"/api/v1/recipes/{recipe['id']}", headers=auth_headers)

        assert response.status_code == 204
        page = (await client.get("/api/v1/recipes")).json()
        assert recipe["id"] not in [r["id"] for r in page["data"]]
        assert page["meta"]["count"] == 0
        stats = await client.get(f"/api/v1/recipes/{recipe['id']}/stats")
        assert stats.status_code == 404
        async with session_factory() as session:
            comments = await session.scalar(select(func.count()).select_from(CommentModel))
            likes = await session.scalar(select(func.count()).select_from(LikeModel))
        assert comments == 0
        assert likes == 0


class TestUserRecipes:
    """GET /api/v1/users/{user_id}/recipes"""

    @pytest.mark.asyncio
    async def test_lists_only_that_users_recipes(
        self,
        client: AsyncClient,
        auth_headers: dict[str, str],
        other_headers: dict[str, str],
    ) -> None:
        await _create(client, auth_headers, title="Mine")
        await _create(client, other_headers, title="Theirs")

        response = await client.get(f"/api/v1/users/{TEST_USER_ID}/recipes")

        data = response.json()["data"]
        assert [r["title"] for r in data] == ["Mine"]
        assert data[0]["owner"] == {"username": "tester", "full_name": "Test User"}
