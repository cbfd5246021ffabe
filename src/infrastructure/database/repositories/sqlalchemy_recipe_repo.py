"""SQLAlchemy implementation of Recipe repository."""

from typing import Any
from uuid import UUID

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.recipe import Recipe, RecipeFilters, RecipeOwner
from infrastructure.database.models import LikeModel, ProfileModel, RecipeModel


class SQLAlchemyRecipeRepository:
    """SQLAlchemy implementation of IRecipeRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def _select_with_owner(self) -> Select[Any]:
        """Recipe rows joined with the owner's username and full name."""
        return select(RecipeModel, ProfileModel.username, ProfileModel.full_name).outerjoin(
            ProfileModel, ProfileModel.id == RecipeModel.user_id
        )

    async def get(self, id: UUID) -> Recipe | None:
        """Get a recipe by ID, with owner info."""
        stmt = self._select_with_owner().where(RecipeModel.id == id)
        result = await self._session.execute(stmt)
        row = result.one_or_none()
        return self._row_to_entity(row) if row else None

    async def get_owner_id(self, id: UUID) -> UUID | None:
        """Get only the owner ID of a recipe."""
        stmt = select(RecipeModel.user_id).where(RecipeModel.id == id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_page(self, offset: int, limit: int) -> list[Recipe]:
        """Get a page of recipes, newest first."""
        stmt = (
            self._select_with_owner()
            .order_by(RecipeModel.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._row_to_entity(row) for row in result]

    async def count(self) -> int:
        """Count all recipes."""
        stmt = select(func.count()).select_from(RecipeModel)
        result = await self._session.execute(stmt)
        return result.scalar() or 0

    async def get_all_for_user(self, user_id: UUID) -> list[Recipe]:
        """Get all recipes owned by a user, newest first, with owner info."""
        stmt = (
            self._select_with_owner()
            .where(RecipeModel.user_id == user_id)
            .order_by(RecipeModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._row_to_entity(row) for row in result]

    async def search(self, query: str, filters: RecipeFilters) -> list[Recipe]:
        """Substring match over title/description/ingredients, AND-ed with filters."""
        stmt = self._select_with_owner().where(
            or_(
                RecipeModel.title.icontains(query, autoescape=True),
                RecipeModel.description.icontains(query, autoescape=True),
                RecipeModel.ingredients.icontains(query, autoescape=True),
            )
        )
        if filters.category:
            stmt = stmt.where(RecipeModel.category == filters.category)
        if filters.difficulty:
            stmt = stmt.where(RecipeModel.difficulty == filters.difficulty.value)
        if filters.max_cooking_time is not None:
            stmt = stmt.where(RecipeModel.cooking_time <= filters.max_cooking_time)

        stmt = stmt.order_by(RecipeModel.created_at.desc())
        result = await self._session.execute(stmt)
        return [self._row_to_entity(row) for row in result]

    async def get_liked_by_user(self, user_id: UUID) -> list[Recipe]:
        """Get recipes a user liked, most recently liked first."""
        stmt = (
            self._select_with_owner()
            .join(LikeModel, LikeModel.recipe_id == RecipeModel.id)
            .where(LikeModel.user_id == user_id)
            .order_by(LikeModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._row_to_entity(row) for row in result]

    async def create(self, recipe: Recipe) -> Recipe:
        """Create a new recipe."""
        model = self._to_model(recipe)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, recipe: Recipe) -> Recipe:
        """Update an existing recipe. The owner column is never written."""
        stmt = select(RecipeModel).where(RecipeModel.id == recipe.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Recipe {recipe.id} not found")

        model.title = recipe.title
        model.description = recipe.description
        model.ingredients = recipe.ingredients
        model.cooking_time = recipe.cooking_time
        model.difficulty = recipe.difficulty.value
        model.category = recipe.category
        model.instructions = recipe.instructions

        await self._session.flush()
        return self._to_entity(model, owner=recipe.owner)

    async def delete(self, id: UUID) -> bool:
        """Delete a recipe; comments and likes go with it (cascade)."""
        stmt = select(RecipeModel).where(RecipeModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    def _row_to_entity(self, row: Any) -> Recipe:
        """Convert a (RecipeModel, username, full_name) row to a domain entity."""
        model, username, full_name = row
        return self._to_entity(model, owner=RecipeOwner(username=username, full_name=full_name))

    def _to_entity(self, model: RecipeModel, owner: RecipeOwner | None = None) -> Recipe:
        """Convert ORM model to domain entity."""
        return Recipe(
            id=model.id,
            user_id=model.user_id,
            title=model.title,
            description=model.description,
            ingredients=model.ingredients,
            cooking_time=model.cooking_time,
            difficulty=model.difficulty,
            category=model.category,
            instructions=model.instructions,
            created_at=model.created_at,
            owner=owner,
        )

    def _to_model(self, entity: Recipe) -> RecipeModel:
        """Convert domain entity to ORM model."""
        return RecipeModel(
            id=entity.id,
            user_id=entity.user_id,
            title=entity.title,
            description=entity.description,
            ingredients=entity.ingredients,
            cooking_time=entity.cooking_time,
            difficulty=entity.difficulty.value,
            category=entity.category,
            instructions=entity.instructions,
            created_at=entity.created_at,
        )
