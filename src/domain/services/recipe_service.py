"""Recipe service layer.

Every operation returns a ``Result``. Backend failures are logged here and
come back as ``Err(BACKEND)``, rejected field values as ``Err(INVALID)``.
The caller picks the degrade value with ``unwrap_or``. Nothing in this module
raises on a database error.
"""

from collections.abc import Callable
from dataclasses import replace
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy.exc import SQLAlchemyError

from domain.entities.recipe import (
    UPDATABLE_RECIPE_FIELDS,
    Recipe,
    RecipeDifficulty,
    RecipeFilters,
    RecipePage,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.result import Err, ErrorKind, Ok, Result

logger = structlog.get_logger(__name__)


def _backend_error(operation: str, exc: Exception, **context: Any) -> Err:
    logger.error(f"{operation}_failed", error=str(exc), **context)
    return Err(ErrorKind.BACKEND, f"Database error during {operation}")


class RecipeService:
    """Service layer for recipe reads and writes."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_recipes(self, page: int = 1, page_size: int = 12) -> Result[RecipePage]:
        """Get one page of recipes, newest first, with the total recipe count."""
        page = max(page, 1)
        offset = (page - 1) * page_size
        try:
            async with self._uow_factory() as uow:
                recipes = await uow.recipes.list_page(offset=offset, limit=page_size)
                count = await uow.recipes.count()
        except SQLAlchemyError as exc:
            return _backend_error("get_recipes", exc, page=page, page_size=page_size)
        return Ok(RecipePage(recipes=recipes, count=count))

    async def get_recipe(self, recipe_id: UUID) -> Result[Recipe]:
        """Get a single recipe with owner info."""
        try:
            async with self._uow_factory() as uow:
                recipe = await uow.recipes.get(recipe_id)
        except SQLAlchemyError as exc:
            return _backend_error("get_recipe", exc, recipe_id=str(recipe_id))
        if recipe is None:
            return Err(ErrorKind.NOT_FOUND, f"Recipe {recipe_id} not found")
        return Ok(recipe)

    async def create_recipe(
        self,
        user_id: UUID,
        title: str,
        ingredients: str,
        instructions: str,
        description: str | None = None,
        cooking_time: int | None = None,
        difficulty: RecipeDifficulty = RecipeDifficulty.MEDIUM,
        category: str | None = None,
    ) -> Result[Recipe]:
        """Create a recipe owned by user_id. Blank optional fields are stored as NULL."""
        try:
            recipe = Recipe(
                user_id=user_id,
                title=title,
                ingredients=ingredients,
                instructions=instructions,
                description=description,
                cooking_time=cooking_time,
                difficulty=difficulty,
                category=category,
            )
        except ValueError as exc:
            logger.warning("create_recipe_rejected", error=str(exc), user_id=str(user_id))
            return Err(ErrorKind.INVALID, str(exc))

        try:
            async with self._uow_factory() as uow:
                created = await uow.recipes.create(recipe)
                await uow.commit()
        except SQLAlchemyError as exc:
            return _backend_error("create_recipe", exc, user_id=str(user_id))

        logger.info("recipe_created", recipe_id=str(created.id), user_id=str(user_id))
        return Ok(created)

    async def update_recipe(
        self, recipe_id: UUID, user_id: UUID, fields: dict[str, Any]
    ) -> Result[Recipe]:
        """Apply a partial update. Only the owner may update; the owner never changes."""
        changes = {k: v for k, v in fields.items() if k in UPDATABLE_RECIPE_FIELDS}
        try:
            async with self._uow_factory() as uow:
                recipe = await uow.recipes.get(recipe_id)
                if recipe is None or recipe.user_id != user_id:
                    return Err(ErrorKind.NOT_FOUND, f"Recipe {recipe_id} not found")

                updated = await uow.recipes.update(replace(recipe, **changes))
                await uow.commit()
        except ValueError as exc:
            logger.warning("update_recipe_rejected", error=str(exc), recipe_id=str(recipe_id))
            return Err(ErrorKind.INVALID, str(exc))
        except SQLAlchemyError as exc:
            return _backend_error("update_recipe", exc, recipe_id=str(recipe_id))

        logger.info("recipe_updated", recipe_id=str(recipe_id), fields=sorted(changes))
        return Ok(updated)

    async def delete_recipe(self, recipe_id: UUID, user_id: UUID) -> Result[bool]:
        """Delete a recipe with its comments and likes. Owner only."""
        try:
            async with self._uow_factory() as uow:
                owner_id = await uow.recipes.get_owner_id(recipe_id)
                if owner_id is None or owner_id != user_id:
                    return Err(ErrorKind.NOT_FOUND, f"Recipe {recipe_id} not found")

                deleted = await uow.recipes.delete(recipe_id)
                await uow.commit()
        except SQLAlchemyError as exc:
            return _backend_error("delete_recipe", exc, recipe_id=str(recipe_id))

        logger.info("recipe_deleted", recipe_id=str(recipe_id))
        return Ok(deleted)

    async def is_recipe_creator(self, recipe_id: UUID, user_id: UUID) -> Result[bool]:
        """Whether user_id owns the recipe. A missing recipe is Ok(False)."""
        try:
            async with self._uow_factory() as uow:
                owner_id = await uow.recipes.get_owner_id(recipe_id)
        except SQLAlchemyError as exc:
            return _backend_error("is_recipe_creator", exc, recipe_id=str(recipe_id))
        return Ok(owner_id is not None and owner_id == user_id)

    async def search_recipes(
        self, query: str, filters: RecipeFilters | None = None
    ) -> Result[list[Recipe]]:
        """Case-insensitive substring search, AND-ed with the filters."""
        try:
            async with self._uow_factory() as uow:
                recipes = await uow.recipes.search(query, filters or RecipeFilters())
        except SQLAlchemyError as exc:
            return _backend_error("search_recipes", exc, query=query)
        return Ok(recipes)

    async def get_user_recipes(self, user_id: UUID) -> Result[list[Recipe]]:
        """All recipes owned by a user, newest first."""
        try:
            async with self._uow_factory() as uow:
                recipes = await uow.recipes.get_all_for_user(user_id)
        except SQLAlchemyError as exc:
            return _backend_error("get_user_recipes", exc, user_id=str(user_id))
        return Ok(recipes)
