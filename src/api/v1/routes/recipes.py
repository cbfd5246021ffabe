"""Recipe API routes.

Recipe service calls return results; each handler picks what an error
degrades to (an empty page, an empty list, a 404).
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_recipe_service
from api.v1.schemas.common import FlagResponse
from api.v1.schemas.recipe import (
    RecipeCreate,
    RecipeDetailResponse,
    RecipeListResponse,
    RecipeResponse,
    RecipeUpdate,
)
from core.config import settings
from core.exceptions import AppException, ErrorCode, RecipeNotFoundError
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.recipe import RecipeDifficulty, RecipeFilters, RecipePage
from domain.result import Err, ErrorKind
from domain.services.recipe_service import RecipeService

router = APIRouter(prefix="/recipes", tags=["recipes"])
users_router = APIRouter(prefix="/users", tags=["recipes"])


def _raise_for_write(result: Err, recipe_id: UUID | None = None) -> None:
    if result.kind == ErrorKind.NOT_FOUND and recipe_id is not None:
        raise RecipeNotFoundError(str(recipe_id))
    if result.kind == ErrorKind.INVALID:
        raise AppException(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=result.message or "Invalid recipe",
            status_code=400,
        )
    raise AppException(
        error_code=ErrorCode.DATABASE_ERROR,
        message=result.message or "Recipe could not be saved",
        status_code=503,
    )


@router.get(
    "",
    response_model=RecipeListResponse,
    summary="List recipes",
    responses={200: {"description": "One page of recipes, newest first"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_recipes(
    request: Request,
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeListResponse:
    """Get a page of recipes. A backend failure yields an empty page."""
    result = await service.get_recipes(page=page, page_size=page_size)
    recipe_page = result.unwrap_or(RecipePage.empty())
    return RecipeListResponse(
        data=[RecipeResponse.from_entity(r) for r in recipe_page.recipes],
        meta={
            "page": page,
            "page_size": page_size,
            "count": recipe_page.count,
        },
    )


@router.get(
    "/search",
    response_model=RecipeListResponse,
    summary="Search recipes",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def search_recipes(
    request: Request,
    q: str = Query("", max_length=200, description="Matched against title, description, ingredients"),
    category: str | None = Query(None),
    difficulty: RecipeDifficulty | None = Query(None),
    max_cooking_time: int | None = Query(None, gt=0),
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeListResponse:
    """Case-insensitive substring search combined with optional filters."""
    filters = RecipeFilters(
        category=category or None,
        difficulty=difficulty,
        max_cooking_time=max_cooking_time,
    )
    recipes = (await service.search_recipes(q, filters)).unwrap_or([])
    return RecipeListResponse(
        data=[RecipeResponse.from_entity(r) for r in recipes],
        meta={"total": len(recipes), "query": q},
    )


@router.get(
    "/{recipe_id}",
    response_model=RecipeDetailResponse,
    summary="Get a recipe",
    responses={404: {"description": "Recipe not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_recipe(
    request: Request,
    recipe_id: UUID,
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeDetailResponse:
    """Get one recipe with owner info."""
    recipe = (await service.get_recipe(recipe_id)).unwrap_or(None)
    if recipe is None:
        raise RecipeNotFoundError(str(recipe_id))
    return RecipeDetailResponse(data=RecipeResponse.from_entity(recipe))


@router.post(
    "",
    response_model=RecipeDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a recipe",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_recipe(
    request: Request,
    body: RecipeCreate,
    user: CurrentUser,
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeDetailResponse:
    """Create a recipe owned by the caller."""
    result = await service.create_recipe(
        user_id=user.id,
        title=body.title,
        ingredients=body.ingredients,
        instructions=body.instructions,
        description=body.description,
        cooking_time=body.cooking_time,
        difficulty=body.difficulty,
        category=body.category,
    )
    if isinstance(result, Err):
        _raise_for_write(result)
    return RecipeDetailResponse(data=RecipeResponse.from_entity(result.value))


@router.patch(
    "/{recipe_id}",
    response_model=RecipeDetailResponse,
    summary="Update a recipe",
    responses={404: {"description": "Recipe not found or not owned by caller"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_recipe(
    request: Request,
    recipe_id: UUID,
    body: RecipeUpdate,
    user: CurrentUser,
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeDetailResponse:
    """Partially update a recipe. Only the owner may do this."""
    result = await service.update_recipe(recipe_id, user.id, body.model_dump(exclude_unset=True))
    if isinstance(result, Err):
        _raise_for_write(result, recipe_id)
    return RecipeDetailResponse(data=RecipeResponse.from_entity(result.value))


@router.delete(
    "/{recipe_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a recipe",
    responses={
        204: {"description": "Recipe, its comments and likes deleted"},
        404: {"description": "Recipe not found or not owned by caller"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_recipe(
    request: Request,
    recipe_id: UUID,
    user: CurrentUser,
    service: RecipeService = Depends(get_recipe_service),
) -> None:
    """Delete a recipe owned by the caller."""
    result = await service.delete_recipe(recipe_id, user.id)
    if isinstance(result, Err):
        _raise_for_write(result, recipe_id)
    return None


@router.get(
    "/{recipe_id}/ownership",
    response_model=FlagResponse,
    summary="Check recipe ownership",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def check_ownership(
    request: Request,
    recipe_id: UUID,
    user: CurrentUser,
    service: RecipeService = Depends(get_recipe_service),
) -> FlagResponse:
    """Whether the caller created the recipe. Any failure answers false."""
    is_creator = (await service.is_recipe_creator(recipe_id, user.id)).unwrap_or(False)
    return FlagResponse(data=is_creator)


@users_router.get(
    "/{user_id}/recipes",
    response_model=RecipeListResponse,
    summary="List a user's recipes",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_user_recipes(
    request: Request,
    user_id: UUID,
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeListResponse:
    """All recipes created by a user, newest first."""
    recipes = (await service.get_user_recipes(user_id)).unwrap_or([])
    return RecipeListResponse(
        data=[RecipeResponse.from_entity(r) for r in recipes],
        meta={"total": len(recipes)},
    )
