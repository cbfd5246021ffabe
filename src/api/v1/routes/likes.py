"""Like API routes."""

from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentUser, OptionalUser
from api.v1.dependencies import get_like_service
from api.v1.schemas.like import (
    LikeListResponse,
    LikeResponse,
    LikeToggleData,
    LikeToggleResponse,
)
from api.v1.schemas.recipe import RecipeListResponse, RecipeResponse
from core.exceptions import PersistenceError
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.like_service import LikeService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/recipes/{recipe_id}/likes", tags=["likes"])
users_router = APIRouter(prefix="/users", tags=["likes"])


@router.get(
    "",
    response_model=LikeListResponse,
    summary="List a recipe's likes",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_likes(
    request: Request,
    recipe_id: UUID,
    user: OptionalUser,
    service: LikeService = Depends(get_like_service),
) -> LikeListResponse:
    """Like rows plus the count and whether the caller liked it.

    The count and the caller's state fall back to 0/false when the database
    functions fail; the row list does not.
    """
    likes = await service.get_recipe_likes(recipe_id)

    try:
        like_count = await service.get_recipe_like_count(recipe_id)
    except PersistenceError:
        like_count = 0

    liked = False
    if user:
        try:
            liked = await service.has_user_liked_recipe(user.id, recipe_id)
        except PersistenceError:
            liked = False

    return LikeListResponse(
        data=[
            LikeResponse(
                id=like.id,
                user_id=like.user_id,
                recipe_id=like.recipe_id,
                created_at=like.created_at,
            )
            for like in likes
        ],
        meta={"like_count": like_count, "liked": liked},
    )


@router.post(
    "/toggle",
    response_model=LikeToggleResponse,
    summary="Like or unlike a recipe",
    responses={
        404: {"description": "Recipe not found"},
        409: {"description": "A concurrent toggle already inserted the like"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def toggle_like(
    request: Request,
    recipe_id: UUID,
    user: CurrentUser,
    service: LikeService = Depends(get_like_service),
) -> LikeToggleResponse:
    """Flip the caller's like. ``like_count`` is read after the write."""
    result = await service.toggle_recipe_like(user.id, recipe_id)
    return LikeToggleResponse(
        data=LikeToggleData(liked=result.liked, like_count=result.like_count)
    )


@users_router.get(
    "/{user_id}/liked-recipes",
    response_model=RecipeListResponse,
    summary="List recipes a user liked",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_liked_recipes(
    request: Request,
    user_id: UUID,
    service: LikeService = Depends(get_like_service),
) -> RecipeListResponse:
    recipes = await service.get_user_liked_recipes(user_id)
    return RecipeListResponse(
        data=[RecipeResponse.from_entity(r) for r in recipes],
        meta={"total": len(recipes)},
    )
