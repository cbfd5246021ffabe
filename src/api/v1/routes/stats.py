"""Recipe stats API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from api.v1.dependencies import get_stats_service
from api.v1.schemas.stats import (
    RecipeStatsDetailResponse,
    RecipeStatsListResponse,
    RecipeStatsLookup,
    RecipeStatsResponse,
)
from core.exceptions import RecipeNotFoundError
from core.rate_limit import READ_LIMIT, limiter
from domain.entities.like import RecipeStats
from domain.services.stats_service import StatsService

recipe_stats_router = APIRouter(prefix="/recipes/{recipe_id}/stats", tags=["stats"])
router = APIRouter(prefix="/stats", tags=["stats"])


def _to_response(stats: RecipeStats) -> RecipeStatsResponse:
    return RecipeStatsResponse(
        recipe_id=stats.recipe_id,
        title=stats.title,
        like_count=stats.like_count,
        comment_count=stats.comment_count,
        created_at=stats.created_at,
    )


@recipe_stats_router.get(
    "",
    response_model=RecipeStatsDetailResponse,
    summary="Get like and comment counts for a recipe",
    responses={404: {"description": "Recipe not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_recipe_stats(
    request: Request,
    recipe_id: UUID,
    service: StatsService = Depends(get_stats_service),
) -> RecipeStatsDetailResponse:
    stats = await service.get_recipe_stats(recipe_id)
    if stats is None:
        raise RecipeNotFoundError(str(recipe_id))
    return RecipeStatsDetailResponse(data=_to_response(stats))


@router.get(
    "/recipes",
    response_model=RecipeStatsListResponse,
    summary="List recipes with stats",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_recipes_with_stats(
    request: Request,
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: StatsService = Depends(get_stats_service),
) -> RecipeStatsListResponse:
    """Stats rows, newest recipe first."""
    rows = await service.get_recipes_with_stats(limit=limit, offset=offset)
    return RecipeStatsListResponse(
        data=[_to_response(s) for s in rows],
        meta={"limit": limit, "offset": offset},
    )


@router.post(
    "/recipes/lookup",
    response_model=RecipeStatsListResponse,
    summary="Get stats for several recipes",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def lookup_recipe_stats(
    request: Request,
    body: RecipeStatsLookup,
    service: StatsService = Depends(get_stats_service),
) -> RecipeStatsListResponse:
    """Stats for the listed recipes. Unknown ids are skipped; order is not kept."""
    rows = await service.get_stats_for_recipes(body.recipe_ids)
    return RecipeStatsListResponse(
        data=[_to_response(s) for s in rows],
        meta={"total": len(rows)},
    )
