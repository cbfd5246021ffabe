"""Comment API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_comment_service
from api.v1.schemas.comment import (
    CommentBody,
    CommentDetailResponse,
    CommentListResponse,
    CommentResponse,
)
from api.v1.schemas.common import CountResponse
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.comment import Comment
from domain.services.comment_service import CommentService

recipe_comments_router = APIRouter(prefix="/recipes/{recipe_id}/comments", tags=["comments"])
router = APIRouter(prefix="/comments", tags=["comments"])


def _to_response(comment: Comment) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        recipe_id=comment.recipe_id,
        user_id=comment.user_id,
        content=comment.content,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
    )


@recipe_comments_router.get(
    "",
    response_model=CommentListResponse,
    summary="List a recipe's comments",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_comments(
    request: Request,
    recipe_id: UUID,
    service: CommentService = Depends(get_comment_service),
) -> CommentListResponse:
    """Comments with author names, oldest first."""
    comments = await service.get_recipe_comments(recipe_id)
    return CommentListResponse(
        data=[
            CommentResponse(
                id=c.id,
                recipe_id=c.recipe_id,
                user_id=c.user_id,
                content=c.content,
                created_at=c.created_at,
                updated_at=c.updated_at,
                username=c.username,
                full_name=c.full_name,
            )
            for c in comments
        ],
        meta={"total": len(comments)},
    )


@recipe_comments_router.get(
    "/count",
    response_model=CountResponse,
    summary="Count a recipe's comments",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def count_comments(
    request: Request,
    recipe_id: UUID,
    service: CommentService = Depends(get_comment_service),
) -> CountResponse:
    return CountResponse(data=await service.get_recipe_comment_count(recipe_id))


@recipe_comments_router.post(
    "",
    response_model=CommentDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a recipe",
    responses={404: {"description": "Recipe not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_comment(
    request: Request,
    recipe_id: UUID,
    body: CommentBody,
    user: CurrentUser,
    service: CommentService = Depends(get_comment_service),
) -> CommentDetailResponse:
    comment = await service.create_comment(user.id, recipe_id, body.content)
    return CommentDetailResponse(data=_to_response(comment))


@router.patch(
    "/{comment_id}",
    response_model=CommentDetailResponse,
    summary="Edit a comment",
    responses={404: {"description": "Comment not found or not written by caller"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_comment(
    request: Request,
    comment_id: UUID,
    body: CommentBody,
    user: CurrentUser,
    service: CommentService = Depends(get_comment_service),
) -> CommentDetailResponse:
    comment = await service.update_comment(comment_id, user.id, body.content)
    return CommentDetailResponse(data=_to_response(comment))


@router.delete(
    "/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a comment",
    responses={404: {"description": "Comment not found or not written by caller"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_comment(
    request: Request,
    comment_id: UUID,
    user: CurrentUser,
    service: CommentService = Depends(get_comment_service),
) -> None:
    await service.delete_comment(comment_id, user.id)
    return None
