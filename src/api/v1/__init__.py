"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.auth import profile_router
from api.v1.routes.auth import router as auth_router
from api.v1.routes.comments import recipe_comments_router
from api.v1.routes.comments import router as comments_router
from api.v1.routes.likes import router as likes_router
from api.v1.routes.likes import users_router as liked_recipes_router
from api.v1.routes.recipes import router as recipes_router
from api.v1.routes.recipes import users_router as user_recipes_router
from api.v1.routes.stats import recipe_stats_router
from api.v1.routes.stats import router as stats_router

router = APIRouter()
router.include_router(recipes_router)
router.include_router(user_recipes_router)
router.include_router(recipe_comments_router)
router.include_router(comments_router)
router.include_router(likes_router)
router.include_router(liked_recipes_router)
router.include_router(recipe_stats_router)
router.include_router(stats_router)
router.include_router(auth_router)
router.include_router(profile_router)
