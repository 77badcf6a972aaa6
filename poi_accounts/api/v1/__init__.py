"""API v1 routes."""

from fastapi import APIRouter

from poi_accounts.api.v1 import auth, favorites, health, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(favorites.router, prefix="/users", tags=["favorites"])
