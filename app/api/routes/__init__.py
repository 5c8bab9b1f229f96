"""HTTP routes."""

from fastapi import APIRouter

from app.api.routes import auth, health, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(auth.login_router, tags=["auth"])
router.include_router(users.router, prefix="/api/users", tags=["users"])
