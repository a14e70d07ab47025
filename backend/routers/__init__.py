"""API routers."""
from fastapi import APIRouter

from backend.routers import admin, food, health

router = APIRouter(prefix="/api/food", tags=["food"])
router.include_router(food.router)
router.include_router(admin.router, tags=["food-admin"])

__all__ = [
    "router",
    "admin",
    "food",
    "health",
]
