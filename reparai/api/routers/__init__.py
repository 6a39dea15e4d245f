"""API sub-routers assembled into a single api_router."""

from fastapi import APIRouter

from reparai.api.routers.cache import router as cache_router
from reparai.api.routers.funnel import router as funnel_router
from reparai.api.routers.health import router as health_router

api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(funnel_router, prefix="/funnel", tags=["funnel"])
api_router.include_router(cache_router, prefix="/cache", tags=["cache"])
