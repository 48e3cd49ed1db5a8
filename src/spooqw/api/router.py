"""Main API router."""

from fastapi import APIRouter
from spooqw.api.config import router as config_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(config_router)
