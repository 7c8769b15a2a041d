"""API routes for mdcanvas."""

from fastapi import APIRouter

from mdcanvas.api.routes.documents import router as documents_router
from mdcanvas.api.routes.engine import router as engine_router

# Main API router
api_router = APIRouter()

api_router.include_router(engine_router, tags=["Layout"])
api_router.include_router(documents_router, prefix="/documents", tags=["Documents"])

__all__ = ["api_router"]
