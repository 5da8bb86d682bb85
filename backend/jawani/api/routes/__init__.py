"""API route registrations."""
from fastapi import APIRouter

from jawani.api.routes import auth, media


api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(media.router)

__all__ = ["api_router"]
