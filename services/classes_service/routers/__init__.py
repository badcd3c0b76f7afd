"""Classes service routers."""

from services.classes_service.routers.classes import router as classes_router
from services.classes_service.routers.public import router as public_router
from services.classes_service.routers.sessions import router as sessions_router

__all__ = [
    "classes_router",
    "public_router",
    "sessions_router",
]
