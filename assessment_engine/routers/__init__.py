"""API routers."""

from .assessments import router as assessments_router
from .auth import router as auth_router
from .health import router as health_router
from .responses import router as responses_router

__all__ = [
    "assessments_router",
    "auth_router",
    "health_router",
    "responses_router",
]
