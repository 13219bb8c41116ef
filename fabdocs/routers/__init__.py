"""API routers package."""

from .documents import router as documents_router
from .metrics import router as metrics_router
from .system import router as system_router

__all__ = [
    "documents_router",
    "metrics_router",
    "system_router",
]
