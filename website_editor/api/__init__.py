"""API routes."""

from .feeds import router as feeds_router
from .revisions import router as revisions_router
from .uis import router as uis_router

__all__ = ["feeds_router", "revisions_router", "uis_router"]
