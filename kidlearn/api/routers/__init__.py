"""API routers."""

from kidlearn.api.routers.adaptive_router import router as adaptive_router

__all__ = ["adaptive_router"]
