"""
FastAPI application for the kidlearn adaptive engine.

Provides REST API for:
- Adaptive recommendations (heuristic engine + optional ML connector)
- Health and configuration status
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from config import get_settings
from kidlearn import __version__
from kidlearn.adaptive.service import AdaptiveService
from kidlearn.api.routers import adaptive_router
from kidlearn.core.logging_config import configure_logging

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    configure_logging(settings)
    logger.info("Starting kidlearn adaptive engine...")
    app.state.adaptive_service = AdaptiveService.from_settings(settings)
    logger.info(f"Service started on {settings.api_host}:{settings.api_port}")

    yield

    # Shutdown
    logger.info("Shutting down kidlearn adaptive engine...")
    await app.state.adaptive_service.close()


app = FastAPI(
    title="kidlearn Adaptive Engine",
    description="""
    Adaptive difficulty recommendations for neurodivergent learners.

    ## Data Flow

    ```
    AdaptiveContext (latest performance signal)
        ↓
    ML connector (optional) ──failure──┐
        ↓                              ↓
    AdaptiveRecommendation  ←  heuristic rule
    ```
    """,
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(adaptive_router, prefix="/api/adaptive", tags=["Adaptive"])


# ========================================
# Health & Status Endpoints
# ========================================


@app.get("/", tags=["Health"])
def root() -> dict[str, str]:
    """Root endpoint returning service info."""
    return {
        "service": "kidlearn-adaptive",
        "version": __version__,
        "status": "ok",
    }


@app.get("/health", tags=["Health"])
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "components": {
            "heuristic": "ok",
            "ml_connector": "configured" if settings.has_ml_configured() else "not_configured",
        },
    }
