"""
Adaptive Engine API Router.

Endpoints:
- POST /recommendations: next difficulty and weighted activities for a child

The ML connector is tried first when enabled; the heuristic answers otherwise.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from loguru import logger
from pydantic import Field

from kidlearn.adaptive.models import (
    AdaptiveContext,
    AdaptiveRecommendation,
    PerformanceSignal,
    RecommendationSource,
    WireModel,
)
from kidlearn.adaptive.service import AdaptiveService

router = APIRouter()


# ========================================
# Request/Response Models
# ========================================


class RecommendationRequest(AdaptiveContext):
    """Adaptive context as posted by clients. At least one signal is required."""

    recent_performance: tuple[PerformanceSignal, ...] = Field(..., min_length=1)


class RecommendationData(WireModel):
    recommendation: AdaptiveRecommendation
    source: RecommendationSource


class RecommendationResponse(WireModel):
    """Response envelope for a recommendation."""

    status: str = "success"
    data: RecommendationData


# ========================================
# Dependencies
# ========================================


def get_adaptive_service(request: Request) -> AdaptiveService:
    return request.app.state.adaptive_service


# ========================================
# Endpoints
# ========================================


@router.post(
    "/recommendations",
    response_model=RecommendationResponse,
    response_model_exclude_none=True,
    summary="Generate an adaptive recommendation for a child",
)
async def get_adaptive_recommendations(
    context: RecommendationRequest,
    service: AdaptiveService = Depends(get_adaptive_service),
) -> RecommendationResponse:
    """
    Propose the next difficulty level and weighted activities.

    Combines the local heuristic with the optional ML connector. The
    ``source`` field reports which one actually answered.
    """
    logger.info(
        f"Recommendation requested for child {context.child_id} "
        f"({context.target_category.value}, {context.current_difficulty.value})"
    )

    try:
        recommendation, source = await service.get_recommendations(context)
    except Exception as exc:
        logger.exception("Failed to generate adaptive recommendation")
        raise HTTPException(
            status_code=500,
            detail="Unable to generate an adaptive recommendation",
        ) from exc

    return RecommendationResponse(
        data=RecommendationData(recommendation=recommendation, source=source),
    )
