"""
Adaptive Service (server side).

Answers recommendation requests for the HTTP API. When the external ML
connector is enabled it is asked first; on any connector failure, or when it
is disabled, the explainable heuristic answers instead, adjusted for the
child's personalization flags.
"""
from __future__ import annotations

from loguru import logger

from kidlearn.adaptive.models import (
    AdaptiveContext,
    AdaptiveRecommendation,
    RecommendationSource,
)
from kidlearn.adaptive.outcome import Fallback, Ok
from kidlearn.adaptive.payload import build_recommendation_payload, personalize_recommendation
from kidlearn.adaptive.provider import RecommendationFetcher, resolve_recommendation
from kidlearn.integrations.recommendation_client import RecommendationClient


class AdaptiveService:
    """Stateless recommendation engine with an optional ML connector."""

    def __init__(self, ml_connector: RecommendationFetcher | None = None):
        self._ml_connector = ml_connector

    @classmethod
    def from_settings(cls, settings) -> "AdaptiveService":
        if not settings.has_ml_configured():
            return cls()
        logger.info(f"ML connector enabled: {settings.adaptive_ml_endpoint}")
        return cls(
            RecommendationClient(
                endpoint=settings.adaptive_ml_endpoint,
                api_key=settings.adaptive_ml_api_key,
                timeout_ms=settings.adaptive_ml_timeout_ms,
            )
        )

    @property
    def ml_active(self) -> bool:
        return self._ml_connector is not None

    async def close(self) -> None:
        close = getattr(self._ml_connector, "close", None)
        if close is not None:
            await close()

    async def get_recommendations(
        self,
        context: AdaptiveContext,
    ) -> tuple[AdaptiveRecommendation, RecommendationSource]:
        """
        Recommend the next difficulty and activities for a context.

        Returns:
            Tuple of (recommendation, source) where source is ``ml`` only
            when the connector actually answered
        """
        recommendation = None
        if self._ml_connector is not None:
            try:
                outcome = await resolve_recommendation(context, self._ml_connector)
            except Exception as e:
                logger.warning(f"ML connector failed, using internal heuristics: {e}")
            else:
                if isinstance(outcome, Ok):
                    return outcome.recommendation, RecommendationSource.ML
                logger.warning("ML connector failed, using internal heuristics")
                if isinstance(outcome, Fallback):
                    recommendation = outcome.recommendation

        if recommendation is None:
            recommendation = build_recommendation_payload(context)
        return (
            personalize_recommendation(recommendation, context.personalization),
            RecommendationSource.HEURISTIC,
        )
