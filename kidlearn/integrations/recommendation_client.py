"""
Recommendation service API client.

Handles HTTP communication with a remote recommendation endpoint: either the
kidlearn API itself (``POST /api/adaptive/recommendations``) or an external
ML scoring connector. Every failure surfaces as RecommendationServiceError so
callers can fall back to the local heuristic.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from kidlearn.adaptive.models import (
    AdaptiveContext,
    AdaptiveRecommendation,
    RecommendationSource,
)

DEFAULT_ML_RATIONALE = ("ML connector enabled",)


class RecommendationServiceError(Exception):
    """Raised when the remote recommendation service cannot be used."""

    def __init__(
        self,
        message: str,
        *,
        offline: bool = False,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.offline = offline
        self.status_code = status_code


def parse_recommendation_response(
    data: Any,
    child_id: str,
) -> tuple[AdaptiveRecommendation, RecommendationSource]:
    """
    Normalize a response body into a recommendation and its source.

    Two shapes are accepted:
    - API envelope: ``{"status", "data": {"recommendation", "source"}}``
    - raw ML connector: ``{"nextDifficulty", "recommendations", "explanation"?}``

    Raises:
        ValueError: If the body matches neither shape (pydantic's
            ValidationError is a ValueError)
    """
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

    envelope = data.get("data")
    if isinstance(envelope, dict) and "recommendation" in envelope:
        recommendation = AdaptiveRecommendation.model_validate(envelope["recommendation"])
        source = RecommendationSource(envelope.get("source", RecommendationSource.ML.value))
        return recommendation, source

    recommendation = AdaptiveRecommendation.model_validate(
        {
            "childId": data.get("childId", child_id),
            "nextDifficulty": data.get("nextDifficulty"),
            "recommendations": data.get("recommendations"),
            "rationale": data.get("rationale") or data.get("explanation") or DEFAULT_ML_RATIONALE,
            "escalationWarnings": data.get("escalationWarnings"),
        }
    )
    return recommendation, RecommendationSource.ML


class RecommendationClient:
    """HTTP client for a remote recommendation endpoint."""

    def __init__(
        self,
        endpoint: str,
        api_key: str | None = None,
        timeout_ms: int = 5000,
    ):
        """
        Initialize recommendation client.

        Args:
            endpoint: Full URL the adaptive context is posted to
            api_key: Optional bearer token
            timeout_ms: Request timeout in milliseconds
        """
        self.endpoint = endpoint
        self.timeout_seconds = timeout_ms / 1000.0

        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        self.client = httpx.AsyncClient(
            headers=headers,
            timeout=httpx.Timeout(self.timeout_seconds),
            follow_redirects=True,
        )

    async def __aenter__(self) -> "RecommendationClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def fetch_recommendation(
        self,
        context: AdaptiveContext,
    ) -> tuple[AdaptiveRecommendation, RecommendationSource]:
        """
        Send a context and receive a recommendation. No retries.

        Args:
            context: Adaptive context to score

        Returns:
            Tuple of (recommendation, source reported by the service)

        Raises:
            RecommendationServiceError: On transport failure, non-2xx status,
                timeout, or malformed response body
        """
        try:
            response = await self.client.post(self.endpoint, json=context.to_payload())
            response.raise_for_status()
            data = response.json()

        except httpx.TimeoutException as e:
            logger.warning(f"Recommendation service timed out after {self.timeout_seconds}s")
            raise RecommendationServiceError("Recommendation service timed out") from e

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning(f"Recommendation service returned HTTP {status}")
            raise RecommendationServiceError(
                f"Recommendation service returned HTTP {status}",
                status_code=status,
            ) from e

        except httpx.ConnectError as e:
            logger.warning(f"Recommendation service unreachable: {e}")
            raise RecommendationServiceError(
                "Recommendation service unreachable",
                offline=True,
            ) from e

        except httpx.RequestError as e:
            logger.warning(f"Recommendation request error: {e}")
            raise RecommendationServiceError(f"Recommendation request failed: {e}") from e

        except ValueError as e:
            logger.warning(f"Recommendation service returned invalid JSON: {e}")
            raise RecommendationServiceError("Recommendation response is not valid JSON") from e

        try:
            return parse_recommendation_response(data, context.child_id)
        except ValueError as e:
            logger.warning(f"Malformed recommendation response: {e}")
            raise RecommendationServiceError("Malformed recommendation response") from e

    async def health_check(self) -> bool:
        """
        Check if the recommendation endpoint's host is reachable.

        Returns:
            True if ``<host>/health`` answers 200, False otherwise
        """
        url = httpx.URL(self.endpoint).join("/health")
        try:
            response = await self.client.get(url, timeout=2.0)
            return response.status_code == 200

        except httpx.HTTPError:
            return False
