"""
External integrations for the adaptive engine.

Modules:
- recommendation_client: httpx client for remote recommendation endpoints
"""
from .recommendation_client import (
    RecommendationClient,
    RecommendationServiceError,
    parse_recommendation_response,
)

__all__ = [
    "RecommendationClient",
    "RecommendationServiceError",
    "parse_recommendation_response",
]
