"""
Outcome of one remote-with-fallback recommendation attempt.

    Ok(recommendation, source)        remote service answered
    Fallback(recommendation, advisory) remote failed, local heuristic used
    Err(reason)                        nothing could be produced
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from kidlearn.adaptive.models import AdaptiveRecommendation, RecommendationSource


@dataclass(frozen=True)
class Ok:
    recommendation: AdaptiveRecommendation
    source: RecommendationSource = RecommendationSource.ML


@dataclass(frozen=True)
class Fallback:
    recommendation: AdaptiveRecommendation
    advisory: str
    source: RecommendationSource = RecommendationSource.FALLBACK


@dataclass(frozen=True)
class Err:
    reason: str
    source: RecommendationSource = RecommendationSource.NONE


RecommendationOutcome = Union[Ok, Fallback, Err]
