"""
Recommendation Provider.

Keeps the current recommendation state for one consumer (a page, a CLI run)
and refreshes it whenever the adaptive context changes:

    context change -> remote call -> Ok: store + cache
                                  -> failure: local heuristic + advisory

Each refresh takes a request token. A response that arrives after a newer
refresh started is discarded, so the newest context always wins.
"""
from __future__ import annotations

from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Protocol

from loguru import logger

from kidlearn.adaptive.models import (
    AdaptiveContext,
    AdaptiveRecommendation,
    RecommendationSource,
)
from kidlearn.adaptive.outcome import Err, Fallback, Ok, RecommendationOutcome
from kidlearn.adaptive.payload import build_recommendation_payload
from kidlearn.integrations.recommendation_client import (
    RecommendationClient,
    RecommendationServiceError,
)

FALLBACK_ADVISORY = "Heuristic fallback in use (recommendation service unavailable)"
OFFLINE_ADVISORY = "Local recommendation in use (offline mode)"
NO_CONTEXT_ERROR = "Unable to retrieve recommendations"
UNEXPECTED_ERROR = "Recommendation engine failed"

StateListener = Callable[["AdaptiveState"], None]


class RecommendationFetcher(Protocol):
    async def fetch_recommendation(
        self,
        context: AdaptiveContext,
    ) -> tuple[AdaptiveRecommendation, RecommendationSource]: ...


@dataclass(frozen=True)
class AdaptiveState:
    """Observable state of the provider."""

    loading: bool = False
    recommendation: AdaptiveRecommendation | None = None
    error: str | None = None
    source: RecommendationSource = RecommendationSource.NONE

    @property
    def is_degraded(self) -> bool:
        return self.source is RecommendationSource.FALLBACK

    @classmethod
    def from_outcome(cls, outcome: RecommendationOutcome) -> "AdaptiveState":
        if isinstance(outcome, Ok):
            return cls(recommendation=outcome.recommendation, source=outcome.source)
        if isinstance(outcome, Fallback):
            return cls(
                recommendation=outcome.recommendation,
                error=outcome.advisory,
                source=outcome.source,
            )
        return cls(error=outcome.reason, source=outcome.source)


async def resolve_recommendation(
    context: AdaptiveContext | None,
    fetcher: RecommendationFetcher,
) -> RecommendationOutcome:
    """
    Try the remote service, fall back to the local heuristic.

    Only RecommendationServiceError is recovered; anything else propagates.
    """
    if context is None:
        return Err(NO_CONTEXT_ERROR)

    try:
        recommendation, source = await fetcher.fetch_recommendation(context)
    except RecommendationServiceError as e:
        logger.warning(f"Remote recommendation failed for child {context.child_id}: {e}")
        advisory = OFFLINE_ADVISORY if e.offline else FALLBACK_ADVISORY
        return Fallback(build_recommendation_payload(context), advisory)

    return Ok(recommendation, source)


class RecommendationProvider:
    """
    Produce one recommendation per context, remote first.

    Usage:
        async with RecommendationProvider.from_settings(get_settings()) as provider:
            state = await provider.set_context(context)
            ranked = apply_recommendation(activities, state.recommendation)
    """

    def __init__(
        self,
        fetcher: RecommendationFetcher,
        cache_size: int = 128,
    ):
        self._fetcher = fetcher
        self._cache_size = cache_size
        self._cache: OrderedDict[str, AdaptiveState] = OrderedDict()
        self._listeners: list[StateListener] = []
        self._state = AdaptiveState()
        self._context: AdaptiveContext | None = None
        self._context_key: str | None = None
        self._token = 0

    @classmethod
    def from_settings(cls, settings) -> "RecommendationProvider":
        client = RecommendationClient(
            endpoint=settings.recommendation_endpoint,
            api_key=settings.recommendation_api_key,
            timeout_ms=settings.recommendation_timeout_ms,
        )
        return cls(client, cache_size=settings.recommendation_cache_size)

    async def __aenter__(self) -> "RecommendationProvider":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def close(self) -> None:
        close = getattr(self._fetcher, "close", None)
        if close is not None:
            await close()

    @property
    def state(self) -> AdaptiveState:
        return self._state

    @property
    def context(self) -> AdaptiveContext | None:
        return self._context

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def set_context(self, context: AdaptiveContext | None) -> AdaptiveState:
        """Refresh only when the context differs from the current one."""
        key = context.cache_key() if context is not None else None
        if self._token and key == self._context_key:
            return self._state
        return await self.refresh(context)

    async def refresh(
        self,
        context: AdaptiveContext | None,
        *,
        force: bool = False,
    ) -> AdaptiveState:
        """
        Produce a recommendation for ``context`` and commit it as the state.

        Args:
            context: Context to score (None yields a hard error state)
            force: Skip the cache and always call the remote service

        Returns:
            The state after this call. When a newer refresh superseded this
            one, the newer state is returned unchanged.
        """
        self._token += 1
        token = self._token
        self._context = context
        self._context_key = context.cache_key() if context is not None else None

        if context is None:
            self._commit(AdaptiveState.from_outcome(Err(NO_CONTEXT_ERROR)))
            return self._state

        key = self._context_key
        if not force and key in self._cache:
            logger.debug(f"Recommendation cache hit for child {context.child_id}")
            self._cache.move_to_end(key)
            self._commit(self._cache[key])
            return self._state

        try:
            self._commit(replace(self._state, loading=True, error=None))
            outcome = await resolve_recommendation(context, self._fetcher)
        except Exception:
            logger.exception("Unexpected failure while resolving recommendation")
            if token == self._token:
                self._commit(AdaptiveState(error=UNEXPECTED_ERROR))
            raise

        if token != self._token:
            logger.debug(f"Discarding stale recommendation for child {context.child_id}")
            return self._state

        state = AdaptiveState.from_outcome(outcome)
        if isinstance(outcome, Ok):
            self._remember(key, state)
        self._commit(state)
        return state

    def _remember(self, key: str, state: AdaptiveState) -> None:
        if self._cache_size <= 0:
            return
        self._cache[key] = state
        self._cache.move_to_end(key)
        while len(self._cache) > self._cache_size:
            self._cache.popitem(last=False)

    def _commit(self, state: AdaptiveState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)
