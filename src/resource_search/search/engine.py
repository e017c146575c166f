"""Resource search engine - deep module over index, matcher, scorer and suggestions.

Hides the indexing, matching and ranking pipeline behind three calls:
``set_resources``, ``search`` and ``get_suggestions``.

Concurrency model: the only shared mutable state is the pointer to the
current index generation. ``set_resources`` builds the replacement without
holding the lock and takes it only to swap the pointer; readers take it only
to read the pointer and then work on the immutable generation.
"""

from __future__ import annotations

from collections.abc import Iterable
import logging
import threading

from resource_search.domain.errors import IndexBuildError, SearchEngineError
from resource_search.domain.model import Resource, SearchResult
from resource_search.observability.metrics import (
    INDEX_BUILD_LATENCY,
    INDEX_REBUILDS,
    INDEX_RESOURCE_COUNT,
    SEARCH_LATENCY,
    SEARCH_REQUESTS,
    track_latency,
)
from resource_search.observability.tracing import create_span
from resource_search.search.indexer import IndexGeneration, build_generation
from resource_search.search.matcher import match_query
from resource_search.search.parser import parse_query
from resource_search.search.scorer import rank_hits
from resource_search.search.suggestions import DEFAULT_MIN_LENGTH, suggest


logger = logging.getLogger(__name__)


class ResourceSearchEngine:
    """Searchable view over one resource snapshot at a time.

    Each instance is independent; create one per subscription or per test.
    """

    def __init__(self, *, suggestion_min_length: int = DEFAULT_MIN_LENGTH) -> None:
        self.suggestion_min_length = suggestion_min_length
        self._lock = threading.Lock()
        self._generation = IndexGeneration.empty()
        self._next_number = 1
        self._build_error: IndexBuildError | None = None
        self._build_error_number = 0

    def set_resources(self, resources: Iterable[Resource]) -> None:
        """Replace the searchable set. Never raises.

        A failed build is logged and leaves the previous generation in
        place; the failure is reported by the next ``search`` call. Builds may
        finish out of order: an older success or failure never overrides the
        outcome of a newer build.
        """
        snapshot = list(resources)
        with self._lock:
            number = self._next_number
            self._next_number += 1

        with create_span("index.build", attributes={"index.generation": number, "index.resources": len(snapshot)}):
            try:
                with track_latency(INDEX_BUILD_LATENCY):
                    generation = build_generation(snapshot, number)
            except IndexBuildError as exc:
                INDEX_REBUILDS.labels(outcome="error").inc()
                logger.error("Index generation %d failed to build: %s", number, exc, exc_info=True)
                with self._lock:
                    if number > max(self._generation.number, self._build_error_number):
                        self._build_error = exc
                        self._build_error_number = number
                    else:
                        logger.debug("Ignoring failure of stale generation %d", number)
                return

        with self._lock:
            if generation.number < self._generation.number:
                # A later snapshot already won; drop this one
                logger.debug("Discarding stale generation %d", generation.number)
                return
            self._generation = generation
            if self._build_error_number < generation.number:
                self._build_error = None

        INDEX_REBUILDS.labels(outcome="ok").inc()
        INDEX_RESOURCE_COUNT.set(generation.resource_count)
        logger.info(
            "Published index generation %d with %d resources (%d entries)",
            generation.number,
            generation.resource_count,
            len(generation.entries),
        )

    def search(self, query: str) -> list[SearchResult]:
        """Run a query and return ranked results.

        Malformed syntax never errors; an empty query or an empty index
        yields an empty list.

        Raises:
            SearchEngineError: The last index build failed its invariants.
        """
        generation, build_error = self._snapshot()
        if build_error is not None:
            SEARCH_REQUESTS.labels(operation="search", outcome="error").inc()
            raise SearchEngineError("Search index is unavailable after a failed rebuild") from build_error

        parsed = parse_query(query)
        if parsed.is_empty or generation.is_empty:
            SEARCH_REQUESTS.labels(operation="search", outcome="empty").inc()
            return []

        with (
            create_span("search.query", attributes={"index.generation": generation.number}) as span,
            track_latency(SEARCH_LATENCY, operation="search"),
        ):
            results = rank_hits(match_query(parsed, generation), generation)
            span.set_attribute("search.results", len(results))

        SEARCH_REQUESTS.labels(operation="search", outcome="ok" if results else "empty").inc()
        return results

    def get_suggestions(self, partial: str, limit: int | None = None) -> list[str]:
        """Prefix completions for ``partial`` from the current generation."""
        generation, _ = self._snapshot()
        with track_latency(SEARCH_LATENCY, operation="suggest"):
            suggestions = suggest(generation, partial, min_length=self.suggestion_min_length, limit=limit)
        SEARCH_REQUESTS.labels(operation="suggest", outcome="ok" if suggestions else "empty").inc()
        return suggestions

    def resource(self, resource_id: str) -> Resource | None:
        generation, _ = self._snapshot()
        return generation.resources.get(resource_id)

    def resource_ids(self) -> list[str]:
        """Every indexed id in snapshot order (the unfiltered view)."""
        generation, _ = self._snapshot()
        return list(generation.resources)

    @property
    def generation_number(self) -> int:
        return self._snapshot()[0].number

    @property
    def resource_count(self) -> int:
        return self._snapshot()[0].resource_count

    def _snapshot(self) -> tuple[IndexGeneration, IndexBuildError | None]:
        with self._lock:
            return self._generation, self._build_error
