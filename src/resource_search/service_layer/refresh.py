"""Background resource refresh.

The provider's blocking fetch runs in a worker thread; the resulting
snapshot is handed to the engine back on the event loop, so index swaps
stay serialized with keystroke handling.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging
import time

import anyio

from resource_search.adapters.snapshot import ResourceProvider
from resource_search.domain.model import Resource
from resource_search.search.engine import ResourceSearchEngine


logger = logging.getLogger(__name__)


class ResourceRefresher:
    """Feed an engine from a cached snapshot first, then from a live provider."""

    def __init__(self, engine: ResourceSearchEngine, provider: ResourceProvider) -> None:
        self.engine = engine
        self.provider = provider
        self.refresh_count = 0
        self.last_refresh_seconds: float | None = None

    def prime(self, resources: Sequence[Resource]) -> None:
        """Install cached resources immediately so search works before the first fetch."""
        self.engine.set_resources(resources)
        logger.debug("Primed engine with %d cached resources", len(resources))

    async def refresh(self) -> int:
        """Fetch a fresh snapshot off-loop and publish it.

        Returns:
            Number of resources in the new snapshot.

        Raises:
            Whatever the provider raises; the current index stays published.
        """
        start = time.perf_counter()
        resources = await anyio.to_thread.run_sync(self.provider.fetch)
        self.engine.set_resources(resources)
        self.refresh_count += 1
        self.last_refresh_seconds = time.perf_counter() - start
        logger.info(
            "Refreshed %d resources in %.3fs (refresh #%d)",
            len(resources),
            self.last_refresh_seconds,
            self.refresh_count,
        )
        return len(resources)
