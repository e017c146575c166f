"""Per-interaction search state for the terminal UI.

A SearchSession lives from the moment the user opens the search box until
they leave it:

    INACTIVE --enter()--> ACTIVE --commit()--> RESULTS_SHOWN --exit()--> INACTIVE

Every keystroke re-runs the query and refreshes suggestions. Escape returns
to the unfiltered resource view from any state.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from enum import Enum
import logging

from resource_search.config import Settings, get_settings
from resource_search.domain.errors import SearchEngineError
from resource_search.domain.model import SearchResult
from resource_search.search.engine import ResourceSearchEngine


logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Search box lifecycle."""

    INACTIVE = "inactive"
    ACTIVE = "active"
    RESULTS_SHOWN = "results_shown"

    @property
    def is_open(self) -> bool:
        return self is not SessionState.INACTIVE


class SearchHistory:
    """Bounded, de-duplicated query history, most recent first."""

    def __init__(self, max_entries: int = 20) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.max_entries = max_entries
        self._entries: list[str] = []
        self._cursor = -1

    def add(self, query: str) -> None:
        """Front-insert ``query``, dropping an older duplicate and the oldest overflow."""
        query = query.strip()
        if not query:
            return
        if query in self._entries:
            self._entries.remove(query)
        self._entries.insert(0, query)
        del self._entries[self.max_entries :]
        self._cursor = -1

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def reset_cursor(self) -> None:
        self._cursor = -1

    def older(self) -> str | None:
        """Step back in history; ``None`` when already at the oldest entry."""
        if self._cursor + 1 >= len(self._entries):
            return None
        self._cursor += 1
        return self._entries[self._cursor]

    def newer(self) -> str | None:
        """Step forward in history; returns ``""`` once past the newest entry."""
        if self._cursor < 0:
            return None
        self._cursor -= 1
        if self._cursor < 0:
            return ""
        return self._entries[self._cursor]


class SearchSession:
    """UI-facing search state bound to one engine instance."""

    def __init__(
        self,
        engine: ResourceSearchEngine,
        *,
        settings: Settings | None = None,
        on_select: Callable[[str], None] | None = None,
        history: SearchHistory | None = None,
    ) -> None:
        self.engine = engine
        self.settings = settings or get_settings()
        self.on_select = on_select
        self.history = history or SearchHistory(self.settings.history_size)
        self.state = SessionState.INACTIVE
        self.query = ""
        self.results: list[SearchResult] = []
        self.selected_index = 0
        self.suggestions: list[str] = []

    # --- transitions -------------------------------------------------

    def enter(self) -> None:
        """Open the search box with a clean slate."""
        self._reset()
        self.history.reset_cursor()
        self.state = SessionState.ACTIVE
        logger.debug("Search session entered")

    def update_query(self, text: str) -> None:
        """Handle a keystroke: re-run the search and refresh suggestions."""
        if not self.state.is_open:
            logger.debug("Ignoring query update while search is inactive")
            return
        self.state = SessionState.ACTIVE
        self.query = text
        self._refresh()

    def commit(self) -> None:
        """Enter: remember the query and show its results."""
        if not self.state.is_open:
            return
        self.history.add(self.query)
        self.history.reset_cursor()
        self.state = SessionState.RESULTS_SHOWN
        logger.info("Search committed: %r -> %d results", self.query, len(self.results))

    def exit(self) -> None:
        """Escape: close the search box and restore the unfiltered view."""
        self._reset()
        self.history.reset_cursor()
        self.state = SessionState.INACTIVE
        logger.debug("Search session exited")

    # --- navigation --------------------------------------------------

    def select_next(self) -> SearchResult | None:
        return self._move_selection(1)

    def select_previous(self) -> SearchResult | None:
        return self._move_selection(-1)

    def history_previous(self) -> None:
        """Recall the next older history entry into the search box."""
        if not self.state.is_open:
            return
        recalled = self.history.older()
        if recalled is not None:
            self.update_query(recalled)

    def history_next(self) -> None:
        """Recall the next newer history entry (or clear the box past the newest)."""
        if not self.state.is_open:
            return
        recalled = self.history.newer()
        if recalled is not None:
            self.update_query(recalled)

    # --- views -------------------------------------------------------

    @property
    def selected_result(self) -> SearchResult | None:
        if not self.results:
            return None
        return self.results[self.selected_index]

    @property
    def inline_suggestions(self) -> list[str]:
        return self.suggestions[: self.settings.inline_suggestions]

    def visible_resource_ids(self) -> list[str]:
        """Resource ids the tree view should show right now.

        A closed box or a blank query means no filter: every resource is
        visible in snapshot order.
        """
        if not self.state.is_open or not self.query.strip():
            return self.engine.resource_ids()
        return [result.resource_id for result in self.results]

    def status_line(self) -> str:
        if not self.state.is_open:
            return ""
        if not self.query.strip():
            return "Type to search"
        if not self.results:
            return "No results"
        hits = sum(max(1, len(result.matches)) for result in self.results)
        noun = "resource" if len(self.results) == 1 else "resources"
        return f"{hits} matches in {len(self.results)} {noun}"

    # --- internals ---------------------------------------------------

    def _refresh(self) -> None:
        try:
            self.results = self.engine.search(self.query)
        except SearchEngineError:
            logger.error("Search failed for %r; showing no results", self.query, exc_info=True)
            self.results = []
        self.selected_index = 0
        self.suggestions = self.engine.get_suggestions(
            _completion_prefix(self.query),
            limit=self.settings.max_suggestions,
        )

    def _move_selection(self, step: int) -> SearchResult | None:
        if not self.state.is_open or not self.results:
            return None
        self.selected_index = (self.selected_index + step) % len(self.results)
        selected = self.results[self.selected_index]
        if self.on_select is not None:
            self.on_select(selected.resource_id)
        return selected

    def _reset(self) -> None:
        self.query = ""
        self.results = []
        self.selected_index = 0
        self.suggestions = []


def _completion_prefix(query: str) -> str:
    """The fragment being typed: the last token, past any ``field:`` or ``key=``."""
    if not query or query[-1].isspace():
        return ""
    fragment = query.split()[-1]
    for separator in (":", "="):
        fragment = fragment.rpartition(separator)[2]
    return fragment
