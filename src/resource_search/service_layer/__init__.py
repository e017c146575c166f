"""Service layer - orchestrates the engine for the UI and background refresh."""

from resource_search.service_layer.refresh import ResourceRefresher
from resource_search.service_layer.search_session import SearchHistory, SearchSession, SessionState


__all__ = ["ResourceRefresher", "SearchHistory", "SearchSession", "SessionState"]
