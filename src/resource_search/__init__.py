"""Keystroke-speed search over cloud resource inventories."""

from resource_search.domain import Resource, SearchResult
from resource_search.search import ResourceSearchEngine, parse_query


__all__ = ["Resource", "ResourceSearchEngine", "SearchResult", "parse_query"]

__version__ = "0.1.0"
