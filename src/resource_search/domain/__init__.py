"""Domain layer - pure value objects with no infrastructure dependencies.

Contains:
- Resource: the searchable cloud resource record
- Query / FieldFilter: the parsed form of a user query
- SearchResult / FieldMatch: ranked output consumed by renderers
- Error hierarchy
"""

from resource_search.domain.errors import (
    IndexBuildError,
    ResourceSearchError,
    SearchEngineError,
    SnapshotLoadError,
)
from resource_search.domain.model import FieldMatch, MatchField, Resource, SearchResult
from resource_search.domain.query import FieldFilter, FilterField, Query, has_wildcard


__all__ = [
    "FieldFilter",
    "FieldMatch",
    "FilterField",
    "IndexBuildError",
    "MatchField",
    "Query",
    "Resource",
    "ResourceSearchError",
    "SearchEngineError",
    "SearchResult",
    "SnapshotLoadError",
    "has_wildcard",
]
