"""Resource search indexing and query engine package.

This package provides a pure-Python, in-memory search stack:
- patterns: case-insensitive substring and glob wildcard matching
- parser: query DSL parsing (free-text terms and field filters)
- indexer: immutable index generations built from resource snapshots
- matcher: filter intersection and free-text term evaluation
- scorer: weighted relevance scoring and deterministic ranking
- suggestions: prefix autocomplete over indexed tokens
- engine: thread-safe facade publishing generations atomically
"""

from resource_search.search.engine import ResourceSearchEngine
from resource_search.search.parser import parse_query


__all__ = ["ResourceSearchEngine", "parse_query"]
