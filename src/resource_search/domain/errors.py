"""Error hierarchy for the search engine.

Query syntax never produces an error; these cover internal invariant
failures and unreadable resource snapshots only.
"""


class ResourceSearchError(Exception):
    """Base error for the resource search package."""


class IndexBuildError(ResourceSearchError):
    """Raised when an index generation cannot be built consistently."""


class SearchEngineError(ResourceSearchError):
    """Raised by a search when the engine is in an inconsistent state."""


class SnapshotLoadError(ResourceSearchError):
    """Raised when a resource snapshot cannot be read or decoded."""
