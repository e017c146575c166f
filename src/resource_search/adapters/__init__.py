"""Adapters connecting external resource inventories to the engine."""

from resource_search.adapters.snapshot import (
    JsonSnapshotProvider,
    ResourceProvider,
    StaticResourceProvider,
    parse_resources,
)


__all__ = ["JsonSnapshotProvider", "ResourceProvider", "StaticResourceProvider", "parse_resources"]
