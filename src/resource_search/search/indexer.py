"""Index generations built from one resource snapshot.

Each generation is built in one pass into local structures and is immutable
afterwards. The engine publishes a generation only once it is complete, so
readers never observe a half-built index.

A generation holds:
- exact-value maps per field (folded value -> resource ids) used for filter lookups
- a flat tuple of (resource id, field, value) entries for substring/wildcard scans
- token frequencies for autocomplete
"""

from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
from types import MappingProxyType

from resource_search.domain.errors import IndexBuildError
from resource_search.domain.model import MatchField, Resource
from resource_search.search.patterns import fold


logger = logging.getLogger(__name__)

SCALAR_FIELDS: tuple[MatchField, ...] = (
    MatchField.NAME,
    MatchField.TYPE,
    MatchField.LOCATION,
    MatchField.RESOURCE_GROUP,
)

_EMPTY_MAP: Mapping = MappingProxyType({})


@dataclass(slots=True, frozen=True)
class IndexEntry:
    """One searchable field value of one resource.

    For tag entries ``value`` is the tag value and ``key`` the tag key.
    """

    resource_id: str
    field: MatchField
    value: str
    folded: str
    key: str | None = None

    @property
    def display_value(self) -> str:
        if self.field is MatchField.TAG:
            return f"{self.key}={self.value}"
        return self.value


@dataclass(frozen=True)
class IndexGeneration:
    """Complete, internally consistent lookup structures for one snapshot."""

    number: int
    built_at: datetime
    resources: Mapping[str, Resource]
    exact: Mapping[MatchField, Mapping[str, frozenset[str]]]
    tag_values: Mapping[str, Mapping[str, frozenset[str]]]
    entries: tuple[IndexEntry, ...]
    entries_by_resource: Mapping[str, tuple[IndexEntry, ...]]
    token_counts: Mapping[str, int] = field(default_factory=lambda: _EMPTY_MAP)

    @classmethod
    def empty(cls, number: int = 0) -> IndexGeneration:
        return cls(
            number=number,
            built_at=datetime.now(timezone.utc),
            resources=_EMPTY_MAP,
            exact=MappingProxyType({f: _EMPTY_MAP for f in (*SCALAR_FIELDS, MatchField.TAG)}),
            tag_values=_EMPTY_MAP,
            entries=(),
            entries_by_resource=_EMPTY_MAP,
        )

    @property
    def resource_count(self) -> int:
        return len(self.resources)

    @property
    def is_empty(self) -> bool:
        return not self.resources

    def exact_map(self, match_field: MatchField) -> Mapping[str, frozenset[str]]:
        return self.exact.get(match_field, _EMPTY_MAP)


def build_generation(resources: Iterable[Resource], number: int) -> IndexGeneration:
    """Build a new index generation from a resource snapshot.

    Args:
        resources: Snapshot in display order. Duplicate ids keep the first record.
        number: Monotonic generation number assigned by the engine.

    Returns:
        Fully built, immutable generation.

    Raises:
        IndexBuildError: If the built structures fail their consistency check
            or memory runs out mid-build.
    """
    try:
        generation = _build(resources, number)
    except MemoryError as exc:
        raise IndexBuildError(f"Out of memory while building generation {number}") from exc

    _verify(generation)
    return generation


def _build(resources: Iterable[Resource], number: int) -> IndexGeneration:
    by_id: dict[str, Resource] = {}
    exact: dict[MatchField, defaultdict[str, set[str]]] = {
        match_field: defaultdict(set) for match_field in (*SCALAR_FIELDS, MatchField.TAG)
    }
    tag_values: defaultdict[str, defaultdict[str, set[str]]] = defaultdict(lambda: defaultdict(set))
    entries: list[IndexEntry] = []
    entries_by_resource: dict[str, tuple[IndexEntry, ...]] = {}
    token_counts: Counter[str] = Counter()
    duplicates = 0

    for resource in resources:
        resource_id = resource.id
        if resource_id in by_id:
            duplicates += 1
            continue
        by_id[resource_id] = resource

        own_entries: list[IndexEntry] = []
        for match_field in SCALAR_FIELDS:
            value = resource.field_value(match_field)
            if not value:
                continue
            folded = fold(value)
            exact[match_field][folded].add(resource_id)
            own_entries.append(IndexEntry(resource_id, match_field, value, folded))

        for tag_key, tag_value in resource.tags.items():
            folded_key = fold(tag_key)
            exact[MatchField.TAG][folded_key].add(resource_id)
            tag_values[folded_key][fold(tag_value)].add(resource_id)
            if tag_value:
                own_entries.append(IndexEntry(resource_id, MatchField.TAG, tag_value, fold(tag_value), tag_key))

        entries.extend(own_entries)
        entries_by_resource[resource_id] = tuple(own_entries)
        token_counts.update(_suggestion_tokens(resource))

    if duplicates:
        logger.warning("Skipped %d resources with duplicate ids in generation %d", duplicates, number)

    return IndexGeneration(
        number=number,
        built_at=datetime.now(timezone.utc),
        resources=MappingProxyType(by_id),
        exact=MappingProxyType(
            {
                match_field: MappingProxyType({value: frozenset(ids) for value, ids in values.items()})
                for match_field, values in exact.items()
            }
        ),
        tag_values=MappingProxyType(
            {
                key: MappingProxyType({value: frozenset(ids) for value, ids in values.items()})
                for key, values in tag_values.items()
            }
        ),
        entries=tuple(entries),
        entries_by_resource=MappingProxyType(entries_by_resource),
        token_counts=MappingProxyType(dict(token_counts)),
    )


def _suggestion_tokens(resource: Resource) -> set[str]:
    """Distinct autocomplete tokens for one resource (counted once per resource)."""
    tokens = {resource.name, resource.type, resource.simple_type, resource.location}
    for tag_key, tag_value in resource.tags.items():
        tokens.add(tag_key)
        tokens.add(tag_value)
    tokens.discard("")
    return tokens


def _verify(generation: IndexGeneration) -> None:
    known = generation.resources.keys()
    for match_field, values in generation.exact.items():
        for ids in values.values():
            if not ids.issubset(known):
                raise IndexBuildError(
                    f"Generation {generation.number}: {match_field.value} map references unknown resources"
                )
    if len(generation.entries_by_resource) != len(generation.resources):
        raise IndexBuildError(f"Generation {generation.number}: entry table does not cover every resource")
