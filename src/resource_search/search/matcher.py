"""Evaluate a parsed query against one index generation.

Filters narrow the candidate set first (AND across filters), then every
free-text term must match at least one field of each surviving candidate
(OR across fields, AND across terms). Every successful field match emits a
RawHit; de-duplication and scoring happen in the scorer.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import logging

from resource_search.domain.errors import SearchEngineError
from resource_search.domain.model import MatchField, Resource
from resource_search.domain.query import FieldFilter, FilterField, Query, has_wildcard
from resource_search.search.indexer import IndexEntry, IndexGeneration
from resource_search.search.patterns import fold, matches


logger = logging.getLogger(__name__)

# Short names users type for common resource types
TYPE_ALIASES: dict[str, tuple[str, ...]] = {
    "vm": ("microsoft.compute/virtualmachines", "virtualmachine", "virtualmachines"),
    "storage": ("microsoft.storage/storageaccounts", "storageaccount", "storageaccounts"),
    "aks": ("microsoft.containerservice/managedclusters", "managedcluster", "managedclusters"),
    "network": ("microsoft.network/virtualnetworks", "virtualnetwork", "virtualnetworks"),
    "keyvault": ("microsoft.keyvault/vaults", "vault", "vaults"),
    "sql": ("microsoft.sql/servers", "server", "servers"),
    "acr": ("microsoft.containerregistry/registries", "registry", "registries"),
    "aci": ("microsoft.containerinstance/containergroups", "containergroup", "containergroups"),
    "webapp": ("microsoft.web/sites", "site", "sites"),
    "function": ("microsoft.web/sites", "functionapp", "functions"),
}


@dataclass(slots=True, frozen=True)
class RawHit:
    """A single field match before de-duplication.

    Attributes:
        resource_id: Matched resource.
        field: Field that matched.
        value: Display value (tag hits render as ``key=value``).
        matched_text: Folded text the term or filter was compared with.
        term: Query term or filter value that produced the hit.
        via_filter: True for explicit ``field:value`` filter hits.
    """

    resource_id: str
    field: MatchField
    value: str
    matched_text: str
    term: str
    via_filter: bool = False

    @property
    def has_wildcard(self) -> bool:
        return has_wildcard(self.term)


def match_query(query: Query, generation: IndexGeneration) -> list[RawHit]:
    """Produce raw, unordered hits for ``query`` against ``generation``."""
    if query.is_empty or generation.is_empty:
        return []

    candidates: set[str] | None = None
    for field_filter in query.filters:
        resolved = resolve_filter(field_filter, generation)
        candidates = resolved if candidates is None else candidates & resolved
        if not candidates:
            return []

    term_hits: list[RawHit] = []
    for term in query.terms:
        pool = _entry_pool(generation, candidates)
        matched_ids: set[str] = set()
        for entry in pool:
            if matches(entry.folded, term):
                matched_ids.add(entry.resource_id)
                term_hits.append(
                    RawHit(
                        resource_id=entry.resource_id,
                        field=entry.field,
                        value=entry.display_value,
                        matched_text=entry.folded,
                        term=term,
                    )
                )
        candidates = matched_ids if candidates is None else candidates & matched_ids
        if not candidates:
            return []

    # Narrowing by later terms can drop resources that matched earlier ones
    hits = [hit for hit in term_hits if hit.resource_id in candidates]
    for resource_id in candidates:
        resource = generation.resources[resource_id]
        hits.extend(_filter_hit(field_filter, resource) for field_filter in query.filters)

    logger.debug("Query %r matched %d resources with %d hits", query.raw, len(candidates), len(hits))
    return hits


def resolve_filter(field_filter: FieldFilter, generation: IndexGeneration) -> set[str]:
    """Return the ids of resources satisfying one filter.

    Filter values are substring or glob matches, so every distinct value of
    the field is tested. The scan runs over the exact map keys, not the
    per-resource entries, so its cost follows the number of distinct values.
    """
    if field_filter.field is FilterField.TAG:
        return _resolve_tag_filter(field_filter, generation)

    needle = field_filter.value or ""
    values = generation.exact_map(field_filter.field.match_field)
    resolved: set[str] = set()
    check_type = field_filter.field is FilterField.TYPE
    for folded_value, ids in values.items():
        if matches(folded_value, needle) or (check_type and _type_matches(folded_value, needle)):
            resolved.update(ids)
    return resolved


def _resolve_tag_filter(field_filter: FieldFilter, generation: IndexGeneration) -> set[str]:
    resolved: set[str] = set()
    key = field_filter.key
    if key is not None and not has_wildcard(key):
        value_maps = [generation.tag_values.get(fold(key), {})]
    else:
        value_maps = [
            value_map
            for folded_key, value_map in generation.tag_values.items()
            if key is None or matches(folded_key, key)
        ]

    for value_map in value_maps:
        for folded_value, ids in value_map.items():
            if field_filter.value is None or matches(folded_value, field_filter.value):
                resolved.update(ids)
    return resolved


def _type_matches(folded_type: str, needle: str) -> bool:
    simple = folded_type.rsplit("/", 1)[-1]
    if simple != folded_type and matches(simple, needle):
        return True
    aliases = TYPE_ALIASES.get(fold(needle), ())
    return any(alias in folded_type for alias in aliases)


def _tag_satisfies(field_filter: FieldFilter, tag_key: str, tag_value: str) -> bool:
    key = field_filter.key
    if key is not None:
        if has_wildcard(key):
            if not matches(fold(tag_key), key):
                return False
        elif fold(tag_key) != fold(key):
            return False
    return field_filter.value is None or matches(fold(tag_value), field_filter.value)


def _filter_hit(field_filter: FieldFilter, resource: Resource) -> RawHit:
    term = field_filter.display()
    if field_filter.field is FilterField.TAG:
        for tag_key in sorted(resource.tags):
            tag_value = resource.tags[tag_key]
            if _tag_satisfies(field_filter, tag_key, tag_value):
                return RawHit(
                    resource_id=resource.id,
                    field=MatchField.TAG,
                    value=f"{tag_key}={tag_value}",
                    matched_text=fold(tag_value),
                    term=term,
                    via_filter=True,
                )
        raise SearchEngineError(f"Tag filter {term} admitted {resource.id} without a matching tag")

    match_field = field_filter.field.match_field
    value = resource.field_value(match_field)
    return RawHit(
        resource_id=resource.id,
        field=match_field,
        value=value,
        matched_text=fold(value),
        term=term,
        via_filter=True,
    )


def _entry_pool(generation: IndexGeneration, candidates: set[str] | None) -> Iterable[IndexEntry]:
    if candidates is None:
        return generation.entries
    return (entry for resource_id in candidates for entry in generation.entries_by_resource[resource_id])
