"""Relevance scoring and deterministic ranking.

Weights are fixed constants:

| Match kind                    | Weight |
|-------------------------------|--------|
| Exact full-value match        | 100    |
| Explicit field filter match   | 80     |
| Prefix match                  | 60     |
| Substring match               | 40     |
| Secondary field (tag)         | x0.75  |

Hits on independent fields add up, so a resource matching on name and tag
outranks one matching on name alone. Ties are broken by name, which keeps
keyboard navigation stable between identical searches.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from resource_search.domain.model import FieldMatch, MatchField, SearchResult
from resource_search.search.indexer import IndexGeneration
from resource_search.search.matcher import RawHit
from resource_search.search.patterns import fold, starts_with_wildcard


EXACT_WEIGHT = 100.0
FILTER_WEIGHT = 80.0
PREFIX_WEIGHT = 60.0
SUBSTRING_WEIGHT = 40.0
SECONDARY_FIELD_FACTOR = 0.75


def score_hit(hit: RawHit) -> float:
    """Score a single raw hit."""
    if hit.via_filter:
        base = FILTER_WEIGHT
    elif hit.has_wildcard:
        base = SUBSTRING_WEIGHT if starts_with_wildcard(hit.term) else PREFIX_WEIGHT
    else:
        term = fold(hit.term)
        if hit.matched_text == term:
            base = EXACT_WEIGHT
        elif hit.matched_text.startswith(term):
            base = PREFIX_WEIGHT
        else:
            base = SUBSTRING_WEIGHT

    if hit.field.is_secondary:
        return base * SECONDARY_FIELD_FACTOR
    return base


@dataclass
class _Accumulator:
    total: float = 0.0
    matches: list[FieldMatch] = field(default_factory=list)
    seen: set[tuple[MatchField, str, str]] = field(default_factory=set)


def rank_hits(hits: Iterable[RawHit], generation: IndexGeneration) -> list[SearchResult]:
    """De-duplicate hits per resource, sum scores and sort.

    Args:
        hits: Raw matcher output, in any order.
        generation: Generation the hits were produced from (used for names).

    Returns:
        One SearchResult per resource, by descending score then name.
    """
    per_resource: dict[str, _Accumulator] = {}
    for hit in hits:
        acc = per_resource.setdefault(hit.resource_id, _Accumulator())
        key = (hit.field, hit.value, hit.term)
        if key in acc.seen:
            continue
        acc.seen.add(key)
        score = score_hit(hit)
        acc.total += score
        acc.matches.append(FieldMatch(field=hit.field, value=hit.value, score=score))

    results: list[SearchResult] = []
    for resource_id, acc in per_resource.items():
        resource = generation.resources[resource_id]
        ordered = sorted(acc.matches, key=lambda m: (-m.score, m.field.value, m.value))
        best = ordered[0]
        results.append(
            SearchResult(
                resource_id=resource_id,
                resource_name=resource.name,
                match_type=best.field,
                match_value=best.value,
                score=acc.total,
                matches=tuple(ordered),
            )
        )

    results.sort(key=lambda r: (-r.score, r.resource_name.casefold(), r.resource_name, r.resource_id))
    return results
