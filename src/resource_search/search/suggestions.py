"""Prefix autocomplete over indexed tokens.

Tokens are resource names, full and simplified types, locations, and tag
keys and values. They are ranked by how many resources carry them, then by
length so short completions come first.
"""

from __future__ import annotations

from resource_search.search.indexer import IndexGeneration
from resource_search.search.patterns import fold


DEFAULT_MIN_LENGTH = 2


def suggest(
    generation: IndexGeneration,
    partial: str,
    *,
    min_length: int = DEFAULT_MIN_LENGTH,
    limit: int | None = None,
) -> list[str]:
    """Return completions for ``partial``.

    Args:
        generation: Index generation to draw tokens from.
        partial: Text typed so far. Shorter than ``min_length`` yields ``[]``.
        min_length: Minimum prefix length before suggestions are offered.
        limit: Optional cap on the number of suggestions.

    Returns:
        De-duplicated suggestions, most frequent first, then shortest,
        then alphabetical.
    """
    prefix = fold(partial.strip())
    if len(prefix) < min_length:
        return []

    # Case variants collapse onto one suggestion; keep the most common spelling
    best: dict[str, tuple[int, str]] = {}
    totals: dict[str, int] = {}
    for token, count in generation.token_counts.items():
        folded = fold(token)
        if not folded.startswith(prefix):
            continue
        totals[folded] = totals.get(folded, 0) + count
        current = best.get(folded)
        if current is None or (count, token) > current:
            best[folded] = (count, token)

    ranked = sorted(totals, key=lambda folded: (-totals[folded], len(folded), folded, best[folded][1]))
    suggestions = [best[folded][1] for folded in ranked]
    if limit is not None:
        return suggestions[:limit]
    return suggestions
