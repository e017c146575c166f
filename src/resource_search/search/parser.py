"""Query parser for the resource search DSL.

Grammar (whitespace separated tokens, combined with AND):

    <term>                 free-text over name/type/location/resource group/tag values
    type:<value>           resource type filter
    location:<value>       location filter (alias: loc)
    rg:<value>             resource-group filter (aliases: resourcegroup, resource-group)
    name:<value>           name filter
    tag:<key>=<value>      tag filter, split on the first "="
    tag:<key>              tag key present with any value

Parsing is total: anything that is not a well-formed filter becomes a
free-text term, colon included. A type-ahead box must never show a parse
error halfway through a word.
"""

from __future__ import annotations

import logging

from resource_search.domain.query import FieldFilter, FilterField, Query


logger = logging.getLogger(__name__)

_FIELD_ALIASES: dict[str, FilterField] = {
    "type": FilterField.TYPE,
    "location": FilterField.LOCATION,
    "loc": FilterField.LOCATION,
    "rg": FilterField.RG,
    "resourcegroup": FilterField.RG,
    "resource-group": FilterField.RG,
    "tag": FilterField.TAG,
    "name": FilterField.NAME,
}

# Tokens already combine with AND, so the operator is dropped when it joins two tokens.
_CONNECTOR_TOKENS = frozenset({"and"})


def parse_query(raw: str) -> Query:
    """Parse a raw query string. Never raises.

    Args:
        raw: Query exactly as typed.

    Returns:
        Query with ordered free-text terms and field filters.
    """
    if not raw:
        return Query(raw="")

    terms: list[str] = []
    filters: list[FieldFilter] = []

    tokens = raw.split()
    last = len(tokens) - 1
    for position, token in enumerate(tokens):
        if 0 < position < last and token.casefold() in _CONNECTOR_TOKENS:
            continue
        parsed = _parse_filter(token)
        if parsed is None:
            terms.append(token)
        else:
            filters.append(parsed)

    query = Query(raw=raw, terms=tuple(terms), filters=tuple(filters))
    logger.debug("Parsed query %r: %d terms, %d filters", raw, len(query.terms), len(query.filters))
    return query


def _parse_filter(token: str) -> FieldFilter | None:
    prefix, sep, value = token.partition(":")
    if not sep or not value:
        return None

    filter_field = _FIELD_ALIASES.get(prefix.casefold())
    if filter_field is None:
        return None

    if filter_field is FilterField.TAG:
        return _parse_tag_filter(value)
    return FieldFilter(field=filter_field, value=value)


def _parse_tag_filter(value: str) -> FieldFilter | None:
    key, sep, tag_value = value.partition("=")
    if not sep:
        return FieldFilter(field=FilterField.TAG, key=key, value=None)
    if not key and not tag_value:
        return None
    return FieldFilter(field=FilterField.TAG, key=key or None, value=tag_value or None)
