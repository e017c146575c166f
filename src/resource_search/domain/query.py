"""Parsed query value objects.

A Query is the structured form of what the user typed: ordered free-text
terms plus field filters. It keeps the raw string for display.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from resource_search.domain.model import MatchField


WILDCARD_CHARS = frozenset("*?")


def has_wildcard(text: str | None) -> bool:
    return bool(text) and any(char in WILDCARD_CHARS for char in text)


class FilterField(str, Enum):
    """Fields addressable with ``field:value`` syntax."""

    TYPE = "type"
    LOCATION = "location"
    RG = "rg"
    TAG = "tag"
    NAME = "name"

    @property
    def match_field(self) -> MatchField:
        return _FILTER_TO_MATCH[self]


_FILTER_TO_MATCH = {
    FilterField.TYPE: MatchField.TYPE,
    FilterField.LOCATION: MatchField.LOCATION,
    FilterField.RG: MatchField.RESOURCE_GROUP,
    FilterField.TAG: MatchField.TAG,
    FilterField.NAME: MatchField.NAME,
}


@dataclass(slots=True, frozen=True)
class FieldFilter:
    """A ``field:value`` restriction.

    For tag filters ``key`` holds the tag key; ``value`` is ``None`` when any
    tag value is acceptable (``tag:env``).
    """

    field: FilterField
    value: str | None
    key: str | None = None

    @property
    def has_wildcard(self) -> bool:
        return has_wildcard(self.value) or has_wildcard(self.key)

    def display(self) -> str:
        if self.field is FilterField.TAG:
            if self.value is None:
                return f"tag:{self.key}"
            return f"tag:{self.key or ''}={self.value}"
        return f"{self.field.value}:{self.value}"


@dataclass(slots=True, frozen=True)
class Query:
    """Structured search query."""

    raw: str
    terms: tuple[str, ...] = field(default_factory=tuple)
    filters: tuple[FieldFilter, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.terms and not self.filters

    @property
    def has_filters(self) -> bool:
        return bool(self.filters)
