"""Domain model - resources and the searchable fields they expose.

Following Cosmic Python principles:
- Value Objects are immutable (frozen=True)
- No infrastructure dependencies

A Resource is ingested once per index generation and never mutated afterwards.
Properties are carried for rendering only; matching works on the string fields.
"""

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class MatchField(str, Enum):
    """Resource field that produced a search hit."""

    NAME = "name"
    TYPE = "type"
    LOCATION = "location"
    RESOURCE_GROUP = "resource_group"
    TAG = "tag"

    @property
    def is_secondary(self) -> bool:
        return self is MatchField.TAG


class Resource(BaseModel):
    """A cloud infrastructure object as delivered by the inventory provider.

    Accepts both snake_case names and the camelCase keys emitted by the
    Azure CLI (``resourceGroup``, ``provisioningState``).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = ""
    name: str = ""
    type: str = ""
    location: str = ""
    resource_group: str = Field(default="", validation_alias=AliasChoices("resource_group", "resourceGroup"))
    status: str = Field(default="", validation_alias=AliasChoices("status", "provisioningState"))
    tags: dict[str, str] = Field(default_factory=dict)
    properties: dict[str, Any] = Field(default_factory=dict)

    @field_validator("name", "type", "location", "resource_group", "status", "id", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> dict[str, str]:
        if not value:
            return {}
        return {str(key): "" if tag_value is None else str(tag_value) for key, tag_value in dict(value).items()}

    @field_validator("properties", mode="before")
    @classmethod
    def _coerce_properties(cls, value: Any) -> dict[str, Any]:
        return dict(value) if value else {}

    @model_validator(mode="before")
    @classmethod
    def _derive_id(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("id"):
            return data
        group = data.get("resource_group") or data.get("resourceGroup") or ""
        parts = (group, data.get("type") or "", data.get("name") or "")
        return {**data, "id": "/".join(str(part) for part in parts if part)}

    @property
    def simple_type(self) -> str:
        """Last segment of the provider type, e.g. ``virtualMachines``."""
        return self.type.rsplit("/", 1)[-1] if self.type else ""

    def field_value(self, field: MatchField) -> str:
        if field is MatchField.NAME:
            return self.name
        if field is MatchField.TYPE:
            return self.type
        if field is MatchField.LOCATION:
            return self.location
        if field is MatchField.RESOURCE_GROUP:
            return self.resource_group
        raise ValueError(f"{field.value} is not a scalar resource field")

    def property_text(self, key: str) -> str:
        """Render a property value as text; missing keys render as an empty string."""
        value = self.properties.get(key)
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)


class FieldMatch(BaseModel):
    """One scored field hit inside a ranked result."""

    model_config = ConfigDict(frozen=True)

    field: MatchField
    value: str
    score: float


class SearchResult(BaseModel):
    """Ranked, de-duplicated search result for a single resource.

    ``match_type`` and ``match_value`` describe the strongest hit; ``matches``
    keeps every contributing hit for renderers that list them per resource.
    """

    model_config = ConfigDict(frozen=True)

    resource_id: str
    resource_name: str
    match_type: MatchField
    match_value: str
    score: float
    matches: tuple[FieldMatch, ...] = ()
