"""Resource snapshot providers.

The inventory itself is owned by the surrounding application; these
adapters turn a provider's output into validated Resource records.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import orjson
from pydantic import ValidationError

from resource_search.domain.errors import SnapshotLoadError
from resource_search.domain.model import Resource


logger = logging.getLogger(__name__)


@runtime_checkable
class ResourceProvider(Protocol):
    """Anything that can produce a full resource snapshot (blocking call)."""

    def fetch(self) -> Sequence[Resource]: ...


class StaticResourceProvider:
    """Provider returning a fixed list, e.g. a cached snapshot."""

    def __init__(self, resources: Sequence[Resource]) -> None:
        self._resources = list(resources)

    def fetch(self) -> Sequence[Resource]:
        return list(self._resources)


class JsonSnapshotProvider:
    """Read resources from a JSON file.

    Accepts either a bare array (``az resource list`` output) or an object
    with a ``resources`` array.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def fetch(self) -> Sequence[Resource]:
        try:
            raw = self.path.read_bytes()
        except OSError as exc:
            raise SnapshotLoadError(f"Cannot read snapshot {self.path}: {exc}") from exc
        try:
            payload = orjson.loads(raw)
        except orjson.JSONDecodeError as exc:
            raise SnapshotLoadError(f"Snapshot {self.path} is not valid JSON: {exc}") from exc

        resources = parse_resources(payload, source=str(self.path))
        logger.info("Loaded %d resources from %s", len(resources), self.path)
        return resources


def parse_resources(payload: Any, *, source: str = "<payload>") -> list[Resource]:
    """Validate decoded JSON into Resource records.

    Raises:
        SnapshotLoadError: If the payload shape or any record is invalid.
    """
    if isinstance(payload, dict):
        payload = payload.get("resources")
    if not isinstance(payload, list):
        raise SnapshotLoadError(f"{source}: expected a list of resources")

    resources: list[Resource] = []
    for position, item in enumerate(payload):
        try:
            resources.append(Resource.model_validate(item))
        except ValidationError as exc:
            raise SnapshotLoadError(f"{source}: resource #{position} is invalid: {exc}") from exc
    return resources
