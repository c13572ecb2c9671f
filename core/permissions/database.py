"""Static lookup table mapping Terraform resource types to IAM actions."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

from pydantic import ValidationError

from core.errors import KnowledgeBaseError
from core.models import PermissionEntry

logger = logging.getLogger(__name__)

DEFAULT_PERMISSIONS_PATH = Path(__file__).with_name("permissions.json")


@dataclass(frozen=True)
class PermissionDatabase:
    """Read-only index of `PermissionEntry` records keyed by resource type."""

    entries: Mapping[str, PermissionEntry] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], source: Path | str = "<memory>") -> "PermissionDatabase":
        if not isinstance(data, Mapping):
            raise KnowledgeBaseError(source, "top-level document must be a mapping of resource types")
        entries: dict[str, PermissionEntry] = {}
        for resource_type, raw in data.items():
            if not isinstance(raw, Mapping):
                raise KnowledgeBaseError(source, f"entry {resource_type!r} must be a mapping")
            try:
                entries[resource_type] = PermissionEntry(
                    resource_type=resource_type,
                    actions=raw.get("actions") or (),
                    resource_types=raw.get("resource_types") or (),
                )
            except ValidationError as exc:
                raise KnowledgeBaseError(source, f"entry {resource_type!r} is invalid: {exc}") from exc
        return cls(entries)

    @classmethod
    def load(cls, path: Path | str = DEFAULT_PERMISSIONS_PATH) -> "PermissionDatabase":
        path = Path(path)
        try:
            payload = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise KnowledgeBaseError(path, exc.strerror or str(exc)) from exc
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise KnowledgeBaseError(path, f"invalid JSON: {exc}") from exc
        database = cls.from_mapping(data, source=path)
        logger.debug("Loaded %d permission entries from %s", len(database), path)
        return database

    def lookup(self, resource_type: str) -> tuple[str, ...]:
        """Return the actions required for `resource_type`, or an empty tuple when unknown."""
        entry = self.entries.get(resource_type)
        if entry is None:
            return ()
        return entry.actions

    def entry(self, resource_type: str) -> Optional[PermissionEntry]:
        return self.entries.get(resource_type)

    def resource_types(self) -> list[str]:
        return sorted(self.entries)

    def __contains__(self, resource_type: object) -> bool:
        return resource_type in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)


@lru_cache(maxsize=None)
def default_database() -> PermissionDatabase:
    """Load the packaged knowledge base once per process."""
    return PermissionDatabase.load(DEFAULT_PERMISSIONS_PATH)


__all__ = ["DEFAULT_PERMISSIONS_PATH", "PermissionDatabase", "default_database"]
