"""Configuration loader for the tfiam CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

DEFAULTS = {
    "default_format": "json",
    "include_state_backend": False,
    "least_privilege": False,
    "permissions_path": None,
    "exclude_actions": [],
}


def _pattern_list(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [pat.strip() for pat in value.split(",") if pat.strip()]
    return [str(pat) for pat in value]


@dataclass(slots=True)
class Settings:
    default_format: str = DEFAULTS["default_format"]
    include_state_backend: bool = DEFAULTS["include_state_backend"]
    least_privilege: bool = DEFAULTS["least_privilege"]
    permissions_path: Path | None = DEFAULTS["permissions_path"]
    exclude_actions: list[str] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "Settings":
        permissions_path = data.get("permissions_path", DEFAULTS["permissions_path"])
        return cls(
            default_format=data.get("default_format", DEFAULTS["default_format"]),
            include_state_backend=bool(data.get("include_state_backend", DEFAULTS["include_state_backend"])),
            least_privilege=bool(data.get("least_privilege", DEFAULTS["least_privilege"])),
            permissions_path=Path(permissions_path) if permissions_path else None,
            exclude_actions=_pattern_list(data.get("exclude_actions")),
        )

    def merge_cli(
        self,
        format_override: str | None = None,
        include_state_backend: bool | None = None,
        least_privilege: bool | None = None,
        permissions_path: Path | None = None,
        exclude_actions: str | None = None,
    ) -> "Settings":
        return Settings(
            default_format=format_override or self.default_format,
            include_state_backend=self.include_state_backend if include_state_backend is None else include_state_backend,
            least_privilege=self.least_privilege if least_privilege is None else least_privilege,
            permissions_path=permissions_path or self.permissions_path,
            exclude_actions=_pattern_list(exclude_actions) or list(self.exclude_actions),
        )


def load_settings(path: Path) -> Settings:
    if not path.exists():
        return Settings()

    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    if not isinstance(data, dict):
        raise ValueError("Configuration file must be a mapping of keys to values.")

    return Settings.from_mapping(data)


__all__ = ["Settings", "load_settings"]
