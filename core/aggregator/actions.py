"""Resolve declared resources into the set of IAM actions they require."""

from __future__ import annotations

import fnmatch
import logging
from typing import Iterable

from core.constants import DATA_PREFIX, READ_ONLY_MARKERS, STATE_BACKEND_ACTIONS, SUPPORTED_PROVIDER
from core.models import DeclaredResource, ParseResult
from core.permissions.database import PermissionDatabase

logger = logging.getLogger(__name__)


def is_read_only(action: str) -> bool:
    return any(marker in action for marker in READ_ONLY_MARKERS)


class ActionAggregator:
    """Union the knowledge-base actions of every resource in a ParseResult."""

    def __init__(
        self,
        database: PermissionDatabase,
        *,
        include_state_backend: bool = False,
        exclude_actions: Iterable[str] | str | None = None,
    ) -> None:
        self.database = database
        self.include_state_backend = include_state_backend
        if isinstance(exclude_actions, str):
            self.exclude_patterns = [pat.strip() for pat in exclude_actions.split(",") if pat.strip()]
        else:
            self.exclude_patterns = list(exclude_actions or [])

    def aggregate(self, result: ParseResult) -> list[str]:
        """Return the sorted, deduplicated action list for `result`."""
        actions: set[str] = set()

        for resource in result.resources:
            actions.update(self._resource_actions(resource))

        for data_source in result.data_sources:
            actions.update(self._data_source_actions(data_source))

        if self.include_state_backend or result.backend is not None:
            actions.update(STATE_BACKEND_ACTIONS)

        return sorted(action for action in actions if not self._is_excluded(action))

    # ------------------------------------------------------------------
    def _resource_actions(self, resource: DeclaredResource) -> tuple[str, ...]:
        if resource.provider != SUPPORTED_PROVIDER or not resource.type:
            return ()
        actions = self.database.lookup(resource.type)
        if not actions:
            logger.debug("No permissions known for %s.%s", resource.type, resource.name)
        return actions

    def _data_source_actions(self, data_source: DeclaredResource) -> list[str]:
        resource_type = data_source.type.removeprefix(DATA_PREFIX)
        return [action for action in self.database.lookup(resource_type) if is_read_only(action)]

    def _is_excluded(self, action: str) -> bool:
        for pattern in self.exclude_patterns:
            if fnmatch.fnmatch(action, pattern):
                return True
        return False


__all__ = ["ActionAggregator", "is_read_only"]
