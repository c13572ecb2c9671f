"""Group `service:Verb` action identifiers by their service prefix."""

from __future__ import annotations

from typing import Iterable, Optional

from core.constants import WILDCARD_THRESHOLD


def split_actions(actions: Iterable[str]) -> Optional[list[tuple[str, str]]]:
    """Split each action on its colon, or return None if any lacks exactly one."""
    pairs: list[tuple[str, str]] = []
    for action in actions:
        if action.count(":") != 1:
            return None
        service, _, verb = action.partition(":")
        pairs.append((service, verb))
    return pairs


def collapse_by_service(actions: list[str], threshold: int = WILDCARD_THRESHOLD) -> list[str]:
    """Replace a service's actions with `service:*` when it has more than `threshold`.

    `actions` is expected sorted; the output keeps that order. A single
    malformed identifier leaves the whole list untouched.
    """
    pairs = split_actions(actions)
    if pairs is None:
        return list(actions)

    by_service: dict[str, list[str]] = {}
    for service, verb in pairs:
        verbs = by_service.setdefault(service, [])
        if verb not in verbs:
            verbs.append(verb)

    grouped: list[str] = []
    for service, verbs in by_service.items():
        if len(verbs) > threshold:
            grouped.append(f"{service}:*")
        else:
            grouped.extend(f"{service}:{verb}" for verb in verbs)
    return grouped


def partition_by_service(actions: Iterable[str]) -> dict[str, list[str]]:
    """Map each service to its full action identifiers; malformed ones are skipped."""
    grouped: dict[str, list[str]] = {}
    for action in actions:
        if action.count(":") != 1:
            continue
        service = action.partition(":")[0]
        grouped.setdefault(service, []).append(action)
    return grouped


__all__ = ["collapse_by_service", "partition_by_service", "split_actions"]
