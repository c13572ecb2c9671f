"""Generate IAM policies from the resources declared in Terraform."""

from __future__ import annotations

from typing import Iterable

from core.aggregator.actions import ActionAggregator
from core.aggregator.services import collapse_by_service, partition_by_service
from core.inference.arn_rules import resource_for_service
from core.models import ParseResult, PolicyDoc, PolicyStatement
from core.permissions.database import PermissionDatabase, default_database
from core.policy.encoder import OutputFormat, encode


class PolicyGenerator:
    """Compose IAM policy documents from a ParseResult and the permission database."""

    def __init__(
        self,
        database: PermissionDatabase | None = None,
        *,
        include_state_backend: bool = False,
        least_privilege: bool = False,
        exclude_actions: Iterable[str] | str | None = None,
    ) -> None:
        self.database = database if database is not None else default_database()
        self.least_privilege = least_privilege
        self.aggregator = ActionAggregator(
            self.database,
            include_state_backend=include_state_backend,
            exclude_actions=exclude_actions,
        )

    def build(self, result: ParseResult) -> PolicyDoc:
        actions = self.aggregator.aggregate(result)
        if self.least_privilege:
            statements = self._per_service_statements(actions)
        else:
            statements = [PolicyStatement(actions=collapse_by_service(actions), resources="*")]  # type: ignore[call-arg]
        return PolicyDoc(statements=statements)  # type: ignore[call-arg]

    def render(self, result: ParseResult, fmt: OutputFormat | str = OutputFormat.JSON) -> str:
        return encode(self.build(result), fmt)

    # ------------------------------------------------------------------
    @staticmethod
    def _per_service_statements(actions: list[str]) -> list[PolicyStatement]:
        statements = [
            PolicyStatement(actions=service_actions, resources=resource_for_service(service))  # type: ignore[call-arg]
            for service, service_actions in partition_by_service(actions).items()
        ]
        statements.sort(key=lambda statement: min(statement.action_list))
        return statements


def generate_policy(
    result: ParseResult,
    database: PermissionDatabase | None = None,
    *,
    include_state_backend: bool = False,
    fmt: OutputFormat | str = OutputFormat.JSON,
    least_privilege: bool = False,
) -> str:
    """Render the policy needed to manage everything in `result`."""
    generator = PolicyGenerator(
        database,
        include_state_backend=include_state_backend,
        least_privilege=least_privilege,
    )
    return generator.render(result, fmt)


__all__ = ["PolicyGenerator", "generate_policy"]
