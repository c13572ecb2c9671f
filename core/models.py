"""Data models shared across the pipeline."""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, Field

from core.constants import DEFAULT_PROVIDER, POLICY_VERSION


def provider_prefix(resource_type: str) -> str:
    """Best-effort provider name for a resource type (text before the first underscore)."""
    if resource_type.startswith("aws_"):
        return "aws"
    if "_" in resource_type:
        return resource_type.split("_", 1)[0]
    return DEFAULT_PROVIDER


class DeclaredResource(BaseModel):
    """A `resource` or `data` block found in a Terraform configuration."""

    type: str = Field(..., description="Full resource type, e.g. aws_s3_bucket")
    name: str = Field("", description="Instance name given as the second block label")
    provider: str = Field(DEFAULT_PROVIDER, description="Provider prefix derived from the type")
    is_data: bool = Field(default=False, description="True for read-only data references")
    attributes: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def declare(cls, resource_type: str, name: str = "", *, is_data: bool = False, **kwargs: Any) -> "DeclaredResource":
        return cls(type=resource_type, name=name, provider=provider_prefix(resource_type), is_data=is_data, **kwargs)


class BackendDescriptor(BaseModel):
    """Remote state backend declared in a `terraform` block or inferred from a state file."""

    kind: str
    settings: dict[str, str] = Field(default_factory=dict)


class ParseResult(BaseModel):
    """Everything the extractor found under one root directory."""

    resources: list[DeclaredResource] = Field(default_factory=list)
    data_sources: list[DeclaredResource] = Field(default_factory=list)
    backend: Optional[BackendDescriptor] = None

    def extend(self, other: "ParseResult") -> None:
        self.resources.extend(other.resources)
        self.data_sources.extend(other.data_sources)
        self.merge_block_backend(other.backend)

    def merge_block_backend(self, backend: BackendDescriptor | None) -> None:
        if backend is not None and self.backend is None:
            self.backend = backend

    def merge_state_backend(self, backend: BackendDescriptor | None) -> None:
        # State files win over anything discovered earlier, in any order.
        if backend is not None:
            self.backend = backend

    @property
    def is_empty(self) -> bool:
        return not self.resources and not self.data_sources


class PermissionEntry(BaseModel):
    """Knowledge-base record: IAM actions needed to manage one resource type."""

    resource_type: str
    actions: tuple[str, ...] = ()
    resource_types: tuple[str, ...] = ()

    model_config = {
        "frozen": True,
    }


class PolicyStatement(BaseModel):
    """IAM policy statement; `Action` and `Resource` may be a list or a single string."""

    effect: str = Field(default="Allow", alias="Effect")
    actions: Union[list[str], str] = Field(default_factory=list, alias="Action")
    resources: Union[list[str], str] = Field(default="*", alias="Resource")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }

    @property
    def action_list(self) -> list[str]:
        return [self.actions] if isinstance(self.actions, str) else list(self.actions)

    @property
    def resource_list(self) -> list[str]:
        return [self.resources] if isinstance(self.resources, str) else list(self.resources)


class PolicyDoc(BaseModel):
    """IAM policy document composed of statements."""

    version: str = Field(default=POLICY_VERSION, alias="Version")
    statements: list[PolicyStatement] = Field(default_factory=list, alias="Statement")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }

    @property
    def services(self) -> list[str]:
        """Return unique AWS services referenced in the policy."""
        services: set[str] = set()
        for statement in self.statements:
            for action in statement.action_list:
                services.add(action.split(":", 1)[0])
        return sorted(services)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


__all__ = [
    "BackendDescriptor",
    "DeclaredResource",
    "ParseResult",
    "PermissionEntry",
    "PolicyDoc",
    "PolicyStatement",
    "provider_prefix",
]
