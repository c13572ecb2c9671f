"""Render policy documents as JSON, YAML or Terraform."""

from __future__ import annotations

import json
from enum import Enum
from typing import Callable, Dict

import yaml

from core.constants import GENERATED_NAME, GENERATED_POLICY_NAME
from core.errors import UnsupportedFormatError
from core.models import PolicyDoc, PolicyStatement


class OutputFormat(str, Enum):
    JSON = "json"
    YAML = "yaml"
    TERRAFORM = "terraform"


def to_json(policy: PolicyDoc) -> str:
    return json.dumps(policy.to_document(), indent=2)


def to_yaml(policy: PolicyDoc) -> str:
    return yaml.safe_dump(policy.to_document(), sort_keys=False, default_flow_style=False)


def _list_attribute(name: str, value: list[str] | str) -> list[str]:
    if isinstance(value, str):
        return [f'    {name} = ["{value}"]']
    if not value:
        return []
    return [f"    {name} = [", *(f'      "{item}",' for item in value), "    ]"]


def _statement_block(statement: PolicyStatement) -> list[str]:
    return [
        "  statement {",
        f'    effect = "{statement.effect}"',
        *_list_attribute("actions", statement.actions),
        *_list_attribute("resources", statement.resources),
        "  }",
    ]


def to_terraform(policy: PolicyDoc) -> str:
    """`aws_iam_policy_document` data block plus an `aws_iam_policy` using it."""
    data_address = f"data.aws_iam_policy_document.{GENERATED_NAME}"
    lines = [f'data "aws_iam_policy_document" "{GENERATED_NAME}" {{']
    for statement in policy.statements:
        lines.extend(_statement_block(statement))
    lines.append("}")
    lines.append("")
    lines.append(f'resource "aws_iam_policy" "{GENERATED_NAME}" {{')
    lines.append(f'  name   = "{GENERATED_POLICY_NAME}"')
    lines.append(f"  policy = {data_address}.json")
    lines.append("}")
    return "\n".join(lines) + "\n"


ENCODERS: Dict[OutputFormat, Callable[[PolicyDoc], str]] = {
    OutputFormat.JSON: to_json,
    OutputFormat.YAML: to_yaml,
    OutputFormat.TERRAFORM: to_terraform,
}


def encode(policy: PolicyDoc, fmt: OutputFormat | str) -> str:
    try:
        selected = OutputFormat(fmt)
    except ValueError as exc:
        raise UnsupportedFormatError(str(fmt)) from exc
    return ENCODERS[selected](policy)


__all__ = ["ENCODERS", "OutputFormat", "encode", "to_json", "to_terraform", "to_yaml"]
