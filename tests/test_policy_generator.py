"""Policy generator tests for action merging and statement layout."""

from __future__ import annotations

import json
import random
from pathlib import Path

import pytest

from core.errors import UnsupportedFormatError
from core.models import BackendDescriptor, DeclaredResource, ParseResult
from core.parser.terraform_reader import parse_terraform_files
from core.permissions.database import PermissionDatabase
from core.policy.generator import PolicyGenerator, generate_policy

FIXTURES = Path(__file__).parent / "fixtures" / "terraform"

S3_ACTIONS = ["s3:CreateBucket", "s3:DeleteBucket", "s3:GetBucketLocation", "s3:ListBucket"]
LAMBDA_ACTIONS = [
    "lambda:CreateFunction",
    "lambda:InvokeFunction",
    "lambda:GetFunction",
    "lambda:DeleteFunction",
    "lambda:UpdateFunctionCode",
]


def _database() -> PermissionDatabase:
    return PermissionDatabase.from_mapping(
        {
            "aws_s3_bucket": {"actions": S3_ACTIONS, "resource_types": ["bucket"]},
            "aws_lambda_function": {"actions": LAMBDA_ACTIONS, "resource_types": ["function"]},
            "aws_iam_role": {
                "actions": [
                    "iam:CreateRole",
                    "iam:DeleteRole",
                    "iam:GetRole",
                    "iam:PassRole",
                    "iam:TagRole",
                    "iam:UpdateRole",
                ]
            },
            "aws_widget": {"actions": ["widget:Make"]},
        }
    )


def _result(*types: str, backend: BackendDescriptor | None = None) -> ParseResult:
    return ParseResult(resources=[DeclaredResource.declare(t, "x") for t in types], backend=backend)


def test_end_to_end_single_statement():
    result = parse_terraform_files(FIXTURES / "simple")
    document = json.loads(generate_policy(result, _database()))

    assert document["Version"] == "2012-10-17"
    assert len(document["Statement"]) == 1
    statement = document["Statement"][0]
    assert statement["Effect"] == "Allow"
    assert statement["Resource"] == "*"
    assert statement["Action"] == sorted(S3_ACTIONS + LAMBDA_ACTIONS)
    assert len(statement["Action"]) == 9


def test_single_statement_collapses_large_services():
    policy = PolicyGenerator(_database()).build(_result("aws_iam_role", "aws_s3_bucket"))

    assert policy.statements[0].actions == ["iam:*", *sorted(S3_ACTIONS)]


def test_action_order_independent_of_resource_order():
    types = ["aws_s3_bucket", "aws_lambda_function", "aws_iam_role", "aws_widget"]
    shuffled = list(types)
    random.Random(7).shuffle(shuffled)

    first = PolicyGenerator(_database()).build(_result(*types))
    second = PolicyGenerator(_database()).build(_result(*shuffled))

    assert first == second
    assert first.statements[0].actions == sorted(first.statements[0].actions)


def test_rendering_is_idempotent():
    result = _result("aws_s3_bucket", "aws_lambda_function", backend=BackendDescriptor(kind="s3"))
    generator = PolicyGenerator(_database(), least_privilege=True)

    for fmt in ("json", "yaml", "terraform"):
        assert generator.render(result, fmt) == generator.render(result, fmt)


def test_least_privilege_statements_per_service():
    result = _result("aws_lambda_function", "aws_s3_bucket", "aws_iam_role", "aws_widget")
    policy = PolicyGenerator(_database(), least_privilege=True).build(result)

    assert [statement.resources for statement in policy.statements] == [
        "arn:aws:iam::*:*",
        "arn:aws:lambda:*:*:*",
        "arn:aws:s3:::*",
        "*",
    ]
    iam_statement = policy.statements[0]
    # No wildcard collapsing in least-privilege mode.
    assert len(iam_statement.actions) == 6
    assert policy.statements[1].actions == sorted(LAMBDA_ACTIONS)
    assert policy.statements[3].actions == ["widget:Make"]


def test_least_privilege_includes_backend_statements():
    policy = PolicyGenerator(_database(), least_privilege=True, include_state_backend=True).build(ParseResult())

    assert [statement.resources for statement in policy.statements] == ["arn:aws:dynamodb:*:*:*", "arn:aws:s3:::*"]
    assert policy.services == ["dynamodb", "s3"]


def test_backend_detection_adds_state_actions():
    policy = PolicyGenerator(_database()).build(_result(backend=BackendDescriptor(kind="s3")))
    actions = policy.statements[0].actions

    assert "dynamodb:GetItem" in actions
    assert "s3:PutObject" in actions


def test_empty_result_single_statement_has_no_actions():
    policy = PolicyGenerator(_database()).build(ParseResult())

    assert len(policy.statements) == 1
    assert policy.statements[0].actions == []
    assert PolicyGenerator(_database(), least_privilege=True).build(ParseResult()).statements == []


def test_data_source_read_only_filter():
    database = PermissionDatabase.from_mapping({"aws_s3_bucket": {"actions": ["s3:GetObject", "s3:CreateBucket"]}})
    result = ParseResult(data_sources=[DeclaredResource.declare("data.aws_s3_bucket", "existing", is_data=True)])

    policy = PolicyGenerator(database).build(result)

    assert policy.statements[0].actions == ["s3:GetObject"]


def test_exclude_actions_are_dropped():
    policy = PolicyGenerator(_database(), exclude_actions=["s3:Delete*", "lambda:*"]).build(
        _result("aws_s3_bucket", "aws_lambda_function")
    )

    assert policy.statements[0].actions == ["s3:CreateBucket", "s3:GetBucketLocation", "s3:ListBucket"]


def test_unsupported_format_raises():
    with pytest.raises(UnsupportedFormatError):
        generate_policy(_result("aws_s3_bucket"), _database(), fmt="xml")


def test_default_database_used_when_not_given():
    policy = PolicyGenerator().build(_result("aws_s3_bucket_policy"))
    assert "s3:PutBucketPolicy" in policy.statements[0].actions


def test_package_entry_points():
    import tfiam

    result = tfiam.parse_terraform_files(FIXTURES / "simple")
    rendered = tfiam.generate_policy(result, _database(), fmt=tfiam.OutputFormat.YAML)

    assert rendered.startswith("Version: '2012-10-17'")
