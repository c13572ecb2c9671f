"""Action aggregation and service grouping tests."""

from __future__ import annotations

from core.aggregator.actions import ActionAggregator, is_read_only
from core.aggregator.services import collapse_by_service, partition_by_service, split_actions
from core.constants import STATE_BACKEND_ACTIONS
from core.models import BackendDescriptor, DeclaredResource, ParseResult
from core.permissions.database import PermissionDatabase


def _database() -> PermissionDatabase:
    return PermissionDatabase.from_mapping(
        {
            "aws_s3_bucket": {"actions": ["s3:GetObject", "s3:CreateBucket"]},
            "aws_sqs_queue": {"actions": ["sqs:CreateQueue", "sqs:GetQueueUrl"]},
            "aws_sns_topic": {"actions": ["sns:CreateTopic", "sns:CreateTopic"]},
            "google_storage_bucket": {"actions": ["storage:CreateBucket"]},
        }
    )


def _result(*resources: DeclaredResource, backend: BackendDescriptor | None = None) -> ParseResult:
    return ParseResult(
        resources=[res for res in resources if not res.is_data],
        data_sources=[res for res in resources if res.is_data],
        backend=backend,
    )


def test_aggregator_unions_and_sorts_actions():
    result = _result(
        DeclaredResource.declare("aws_sqs_queue", "q"),
        DeclaredResource.declare("aws_s3_bucket", "b"),
        DeclaredResource.declare("aws_s3_bucket", "c"),
    )
    actions = ActionAggregator(_database()).aggregate(result)

    assert actions == ["s3:CreateBucket", "s3:GetObject", "sqs:CreateQueue", "sqs:GetQueueUrl"]


def test_aggregator_ignores_unknown_types_and_other_providers():
    result = _result(
        DeclaredResource.declare("aws_unknown_thing", "x"),
        DeclaredResource.declare("google_storage_bucket", "g"),
        DeclaredResource(type="", name="blank"),
    )
    assert ActionAggregator(_database()).aggregate(result) == []


def test_aggregator_read_only_filter_for_data_sources():
    result = _result(DeclaredResource.declare("data.aws_s3_bucket", "existing", is_data=True))
    assert ActionAggregator(_database()).aggregate(result) == ["s3:GetObject"]


def test_aggregator_adds_backend_actions_when_detected():
    result = _result(backend=BackendDescriptor(kind="s3"))
    assert ActionAggregator(_database()).aggregate(result) == sorted(STATE_BACKEND_ACTIONS)


def test_aggregator_adds_backend_actions_when_requested():
    actions = ActionAggregator(_database(), include_state_backend=True).aggregate(ParseResult())
    assert "dynamodb:DescribeTable" in actions
    assert "s3:PutObject" in actions
    assert len(actions) == len(STATE_BACKEND_ACTIONS)


def test_aggregator_excludes_patterns():
    result = _result(DeclaredResource.declare("aws_sqs_queue", "q"))
    aggregator = ActionAggregator(_database(), exclude_actions="sqs:Get*, ")
    assert aggregator.aggregate(result) == ["sqs:CreateQueue"]


def test_is_read_only_is_case_sensitive():
    assert is_read_only("ec2:DescribeVpcs")
    assert is_read_only("s3:ListBucket")
    assert not is_read_only("s3:getobject")
    assert not is_read_only("s3:PutObject")


def test_collapse_threshold_six_actions_wildcard():
    actions = [f"ec2:Action{index}" for index in range(6)]
    assert collapse_by_service(actions) == ["ec2:*"]


def test_collapse_threshold_five_actions_kept():
    actions = [f"ec2:Action{index}" for index in range(5)]
    assert collapse_by_service(actions) == actions


def test_collapse_keeps_order_across_services():
    actions = sorted([f"iam:Verb{index}" for index in range(7)] + ["s3:GetObject", "s3-control:GetJob"])
    assert collapse_by_service(actions) == ["iam:*", "s3-control:GetJob", "s3:GetObject"]


def test_collapse_degenerate_identifier_disables_grouping():
    actions = [f"ec2:Action{index}" for index in range(6)] + ["malformed"]
    assert collapse_by_service(actions) == actions
    assert collapse_by_service(["a:b:c"] + actions[:6]) == ["a:b:c"] + actions[:6]


def test_split_actions():
    assert split_actions(["s3:GetObject"]) == [("s3", "GetObject")]
    assert split_actions(["s3:GetObject", "nope"]) is None


def test_partition_by_service_skips_malformed():
    grouped = partition_by_service(["lambda:GetFunction", "s3:GetObject", "s3:PutObject", "broken"])
    assert grouped == {"lambda": ["lambda:GetFunction"], "s3": ["s3:GetObject", "s3:PutObject"]}
