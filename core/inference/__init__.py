"""Inference utilities for deriving IAM resource scopes."""

from .arn_rules import SERVICE_ARN_PATTERNS, resource_for_service

__all__ = ["SERVICE_ARN_PATTERNS", "resource_for_service"]
