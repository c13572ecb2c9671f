"""Core domain models and services for the Terraform IAM policy scanner."""

from .models import BackendDescriptor, DeclaredResource, ParseResult, PermissionEntry, PolicyDoc, PolicyStatement

__all__ = ["BackendDescriptor", "DeclaredResource", "ParseResult", "PermissionEntry", "PolicyDoc", "PolicyStatement"]
