"""Public entry points for scanning Terraform and generating IAM policies."""

from core.parser import parse_terraform_files
from core.permissions import PermissionDatabase, default_database
from core.policy import OutputFormat, PolicyGenerator, encode, generate_policy

__all__ = [
    "OutputFormat",
    "PermissionDatabase",
    "PolicyGenerator",
    "default_database",
    "encode",
    "generate_policy",
    "parse_terraform_files",
]

__version__ = "0.1.0"
