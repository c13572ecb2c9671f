"""Terraform configuration parsing utilities."""

from .blocks import BlockNormalizer
from .fallback import LineScanner
from .terraform_reader import TerraformReader, parse_terraform_files

__all__ = ["BlockNormalizer", "LineScanner", "TerraformReader", "parse_terraform_files"]
