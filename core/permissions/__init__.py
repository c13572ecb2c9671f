"""Permission knowledge base for Terraform resource types."""

from .database import DEFAULT_PERMISSIONS_PATH, PermissionDatabase, default_database

__all__ = ["DEFAULT_PERMISSIONS_PATH", "PermissionDatabase", "default_database"]
