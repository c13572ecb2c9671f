"""Aggregation routines for resource permissions."""

from .actions import ActionAggregator
from .services import collapse_by_service, partition_by_service

__all__ = ["ActionAggregator", "collapse_by_service", "partition_by_service"]
