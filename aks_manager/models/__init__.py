"""Data models for clusters and rendered tables."""

from aks_manager.models.cluster import (
    CloudType,
    ClusterFacts,
    ClusterState,
    ClusterTarget,
    PowerState,
)
from aks_manager.models.table import ColumnSpec, Table

__all__ = [
    "CloudType",
    "ClusterFacts",
    "ClusterState",
    "ClusterTarget",
    "PowerState",
    "ColumnSpec",
    "Table",
]
