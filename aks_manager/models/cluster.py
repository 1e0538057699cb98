"""Data models for AKS cluster identity and power state."""

import re
from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, Field, field_validator

from aks_manager.exceptions import ValidationError


class ClusterState(str, Enum):
    """Discrete power state of a cluster as shown to the user."""

    STARTED = "Started"
    STARTING = "Starting"
    STOPPED = "Stopped"
    STOPPING = "Stopping"


class CloudType(str, Enum):
    """Azure cloud the cluster lives in."""

    PUBLIC = "public"
    USGOV = "usgov"

    @property
    def endpoint(self) -> str:
        """Azure Resource Manager endpoint for this cloud."""
        if self is CloudType.USGOV:
            return "https://management.usgovcloudapi.net"
        return "https://management.azure.com"


class PowerState(BaseModel):
    """Power state reported for a single node pool."""

    code: str | None = None


class ClusterFacts(BaseModel):
    """Raw provisioning and node pool facts for one cluster query."""

    provisioning_state: str | None = None
    node_pool_power_states: list[PowerState] = Field(default_factory=list)

    @classmethod
    def from_managed_cluster(cls, cluster) -> "ClusterFacts":
        """Build facts from an Azure SDK ``ManagedCluster``."""
        power_states = []
        for pool in cluster.agent_pool_profiles or []:
            code = pool.power_state.code if pool.power_state else None
            power_states.append(PowerState(code=code))

        return cls(
            provisioning_state=cluster.provisioning_state,
            node_pool_power_states=power_states,
        )


class ClusterTarget(BaseModel):
    """Identity of an AKS cluster within a subscription."""

    RESOURCE_ID_PATTERN: ClassVar[re.Pattern] = re.compile(
        r"^/subscriptions/(?P<subscription>[^/]+)"
        r"/resourceGroups/(?P<resource_group>[^/]+)"
        r"/providers/Microsoft\.ContainerService"
        r"/managedClusters/(?P<name>[^/]+)$",
        re.IGNORECASE,
    )

    subscription_id: str
    resource_group: str
    name: str
    cloud: CloudType = CloudType.PUBLIC

    @field_validator("subscription_id", "resource_group", "name")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        """Validate identifiers are not blank."""
        if not v or not v.strip():
            raise ValueError("cluster identifiers cannot be empty")
        return v.strip()

    @property
    def resource_id(self) -> str:
        return (
            f"/subscriptions/{self.subscription_id}"
            f"/resourceGroups/{self.resource_group}"
            f"/providers/Microsoft.ContainerService/managedClusters/{self.name}"
        )

    @classmethod
    def from_resource_id(
        cls, resource_id: str, cloud: CloudType = CloudType.PUBLIC
    ) -> "ClusterTarget":
        """Parse a managed cluster ARM resource id.

        Args:
            resource_id: Full ARM id of the managed cluster
            cloud: Azure cloud hosting the cluster

        Returns:
            ClusterTarget for the id

        Raises:
            ValidationError: If the id is not a managed cluster id
        """
        match = cls.RESOURCE_ID_PATTERN.match((resource_id or "").strip())
        if not match:
            raise ValidationError(
                f"Invalid ARM id {resource_id}",
                "Expected format: /subscriptions/{sub}/resourceGroups/{rg}"
                "/providers/Microsoft.ContainerService/managedClusters/{name}",
            )

        return cls(
            subscription_id=match.group("subscription"),
            resource_group=match.group("resource_group"),
            name=match.group("name"),
            cloud=cloud,
        )
