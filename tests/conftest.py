"""Pytest configuration and shared fixtures."""

import json
from types import SimpleNamespace

import pytest
from hypothesis import Verbosity, settings

from aks_manager.models.cluster import ClusterTarget

# Configure Hypothesis for property-based testing
settings.register_profile("default", max_examples=100, verbosity=Verbosity.normal)
settings.register_profile("ci", max_examples=1000, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=10, verbosity=Verbosity.verbose)

settings.load_profile("default")


def make_managed_cluster(provisioning_state, power_codes):
    """Build an object shaped like an Azure SDK ManagedCluster."""
    pools = [
        SimpleNamespace(
            name=f"pool{i}",
            power_state=SimpleNamespace(code=code) if code is not None else None,
        )
        for i, code in enumerate(power_codes)
    ]
    return SimpleNamespace(provisioning_state=provisioning_state, agent_pool_profiles=pools)


@pytest.fixture
def target():
    """A sample cluster target."""
    return ClusterTarget(
        subscription_id="12345678-1234-1234-1234-123456789012",
        resource_group="prod-rg",
        name="prod-cluster",
    )


@pytest.fixture
def pods_output():
    """kubectl get pods -o json output with a running and a waiting pod."""
    return json.dumps(
        {
            "apiVersion": "v1",
            "kind": "List",
            "items": [
                {
                    "metadata": {"name": "coredns-7d4b", "namespace": "kube-system"},
                    "status": {
                        "containerStatuses": [
                            {
                                "name": "coredns",
                                "ready": True,
                                "restartCount": 0,
                                "state": {"running": {"startedAt": "2024-01-01T00:00:00Z"}},
                            }
                        ]
                    },
                },
                {
                    "metadata": {"name": "api-5f6c", "namespace": "prod"},
                    "status": {
                        "containerStatuses": [
                            {
                                "name": "api",
                                "ready": False,
                                "restartCount": 7,
                                "state": {"waiting": {"reason": "CrashLoopBackOff"}},
                            },
                            {
                                "name": "sidecar",
                                "ready": True,
                                "restartCount": 0,
                                "state": {"running": {"startedAt": "2024-01-01T00:00:00Z"}},
                            },
                        ]
                    },
                },
            ],
        }
    )


@pytest.fixture
def managed_cluster():
    """Factory for ManagedCluster-like objects."""
    return make_managed_cluster
