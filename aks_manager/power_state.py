"""Cluster power-state determination and start/stop gating.

All functions here are pure apart from the start/stop callables handed in by
the caller, which perform the actual control-plane request.
"""

from collections.abc import Callable, Sequence
from typing import Any

from aks_manager.exceptions import AlreadyInState, InvalidTransition, QueryFailed
from aks_manager.logging_config import get_logger
from aks_manager.models.cluster import ClusterFacts, ClusterState, PowerState
from aks_manager.result import Result

logger = get_logger(__name__)


def _all_pools(node_pool_power_states: Sequence[PowerState], code: str) -> bool:
    # An empty pool list never counts as "all stopped" or "all running"
    if not node_pool_power_states:
        return False
    return all(pool.code == code for pool in node_pool_power_states)


def determine_state(
    provisioning_state: str | None, node_pool_power_states: Sequence[PowerState]
) -> ClusterState:
    """
    Reduce provisioning and node pool power states to a single cluster state.

    Rules are checked in order and the first match wins:

    1. Not provisioning "Stopping" and every pool "Stopped" -> Stopped
    2. Provisioning "Succeeded" and every pool "Running" -> Started
    3. Provisioning "Stopping" -> Stopping
    4. Anything else -> Starting

    Args:
        provisioning_state: Cluster provisioning state reported by Azure
        node_pool_power_states: Power state of each node pool

    Returns:
        The cluster state
    """
    if provisioning_state != "Stopping" and _all_pools(node_pool_power_states, "Stopped"):
        return ClusterState.STOPPED
    if provisioning_state == "Succeeded" and _all_pools(node_pool_power_states, "Running"):
        return ClusterState.STARTED
    if provisioning_state == "Stopping":
        return ClusterState.STOPPING
    return ClusterState.STARTING


def determine_state_from_facts(facts: ClusterFacts) -> ClusterState:
    """Determine the cluster state from a ``ClusterFacts`` snapshot."""
    return determine_state(facts.provisioning_state, facts.node_pool_power_states)


def _invoke(action: Callable[[], Any], cluster_name: str, verb: str) -> Result[str]:
    try:
        action()
    except Exception as e:
        logger.error(f"Failed to {verb} cluster {cluster_name}: {e}")
        return Result.fail(QueryFailed(f"Error invoking {cluster_name} managed cluster: {e}"))

    logger.info(f"Requested {verb} of cluster {cluster_name}")
    return Result.ok(f"{verb.capitalize()} cluster succeeded.")


def request_start(
    current_state: ClusterState, start: Callable[[], Any], cluster_name: str
) -> Result[str]:
    """
    Start the cluster if it is fully stopped.

    The ``start`` callable is only invoked from the Stopped state; its
    outcome is not awaited.

    Args:
        current_state: State returned by ``determine_state``
        start: Issues the start request to the control plane
        cluster_name: Cluster name used in messages

    Returns:
        Result with a confirmation message, or InvalidTransition when the
        cluster is still stopping, or AlreadyInState when it is started or
        starting
    """
    if current_state == ClusterState.STOPPED:
        return _invoke(start, cluster_name, "start")

    if current_state == ClusterState.STOPPING:
        return Result.fail(
            InvalidTransition(
                f"Cluster {cluster_name} is in Stopping state wait until cluster is fully stopped."
            )
        )

    return Result.fail(AlreadyInState(f"Cluster {cluster_name} is already Started."))


def request_stop(
    current_state: ClusterState, stop: Callable[[], Any], cluster_name: str
) -> Result[str]:
    """
    Stop the cluster if it is fully started.

    Args:
        current_state: State returned by ``determine_state``
        stop: Issues the stop request to the control plane
        cluster_name: Cluster name used in messages

    Returns:
        Result with a confirmation message, or InvalidTransition for any
        state other than Started
    """
    if current_state == ClusterState.STARTED:
        return _invoke(stop, cluster_name, "stop")

    return Result.fail(
        InvalidTransition(f"Cluster {cluster_name} is either Stopped or in Stopping state.")
    )
