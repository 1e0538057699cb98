"""Property-based tests for cluster power-state determination and gating.

Feature: aks-cluster-control, Property 1: Power state determination
Feature: aks-cluster-control, Property 2: Start/stop gating
"""

from unittest.mock import Mock

from hypothesis import assume, given
from hypothesis import strategies as st

from aks_manager.exceptions import AlreadyInState, InvalidTransition, QueryFailed
from aks_manager.models.cluster import ClusterFacts, ClusterState, PowerState
from aks_manager.power_state import (
    determine_state,
    determine_state_from_facts,
    request_start,
    request_stop,
)

PROVISIONING_STATES = [
    "Succeeded",
    "Stopping",
    "Starting",
    "Updating",
    "Failed",
    "Canceled",
    "Creating",
    "Deleting",
]

provisioning_state = st.one_of(
    st.sampled_from(PROVISIONING_STATES), st.text(max_size=12), st.none()
)
power_code = st.one_of(st.sampled_from(["Running", "Stopped"]), st.text(max_size=8), st.none())


def pools(*codes):
    return [PowerState(code=code) for code in codes]


@st.composite
def uniform_pools(draw, code):
    """Generate a non-empty list of pools all reporting ``code``."""
    count = draw(st.integers(min_value=1, max_value=8))
    return [PowerState(code=code) for _ in range(count)]


@st.composite
def any_pools(draw):
    codes = draw(st.lists(power_code, min_size=0, max_size=8))
    return [PowerState(code=code) for code in codes]


@given(state=provisioning_state, node_pools=uniform_pools("Stopped"))
def test_all_pools_stopped_is_stopped(state, node_pools):
    """
    Feature: aks-cluster-control, Property 1: Power state determination

    Whenever every pool is stopped and the cluster is not provisioning
    "Stopping", the cluster is Stopped whatever the provisioning state says.
    """
    assume(state != "Stopping")

    assert determine_state(state, node_pools) == ClusterState.STOPPED


@given(node_pools=uniform_pools("Running"))
def test_succeeded_with_all_pools_running_is_started(node_pools):
    """A succeeded cluster whose pools are all running is Started."""
    assert determine_state("Succeeded", node_pools) == ClusterState.STARTED


@given(node_pools=any_pools())
def test_stopping_provisioning_state(node_pools):
    """Provisioning "Stopping" always reports Stopping."""
    assert determine_state("Stopping", node_pools) == ClusterState.STOPPING


@given(state=provisioning_state, node_pools=any_pools())
def test_state_is_always_one_of_four(state, node_pools):
    """Every combination of facts maps to exactly one cluster state."""
    assert determine_state(state, node_pools) in set(ClusterState)


def test_stopping_with_all_pools_stopped_reports_stopping():
    """The "not Stopping" guard on rule 1 keeps a stopping cluster in Stopping."""
    assert determine_state("Stopping", pools("Stopped", "Stopped")) == ClusterState.STOPPING


def test_unexpected_provisioning_state_with_stopped_pools():
    """An all-stopped pool set wins over an unexpected provisioning state."""
    assert determine_state("Failed", pools("Stopped")) == ClusterState.STOPPED


def test_mixed_pools_fall_back_to_starting():
    """Partially running pools are reported as Starting."""
    assert determine_state("Succeeded", pools("Running", "Stopped")) == ClusterState.STARTING


def test_running_pools_while_updating_is_starting():
    """Running pools only count as Started once provisioning succeeded."""
    assert determine_state("Updating", pools("Running")) == ClusterState.STARTING


def test_empty_pool_list_is_never_stopped_or_started():
    """An empty pool list does not vacuously satisfy the all-pools rules."""
    assert determine_state("Succeeded", []) == ClusterState.STARTING
    assert determine_state("Stopping", []) == ClusterState.STOPPING
    assert determine_state(None, []) == ClusterState.STARTING


def test_missing_power_state_is_not_stopped():
    """Pools without a power state do not count as stopped."""
    assert determine_state("Succeeded", pools(None)) == ClusterState.STARTING


def test_determine_state_from_facts(managed_cluster):
    """Facts built from an SDK object give the same answer."""
    facts = ClusterFacts.from_managed_cluster(managed_cluster("Succeeded", ["Running", "Running"]))

    assert determine_state_from_facts(facts) == ClusterState.STARTED


def test_facts_handle_missing_agent_pools():
    """A cluster without agent pool profiles yields an empty pool list."""
    cluster = Mock(provisioning_state="Creating", agent_pool_profiles=None)

    facts = ClusterFacts.from_managed_cluster(cluster)

    assert facts.node_pool_power_states == []
    assert determine_state_from_facts(facts) == ClusterState.STARTING


# Start/stop gating


def test_start_from_stopped_invokes_action():
    """
    Feature: aks-cluster-control, Property 2: Start/stop gating

    Only a Stopped cluster is started.
    """
    start = Mock()

    result = request_start(ClusterState.STOPPED, start, "prod")

    assert result.succeeded
    assert result.result == "Start cluster succeeded."
    start.assert_called_once_with()


def test_start_while_stopping_is_invalid():
    start = Mock()

    result = request_start(ClusterState.STOPPING, start, "prod")

    assert result.failed
    assert isinstance(result.error, InvalidTransition)
    assert "prod" in result.message
    assert "wait until cluster is fully stopped" in result.message
    start.assert_not_called()


@given(state=st.sampled_from([ClusterState.STARTED, ClusterState.STARTING]))
def test_start_when_started_or_starting_is_already_in_state(state):
    start = Mock()

    result = request_start(state, start, "prod")

    assert isinstance(result.error, AlreadyInState)
    assert result.message == "Cluster prod is already Started."
    start.assert_not_called()


def test_stop_from_started_invokes_action():
    stop = Mock()

    result = request_stop(ClusterState.STARTED, stop, "prod")

    assert result.succeeded
    assert result.result == "Stop cluster succeeded."
    stop.assert_called_once_with()


@given(
    state=st.sampled_from([ClusterState.STOPPED, ClusterState.STOPPING, ClusterState.STARTING])
)
def test_stop_from_any_other_state_is_invalid(state):
    stop = Mock()

    result = request_stop(state, stop, "prod")

    assert isinstance(result.error, InvalidTransition)
    assert result.message == "Cluster prod is either Stopped or in Stopping state."
    stop.assert_not_called()


def test_action_failure_is_reported_not_raised():
    """An exception from the control plane becomes a QueryFailed result."""
    start = Mock(side_effect=RuntimeError("AuthorizationFailed"))

    result = request_start(ClusterState.STOPPED, start, "prod")

    assert result.failed
    assert isinstance(result.error, QueryFailed)
    assert "prod" in result.message
    assert "AuthorizationFailed" in result.message
