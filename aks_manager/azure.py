"""Azure control-plane access for a single AKS cluster."""

from azure.identity import DefaultAzureCredential
from azure.mgmt.containerservice import ContainerServiceClient

from aks_manager.exceptions import MissingField, QueryFailed
from aks_manager.logging_config import get_logger
from aks_manager.models.cluster import ClusterFacts, ClusterState, ClusterTarget
from aks_manager.power_state import determine_state_from_facts, request_start, request_stop
from aks_manager.result import Result

logger = get_logger(__name__)

KUBECONFIG_NAME = "clusterUser"


class AKSClient:
    """Wrapper around the managed cluster and agent pool APIs for one cluster."""

    def __init__(self, target: ClusterTarget, credential=None, client=None):
        """Initialize the client.

        Args:
            target: Cluster to operate on
            credential: Azure token credential, defaults to DefaultAzureCredential
            client: Pre-built ContainerServiceClient, mainly for tests
        """
        self.target = target
        self._credential = credential
        self._client = client

    @property
    def cluster_name(self) -> str:
        return self.target.name

    def _get_client(self) -> ContainerServiceClient:
        if self._client is None:
            if self._credential is None:
                self._credential = DefaultAzureCredential()
            endpoint = self.target.cloud.endpoint
            logger.debug(f"Creating ContainerServiceClient for {endpoint}")
            self._client = ContainerServiceClient(
                credential=self._credential,
                subscription_id=self.target.subscription_id,
                base_url=endpoint,
                credential_scopes=[f"{endpoint}/.default"],
            )
        return self._client

    def get_cluster_facts(self) -> Result[ClusterFacts]:
        """Fetch provisioning and node pool power states."""
        try:
            cluster = self._get_client().managed_clusters.get(
                self.target.resource_group, self.cluster_name
            )
        except Exception as e:
            logger.error(f"Failed to get managed cluster {self.cluster_name}: {e}")
            return Result.fail(
                QueryFailed(f"Error invoking {self.cluster_name} managed cluster: {e}")
            )

        return Result.ok(ClusterFacts.from_managed_cluster(cluster))

    def determine_cluster_state(self) -> Result[ClusterState]:
        """Query the cluster and reduce its facts to a ``ClusterState``."""
        facts = self.get_cluster_facts()
        if facts.failed:
            return Result.fail(facts.error)

        state = determine_state_from_facts(facts.result)
        logger.info(f"Cluster {self.cluster_name} is {state.value}")
        return Result.ok(state)

    def _resolve_state(self, state: ClusterState | None) -> Result[ClusterState]:
        if state is not None:
            return Result.ok(state)
        return self.determine_cluster_state()

    def start_cluster(self, state: ClusterState | None = None) -> Result[str]:
        """Request a start if the cluster is stopped.

        The long-running operation is not awaited; query the state again to
        follow its progress.
        """
        current = self._resolve_state(state)
        if current.failed:
            return Result.fail(current.error)

        return request_start(
            current.result,
            lambda: self._get_client().managed_clusters.begin_start(
                self.target.resource_group, self.cluster_name
            ),
            self.cluster_name,
        )

    def stop_cluster(self, state: ClusterState | None = None) -> Result[str]:
        """Request a stop if the cluster is started."""
        current = self._resolve_state(state)
        if current.failed:
            return Result.fail(current.error)

        return request_stop(
            current.result,
            lambda: self._get_client().managed_clusters.begin_stop(
                self.target.resource_group, self.cluster_name
            ),
            self.cluster_name,
        )

    def get_kubeconfig_yaml(self) -> Result[str]:
        """Fetch the ``clusterUser`` kubeconfig as YAML text."""
        try:
            credentials = self._get_client().managed_clusters.list_cluster_user_credentials(
                self.target.resource_group, self.cluster_name
            )
        except Exception as e:
            logger.error(f"Failed to list user credentials for {self.cluster_name}: {e}")
            return Result.fail(
                QueryFailed(
                    f"Failed to retrieve user credentials for cluster {self.cluster_name}: {e}"
                )
            )

        kubeconfig = next(
            (kc for kc in credentials.kubeconfigs or [] if kc.name == KUBECONFIG_NAME), None
        )
        if kubeconfig is None:
            return Result.fail(
                MissingField(
                    f'No "{KUBECONFIG_NAME}" kubeconfig found for cluster {self.cluster_name}.'
                )
            )

        value = kubeconfig.value
        if isinstance(value, (bytes, bytearray)):
            value = value.decode("utf-8")
        if not value:
            return Result.fail(MissingField(f"Empty kubeconfig for cluster {self.cluster_name}."))

        return Result.ok(value)

    def get_windows_node_pool_versions(self) -> Result[list[str]]:
        """Kubernetes versions of every Windows node pool."""
        versions = []
        try:
            for pool in self._get_client().agent_pools.list(
                self.target.resource_group, self.cluster_name
            ):
                if not pool.os_type:
                    return Result.fail(
                        MissingField(
                            f"OS type not available for node pool {pool.name} "
                            f"for cluster {self.cluster_name}"
                        )
                    )

                if pool.os_type.upper() == "WINDOWS":
                    if not pool.current_orchestrator_version:
                        return Result.fail(
                            MissingField(
                                f"Kubernetes version not available for node pool {pool.name} "
                                f"for cluster {self.cluster_name}"
                            )
                        )
                    versions.append(pool.current_orchestrator_version)
        except Exception as e:
            logger.error(f"Failed to list node pools for {self.cluster_name}: {e}")
            return Result.fail(
                QueryFailed(
                    f"Error retrieving Windows node pool Kubernetes versions for "
                    f"{self.cluster_name}: {e}"
                )
            )

        return Result.ok(versions)
