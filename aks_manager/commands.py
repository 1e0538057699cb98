"""Catalog of canned kubectl commands that can be run against a cluster."""

from pydantic import BaseModel

from aks_manager.exceptions import ValidationError
from aks_manager.models.table import ColumnSpec
from aks_manager.table import pod_age, pod_ready, pod_restarts, pod_status


class KubectlCommand(BaseModel):
    """A named kubectl invocation and how its output is displayed."""

    name: str
    args: str
    description: str
    columns: list[ColumnSpec] | None = None

    @property
    def is_table(self) -> bool:
        return bool(self.columns)


POD_COLUMNS = [
    ColumnSpec(name="Name", path="$.items[*].metadata.name"),
    ColumnSpec(name="Namespace", path="$.items[*].metadata.namespace"),
    ColumnSpec(name="Ready", path="$.items[*]", modifier=pod_ready),
    ColumnSpec(name="Status", path="$.items[*]", modifier=pod_status),
    ColumnSpec(name="Restarts", path="$.items[*]", modifier=pod_restarts),
    ColumnSpec(name="Age", path="$.items[*]", modifier=pod_age),
]

COMMANDS: dict[str, KubectlCommand] = {
    command.name: command
    for command in [
        KubectlCommand(
            name="pods",
            args="get pods --all-namespaces -o json",
            description="Pods in all namespaces",
            columns=POD_COLUMNS,
        ),
        KubectlCommand(
            name="cluster-info",
            args="cluster-info",
            description="Addresses of the control plane and cluster services",
        ),
        KubectlCommand(
            name="api-resources",
            args="api-resources",
            description="API resources supported by the cluster",
        ),
        KubectlCommand(name="nodes", args="get node", description="Cluster nodes"),
        KubectlCommand(
            name="services",
            args="describe services",
            description="Services in the default namespace",
        ),
    ]
}


def get_command(name: str) -> KubectlCommand:
    """Look up a canned command by name.

    Raises:
        ValidationError: If no command has that name
    """
    if name not in COMMANDS:
        raise ValidationError(
            f"Unknown command '{name}'", f"Available commands: {', '.join(COMMANDS)}"
        )
    return COMMANDS[name]
