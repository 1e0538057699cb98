"""Run a canned kubectl command against a cluster and shape its output."""

from pydantic import BaseModel

from aks_manager.azure import AKSClient
from aks_manager.commands import KubectlCommand
from aks_manager.exceptions import KubectlError, ParseError
from aks_manager.kubectl import KubectlRunner
from aks_manager.logging_config import get_logger
from aks_manager.models.table import Table
from aks_manager.result import Result
from aks_manager.table import build_table

logger = get_logger(__name__)


class CommandOutput(BaseModel):
    """Output of a canned command, as a table or as plain text."""

    command: str
    cluster_name: str
    text: str
    table: Table | None = None


def run_command(
    client: AKSClient, runner: KubectlRunner, command: KubectlCommand
) -> Result[CommandOutput]:
    """
    Fetch the cluster kubeconfig, run ``command`` and build its output.

    Args:
        client: Azure client for the target cluster
        runner: kubectl runner
        command: Canned command to run

    Returns:
        Result with the command output, or the first error encountered
    """
    cluster_name = client.cluster_name
    logger.info(f"Running kubectl {command.args} on cluster {cluster_name}")

    kubeconfig = client.get_kubeconfig_yaml()
    if kubeconfig.failed:
        return Result.fail(kubeconfig.error)

    output = runner.run(kubeconfig.result, command.args)
    if output.failed:
        return Result.fail(
            KubectlError(
                f"Failed to run kubectl {command.args} on cluster {cluster_name}: "
                f"{output.error.message}",
                output.error.details,
            )
        )

    text = output.result.stdout
    table = None
    if command.is_table:
        built = build_table(command.columns, text)
        if built.failed:
            return Result.fail(
                ParseError(
                    f"Failed to read output of kubectl {command.args} on cluster {cluster_name}",
                    built.error.format_message(),
                )
            )
        table = built.result

    return Result.ok(
        CommandOutput(command=command.args, cluster_name=cluster_name, text=text, table=table)
    )
