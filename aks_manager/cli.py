"""Main CLI entry point for AKS cluster management."""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from aks_manager.exceptions import AKSManagerError
from aks_manager.logging_config import get_logger, setup_logging
from aks_manager.models.cluster import CloudType, ClusterState, ClusterTarget

app = typer.Typer(
    name="aks-mgr",
    help="Inspect and control Azure Kubernetes Service clusters",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)

STATE_STYLES = {
    ClusterState.STARTED: "green",
    ClusterState.STARTING: "yellow",
    ClusterState.STOPPING: "yellow",
    ClusterState.STOPPED: "red",
}


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    log_file: str | None = typer.Option(None, "--log-file", help="Path to log file"),
    config_path: str | None = typer.Option(
        None, "--config", "-c", help="Configuration file (default: ~/.aks-manager/config.yml)"
    ),
    resource_id: str | None = typer.Option(
        None, "--resource-id", help="ARM resource id of the managed cluster"
    ),
    subscription: str | None = typer.Option(None, "--subscription", "-s", help="Subscription id"),
    resource_group: str | None = typer.Option(
        None, "--resource-group", "-g", help="Resource group of the cluster"
    ),
    cluster: str | None = typer.Option(None, "--cluster", "-n", help="Cluster name"),
    cloud: CloudType | None = typer.Option(None, "--cloud", help="Azure cloud: public or usgov"),
):
    """Global options for all commands."""
    log_path = Path(log_file) if log_file else None
    setup_logging(verbose=verbose, log_file=log_path)
    logger.debug("Logging initialized")

    ctx.obj = {
        "config_path": config_path,
        "resource_id": resource_id,
        "subscription": subscription,
        "resource_group": resource_group,
        "cluster": cluster,
        "cloud": cloud,
    }


def _fail(message: str) -> None:
    console.print(f"[red]Error:[/red] {escape(message)}")
    raise typer.Exit(code=1)


def _resolve(ctx: typer.Context) -> tuple[ClusterTarget, "AKSConfig | None"]:
    """Work out the target cluster from options or the configuration file."""
    from aks_manager.config import AKSConfig, default_config_path

    options = ctx.obj or {}
    cloud = options.get("cloud")

    if options.get("resource_id"):
        target = ClusterTarget.from_resource_id(options["resource_id"], cloud or CloudType.PUBLIC)
        return target, None

    if options.get("subscription") or options.get("resource_group") or options.get("cluster"):
        missing = [
            flag
            for flag, key in (
                ("--subscription", "subscription"),
                ("--resource-group", "resource_group"),
                ("--cluster", "cluster"),
            )
            if not options.get(key)
        ]
        if missing:
            _fail(f"Missing cluster options: {', '.join(missing)}")
        return (
            ClusterTarget(
                subscription_id=options["subscription"],
                resource_group=options["resource_group"],
                name=options["cluster"],
                cloud=cloud or CloudType.PUBLIC,
            ),
            None,
        )

    config_path = default_config_path()
    if options.get("config_path"):
        config_path = Path(options["config_path"])
    config = AKSConfig.load(config_path)
    target = config.target()
    if cloud:
        target = target.model_copy(update={"cloud": cloud})
    return target, config


def make_client(target: ClusterTarget):
    """Build the Azure client for a cluster."""
    from aks_manager.azure import AKSClient

    return AKSClient(target)


def make_runner(config=None):
    """Build the kubectl runner, using configured settings when present."""
    from aks_manager.kubectl import KubectlRunner

    if config is None:
        return KubectlRunner()
    return KubectlRunner(kubectl_path=config.kubectl_path, timeout=config.kubectl_timeout)


def _client_for(ctx: typer.Context):
    from pydantic import ValidationError

    try:
        target, config = _resolve(ctx)
    except AKSManagerError as e:
        _fail(e.format_message())
    except ValidationError as e:
        _fail(f"Invalid cluster options: {e}")
    logger.debug(f"Target cluster: {target.resource_id}")
    return make_client(target), config


@app.command()
def version() -> None:
    """Show version information."""
    from aks_manager import __version__

    typer.echo(f"aks-manager version {__version__}")


@app.command()
def config_init(
    subscription: str = typer.Argument(..., help="Subscription id"),
    resource_group: str = typer.Argument(..., help="Resource group of the cluster"),
    cluster: str = typer.Argument(..., help="Cluster name"),
    cloud: CloudType = typer.Option(CloudType.PUBLIC, "--cloud", help="Azure cloud"),
    kubectl_path: str = typer.Option("kubectl", "--kubectl-path", help="kubectl binary"),
    kubectl_timeout: int = typer.Option(60, "--kubectl-timeout", help="kubectl timeout (seconds)"),
    path: str | None = typer.Option(None, "--path", "-p", help="Where to write the configuration"),
) -> None:
    """
    Write a configuration file for the target cluster.

    Later commands read the cluster from this file when no cluster options
    are given.
    """
    from pydantic import ValidationError

    from aks_manager.config import AKSConfig, default_config_path

    try:
        config = AKSConfig(
            subscription_id=subscription,
            resource_group=resource_group,
            cluster_name=cluster,
            cloud=cloud,
            kubectl_path=kubectl_path,
            kubectl_timeout=kubectl_timeout,
        )
    except ValidationError as e:
        console.print("[red]Validation Error:[/red]")
        for error in e.errors():
            field = ".".join(str(x) for x in error["loc"])
            console.print(f"  - {field}: {error['msg']}")
        raise typer.Exit(code=1)

    config_path = Path(path) if path else default_config_path()
    config.save(config_path)
    console.print(f"[green]✓[/green] Configuration written to {config_path}")


@app.command()
def commands() -> None:
    """List the kubectl commands available to the kubectl command."""
    from aks_manager.commands import COMMANDS

    table = Table(title="Available Commands")
    table.add_column("Name", style="cyan")
    table.add_column("kubectl", style="magenta")
    table.add_column("Output", style="green")
    table.add_column("Description")

    for command in COMMANDS.values():
        output = "table" if command.is_table else "text"
        table.add_row(command.name, f"kubectl {command.args}", output, command.description)

    console.print(table)


@app.command()
def state(ctx: typer.Context) -> None:
    """Show whether the cluster is started, starting, stopping or stopped."""
    client, _ = _client_for(ctx)

    result = client.determine_cluster_state()
    if result.failed:
        _fail(result.message)

    style = STATE_STYLES[result.result]
    console.print(f"[bold]{client.cluster_name}[/bold]: [{style}]{result.result.value}[/{style}]")


@app.command()
def start(ctx: typer.Context) -> None:
    """
    Start a stopped cluster.

    The request is sent without waiting for it to complete; run the state
    command to follow progress.
    """
    client, _ = _client_for(ctx)

    result = client.start_cluster()
    if result.failed:
        _fail(result.message)

    console.print(f"[green]✓[/green] {result.result}")


@app.command()
def stop(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
) -> None:
    """
    Stop a running cluster.

    The request is sent without waiting for it to complete; run the state
    command to follow progress.
    """
    client, _ = _client_for(ctx)

    if not force:
        confirm = typer.confirm(f"Stop cluster '{client.cluster_name}'?")
        if not confirm:
            console.print("Operation cancelled")
            raise typer.Exit(code=0)

    result = client.stop_cluster()
    if result.failed:
        _fail(result.message)

    console.print(f"[green]✓[/green] {result.result}")


@app.command()
def kubeconfig(
    ctx: typer.Context,
    output: str | None = typer.Option(
        None, "--output", "-o", help="Write the kubeconfig to this file instead of stdout"
    ),
) -> None:
    """Fetch the user kubeconfig of the cluster."""
    client, _ = _client_for(ctx)

    result = client.get_kubeconfig_yaml()
    if result.failed:
        _fail(result.message)

    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(result.result)
        output_path.chmod(0o600)
        console.print(f"[green]✓[/green] Kubeconfig written to {output_path}")
    else:
        typer.echo(result.result)


@app.command()
def windows_versions(ctx: typer.Context) -> None:
    """List Kubernetes versions of the cluster's Windows node pools."""
    client, _ = _client_for(ctx)

    result = client.get_windows_node_pool_versions()
    if result.failed:
        _fail(result.message)

    if not result.result:
        console.print(f"[yellow]No Windows node pools in cluster {client.cluster_name}[/yellow]")
        return

    for k8s_version in result.result:
        console.print(f"  - {k8s_version}")


@app.command()
def kubectl(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Command to run (see the commands command)"),
) -> None:
    """
    Run a canned kubectl command against the cluster.

    The cluster kubeconfig is fetched from Azure and kept in a temporary
    file only for the duration of the command.

    Examples:
        aks-mgr kubectl pods
        aks-mgr --cluster prod -g prod-rg -s <sub> kubectl cluster-info
    """
    from aks_manager.commands import get_command
    from aks_manager.render import render_plain, render_table
    from aks_manager.service import run_command

    try:
        command = get_command(name)
    except AKSManagerError as e:
        _fail(e.format_message())

    client, config = _client_for(ctx)
    runner = make_runner(config)

    with console.status(f"Loading {client.cluster_name} kubectl command run..."):
        result = run_command(client, runner, command)

    if result.failed:
        _fail(result.message)

    output = result.result
    title = f"kubectl {output.command} ({output.cluster_name})"
    if output.table is not None:
        console.print(render_table(output.table, title=title))
        console.print(f"\n[bold]Total rows:[/bold] {len(output.table.rows)}")
    else:
        console.print(render_plain(output.text, title=title))


if __name__ == "__main__":
    app()
