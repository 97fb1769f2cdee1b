"""Command-line interface for devops task sync."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from devops_task_sync import __version__
from devops_task_sync.azure_devops import AzureDevOpsClient, AzureDevOpsError, ErrorCategory
from devops_task_sync.config import Config, ConfigurationError
from devops_task_sync.sync import SyncEngine
from devops_task_sync.tasks import FileTaskStore
from devops_task_sync.utils import FernetSecretStore, SecretDecryptionError, get_logger, setup_logging

app = typer.Typer(help="Import Azure DevOps work items as time-tracking tasks")
console = Console()
logger = get_logger(__name__)

EXIT_CODES = {
    ErrorCategory.NOT_FOUND: 2,
    ErrorCategory.AUTHENTICATION_FAILED: 3,
    ErrorCategory.RATE_LIMITED: 4,
    ErrorCategory.UNKNOWN: 1,
}

CONFIG_DIR_OPTION = typer.Option(
    None,
    "--config-dir",
    help="Configuration directory. Defaults to ~/.devops-task-sync/",
)
VERBOSE_OPTION = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Enable verbose logging.",
)


def _report_azure_error(error: AzureDevOpsError) -> None:
    """Print an Azure DevOps failure and exit with its category's code."""
    logger.error(f"Azure DevOps request failed: {error}")

    if error.category is ErrorCategory.NOT_FOUND:
        console.print(f"[red]{error.message}[/red]")
    elif error.category is ErrorCategory.AUTHENTICATION_FAILED:
        console.print("[red]Azure DevOps authentication failed. Please check your PAT.[/red]")
        if getattr(error, "hint", None):
            console.print(f"[yellow]{error.hint}[/yellow]")
    elif error.category is ErrorCategory.RATE_LIMITED:
        console.print("[yellow]Azure DevOps rate limit exceeded. Please try again later.[/yellow]")
    else:
        console.print("[red]Failed to connect to Azure DevOps. Please try again later.[/red]")
        console.print(f"[dim]{error.message}[/dim]")

    raise typer.Exit(code=EXIT_CODES[error.category])


def _build_client(config: Config) -> AzureDevOpsClient:
    """Create a client from the stored connection settings."""
    try:
        organization_url, encrypted_pat = config.require_connection()
        pat = FernetSecretStore().decrypt(encrypted_pat)
    except ConfigurationError as e:
        console.print(f"[yellow]{e}[/yellow]")
        raise typer.Exit(code=1)
    except (SecretDecryptionError, ValueError) as e:
        logger.error(f"Failed to decrypt Azure DevOps PAT: {e}")
        console.print("[red]Failed to decrypt Azure DevOps PAT[/red]")
        raise typer.Exit(code=1)
    return AzureDevOpsClient(organization_url, pat)


def _require_link(config: Config, project_id: str) -> dict:
    try:
        return config.require_project_link(project_id)
    except ConfigurationError as e:
        console.print(f"[yellow]{e}[/yellow]")
        raise typer.Exit(code=1)


@app.command()
def configure(
    organization_url: Optional[str] = typer.Option(
        None,
        "--organization-url",
        help="Organization URL, e.g. https://dev.azure.com/myorg",
    ),
    user_id: Optional[str] = typer.Option(
        None,
        "--user",
        help="Local user that owns imported tasks. Defaults to the login name.",
    ),
    config_dir: Optional[Path] = CONFIG_DIR_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Configure the Azure DevOps organization and Personal Access Token."""
    setup_logging(
        log_level=logging.DEBUG if verbose else logging.INFO,
        config_dir=config_dir,
    )
    config = Config(config_dir)

    console.print("[bold cyan]Azure DevOps Configuration[/bold cyan]")
    if not organization_url:
        current_url = config.get_organization_url()
        if current_url:
            organization_url = Prompt.ask("Organization URL", default=current_url)
        else:
            organization_url = Prompt.ask("Organization URL")
    pat = Prompt.ask("Personal Access Token (Work Items: Read)", password=True)

    try:
        secret_store = FernetSecretStore()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    async def _validate() -> bool:
        async with AzureDevOpsClient(organization_url, pat) as client:
            return await client.validate_connection()

    console.print("[cyan]Testing connection...[/cyan]")
    if not asyncio.run(_validate()):
        console.print("[red]✗ Could not connect to Azure DevOps with these credentials[/red]")
        raise typer.Exit(code=EXIT_CODES[ErrorCategory.AUTHENTICATION_FAILED])

    config.set_connection(organization_url, secret_store.encrypt(pat))
    if user_id:
        config.set_user_id(user_id)

    console.print("[green]✓ Connected to Azure DevOps[/green]")
    console.print("Run 'devops-task-sync link <project> <azure-project-name>' next.")


@app.command()
def link(
    project_id: str = typer.Argument(..., help="Local project ID."),
    azure_project_name: str = typer.Argument(..., help="Azure DevOps project name."),
    config_dir: Optional[Path] = CONFIG_DIR_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Link a local project to an Azure DevOps project."""
    setup_logging(
        log_level=logging.DEBUG if verbose else logging.INFO,
        config_dir=config_dir,
    )
    config = Config(config_dir)
    client = _build_client(config)

    async def _fetch():
        async with client:
            return await client.get_project(azure_project_name)

    try:
        azure_project = asyncio.run(_fetch())
    except AzureDevOpsError as e:
        _report_azure_error(e)

    config.link_project(project_id, azure_project.id, azure_project.name)
    console.print(
        f"[green]✓ Linked {project_id} to {azure_project.name} ({azure_project.id})[/green]"
    )
    console.print(f"  {azure_project.url}")


@app.command()
def iterations(
    project_id: str = typer.Argument(..., help="Local project ID."),
    config_dir: Optional[Path] = CONFIG_DIR_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """List the iterations of the linked Azure DevOps project."""
    setup_logging(
        log_level=logging.DEBUG if verbose else logging.INFO,
        config_dir=config_dir,
    )
    config = Config(config_dir)
    azure_link = _require_link(config, project_id)
    client = _build_client(config)

    async def _fetch():
        async with client:
            return await client.get_iterations(azure_link["azure_project_id"])

    try:
        found = asyncio.run(_fetch())
    except AzureDevOpsError as e:
        _report_azure_error(e)

    if not found:
        console.print("[yellow]No iterations found.[/yellow]")
        return

    table = Table(title=f"Iterations of {azure_link.get('azure_project_name', project_id)}")
    table.add_column("Iteration", style="cyan")
    table.add_column("Path", style="magenta")
    table.add_column("Start", style="green")
    table.add_column("Finish", style="green")

    for iteration in found:
        table.add_row(
            iteration.display_name,
            iteration.path,
            iteration.start_date.date().isoformat() if iteration.start_date else "-",
            iteration.finish_date.date().isoformat() if iteration.finish_date else "-",
        )

    console.print(table)


@app.command("import")
def import_work_items(
    project_id: str = typer.Argument(..., help="Local project ID."),
    iteration_path: str = typer.Option(
        ...,
        "--iteration",
        "-i",
        help="Iteration path, e.g. 'MyProject\\Sprint 1'.",
    ),
    user_id: Optional[str] = typer.Option(
        None,
        "--user",
        help="Local user that owns the imported tasks.",
    ),
    config_dir: Optional[Path] = CONFIG_DIR_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Import the work items of an iteration as tasks."""
    setup_logging(
        log_level=logging.DEBUG if verbose else logging.INFO,
        config_dir=config_dir,
    )
    if not iteration_path.strip():
        console.print("[red]Iteration path is required[/red]")
        raise typer.Exit(code=1)

    config = Config(config_dir)
    azure_link = _require_link(config, project_id)
    client = _build_client(config)
    engine = SyncEngine(FileTaskStore(config.storage))
    owner = user_id or config.get_user_id()

    async def _import():
        async with client:
            work_items = await client.get_work_items_by_iteration(
                azure_link["azure_project_id"], iteration_path
            )
        logger.info(f"Fetched {len(work_items)} work items from {iteration_path}")
        return await engine.import_work_items(work_items, project_id, owner)

    try:
        result = asyncio.run(_import())
    except AzureDevOpsError as e:
        _report_azure_error(e)

    config.record_sync(project_id, engine.clock())

    table = Table(title="Import Results")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="magenta")
    table.add_row("Imported", str(result.imported))
    table.add_row("Skipped", str(result.skipped))
    console.print(table)

    for task in result.tasks:
        console.print(f"  + #{task.external_id} {task.name}")


@app.command()
def tasks(
    project_id: Optional[str] = typer.Argument(None, help="Only show tasks of this project."),
    config_dir: Optional[Path] = CONFIG_DIR_OPTION,
) -> None:
    """List locally stored tasks."""
    setup_logging(config_dir=config_dir)

    config = Config(config_dir)
    found = asyncio.run(FileTaskStore(config.storage).list_tasks(project_id))

    if not found:
        console.print("[yellow]No tasks imported yet.[/yellow]")
        return

    table = Table(title="Tasks")
    table.add_column("Project", style="cyan")
    table.add_column("Work Item", style="magenta")
    table.add_column("Type", style="magenta")
    table.add_column("Name", style="green")
    table.add_column("Assigned To", style="yellow")

    for task in found:
        metadata = task.azure_devops
        table.add_row(
            task.project_id,
            str(metadata.external_id) if metadata else "-",
            metadata.work_item_type.value if metadata else "-",
            task.name,
            (metadata.assigned_to if metadata else None) or "-",
        )

    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"DevOps Task Sync v{__version__}")


def main() -> None:
    """Main entry point."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        console.print(f"[red]Unexpected error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
