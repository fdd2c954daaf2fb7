"""
Display utilities for presenting workflow progress on the console.
"""

from rich.console import Console
from rich.table import Table

from ..models import ClusterPaths, UpdateResult, WorkflowState

console = Console()


def display_update_header(cluster_name: str) -> None:
    """Display the update workflow header."""
    console.print(f"[bold blue]🚀 Updating GKE cluster '{cluster_name}' with Terraform[/bold blue]")


def display_cluster_paths(paths: ClusterPaths) -> None:
    """Display the resolved cluster layout."""
    table = Table(title="Cluster Layout")
    table.add_column("Artifact", style="cyan")
    table.add_column("Path", style="green")

    table.add_row("Cluster dir", str(paths.cluster_dir))
    table.add_row("Service account key", str(paths.key_path))
    table.add_row("Plan dir", str(paths.plan_dir))
    table.add_row("Variables file", str(paths.vars_file))
    table.add_row("State file", str(paths.state_file))

    console.print(table)


def display_command(command: str) -> None:
    """Display an external command before it runs."""
    console.print(f"[dim]Running: {command}[/dim]")


def display_result_summary(result: UpdateResult) -> None:
    """Display the final workflow state."""
    if result.state == WorkflowState.APPLIED:
        display_success("✓ Terraform plan applied successfully")
    elif result.state == WorkflowState.ABORTED:
        reason = result.reason or "aborted"
        display_warning(f"Nothing applied: {reason}")
    else:
        display_error(f"✗ Cluster update failed: {result.error}")


def display_error(message: str) -> None:
    """Display error message."""
    console.print(f"[red]{message}[/red]")


def display_warning(message: str) -> None:
    """Display warning message."""
    console.print(f"[yellow]{message}[/yellow]")


def display_success(message: str) -> None:
    """Display success message."""
    console.print(f"[green]{message}[/green]")
