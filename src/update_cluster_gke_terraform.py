#!/usr/bin/env python3
"""
Re-apply the Terraform plan of an existing GKE cluster.

The plan lives in ~/.jx/clusters/<cluster>/terraform and is applied against
the state file kept alongside it.
"""

import argparse
import logging
from typing import Optional, Sequence

from rich.console import Console
from rich.logging import RichHandler

from gke_client.auth import GCloudAuthenticator
from gke_client.exceptions import GKEClientError
from gke_client.models import ClusterIdentity, RunMode, UpdateResult
from gke_client.requirements import verify_requirements
from gke_client.terraform import TerraformRunner
from gke_client.utils.config import load_settings
from gke_client.utils.display import display_error, display_result_summary, display_update_header
from gke_client.utils.prompt import ConfirmationGate
from gke_client.workflow import UpdateClusterWorkflow

console = Console()
logger = logging.getLogger(__name__)

DESCRIPTION = "Updates an existing kubernetes cluster on GKE using Terraform: Runs on Google Cloud"

LONG_DESCRIPTION = """
Command re-applies the terraform plan in ~/.jx/clusters/<cluster>/terraform against the specified cluster
"""

EXAMPLES = """
Examples:
  gke-update-cluster-terraform --name demo
  gke-update-cluster-terraform -n demo --batch-mode --service-account ~/keys/demo.key.json
"""


def configure_logging(verbose: bool = False) -> None:
    """Configure standard logging with rich handler."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True)],
    )


def build_parser() -> argparse.ArgumentParser:
    """Set up the CLI arguments."""
    parser = argparse.ArgumentParser(
        description=f"{DESCRIPTION}\n{LONG_DESCRIPTION}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EXAMPLES,
    )
    parser.add_argument("-n", "--name", default="", help="The name of this cluster")
    parser.add_argument(
        "--skip-login",
        action="store_true",
        help="Skip Google auth if already logged in via gcloud auth",
    )
    parser.add_argument(
        "--service-account",
        default="",
        help="Use a service account to login to GCE",
    )
    parser.add_argument(
        "-b",
        "--batch-mode",
        action="store_true",
        help="Run without prompting for confirmation",
    )
    parser.add_argument(
        "--config",
        help="Path to a YAML settings file (defaults to ~/.jx/gke-terraform.yaml when present).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser


def run_update(args: argparse.Namespace) -> UpdateResult:
    """Build the workflow from parsed arguments and run it."""
    settings = load_settings(args.config)
    verify_requirements(settings.gcloud_binary, settings.terraform_binary)

    mode = RunMode.BATCH if args.batch_mode else RunMode.INTERACTIVE
    identity = ClusterIdentity(name=args.name, service_account=args.service_account or None)

    workflow = UpdateClusterWorkflow(
        identity=identity,
        authenticator=GCloudAuthenticator(settings.gcloud_binary),
        runner=TerraformRunner(settings.terraform_binary),
        gate=ConfirmationGate(mode),
        home_dir=settings.home_dir(),
        skip_login=args.skip_login,
    )
    return workflow.run()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)

    if args.name:
        display_update_header(args.name)

    try:
        result = run_update(args)
    except GKEClientError as e:
        display_error(f"✗ Cluster update failed: {e}")
        return 1

    display_result_summary(result)
    return result.exit_code


def cli() -> None:
    """Console script entry point."""
    try:
        raise SystemExit(main())
    except KeyboardInterrupt:
        console.print("\n[yellow]Cluster update interrupted by user.[/yellow]")
        raise SystemExit(130)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    cli()
