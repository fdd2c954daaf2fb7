"""
Filesystem layout helpers for clusters managed under ``~/.jx/clusters``.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from ..exceptions import FilesystemError
from ..models import ClusterPaths

logger = logging.getLogger(__name__)

JX_DIR_NAME = ".jx"
CLUSTERS_DIR_NAME = "clusters"
TERRAFORM_DIR_NAME = "terraform"
TFVARS_FILE_NAME = "terraform.tfvars"
TFSTATE_FILE_NAME = "terraform.tfstate"


def service_account_name(cluster_name: str) -> str:
    """Name of the service account provisioned for a cluster."""
    return f"jx-{cluster_name}"


def derive_cluster_paths(
    home_dir: Union[str, Path],
    cluster_name: str,
    service_account: Optional[str] = None,
) -> ClusterPaths:
    """
    Derive the paths for a cluster without touching the filesystem.

    Args:
        home_dir: Operator home directory
        cluster_name: Name of the cluster
        service_account: Optional key file that replaces the derived key path

    Returns:
        ClusterPaths: Paths for the cluster's key, plan directory, vars and state files
    """
    home = Path(home_dir)
    clusters_dir = home / JX_DIR_NAME / CLUSTERS_DIR_NAME
    cluster_dir = clusters_dir / cluster_name

    if service_account:
        key_path = Path(service_account)
    else:
        key_path = cluster_dir / f"{service_account_name(cluster_name)}.key.json"

    plan_dir = cluster_dir / TERRAFORM_DIR_NAME

    return ClusterPaths(
        home_dir=home,
        clusters_dir=clusters_dir,
        cluster_dir=cluster_dir,
        key_path=key_path,
        plan_dir=plan_dir,
        vars_file=plan_dir / TFVARS_FILE_NAME,
        state_file=plan_dir / TFSTATE_FILE_NAME,
    )


def resolve_cluster_paths(
    home_dir: Union[str, Path],
    cluster_name: str,
    service_account: Optional[str] = None,
) -> ClusterPaths:
    """
    Derive the cluster paths and make sure the cluster directory exists.

    Raises:
        FilesystemError: If the cluster directory cannot be created
    """
    paths = derive_cluster_paths(home_dir, cluster_name, service_account)

    try:
        paths.cluster_dir.mkdir(mode=0o777, parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"Unable to create cluster directory {paths.cluster_dir}: {e}") from e

    logger.debug("Resolved cluster paths for %s: %s", cluster_name, paths)
    return paths


def check_exists(path: Union[str, Path]) -> bool:
    """Return True when ``path`` exists. Never raises."""
    try:
        return Path(path).exists()
    except OSError:
        return False
