"""Tools for re-converging GKE clusters provisioned with Terraform."""

__version__ = "0.1.0"
