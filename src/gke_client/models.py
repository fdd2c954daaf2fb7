"""Data models for the GKE Terraform update workflow."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class RunMode(str, Enum):
    """Whether confirmation prompts block on operator input."""
    INTERACTIVE = "interactive"
    BATCH = "batch"


class StepOutcome(str, Enum):
    """Result of a single workflow phase."""
    PROCEED = "proceed"
    ABORTED_BY_USER = "aborted_by_user"
    ABORTED_MISSING_PRECONDITION = "aborted_missing_precondition"
    FAILED = "failed"


class WorkflowState(str, Enum):
    """States of the update workflow."""
    START = "START"
    EXPERIMENTAL_OPT_IN = "EXPERIMENTAL_OPT_IN"
    LOGGED_IN = "LOGGED_IN"
    PATHS_RESOLVED = "PATHS_RESOLVED"
    PRECONDITIONS_CHECKED = "PRECONDITIONS_CHECKED"
    INITIALIZED = "INITIALIZED"
    PLANNED = "PLANNED"
    APPLY_OPT_IN = "APPLY_OPT_IN"
    APPLIED = "APPLIED"
    ABORTED = "ABORTED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class ClusterIdentity:
    """Cluster selected on the command line."""
    name: str
    service_account: Optional[str] = None


@dataclass(frozen=True)
class ClusterPaths:
    """On-disk layout for a single cluster under ``~/.jx/clusters``."""
    home_dir: Path
    clusters_dir: Path
    cluster_dir: Path
    key_path: Path
    plan_dir: Path
    vars_file: Path
    state_file: Path


@dataclass
class GCloudSession:
    """Authenticated gcloud session produced by a login."""
    account: Optional[str] = None
    service_account_key: Optional[str] = None
    skipped_login: bool = False


@dataclass
class ToolResult:
    """Outcome of an external tool invocation."""
    command: List[str]
    returncode: int
    output: str = ""


@dataclass
class UpdateResult:
    """Terminal result of an update workflow run."""
    state: WorkflowState
    outcome: StepOutcome
    reason: Optional[str] = None
    error: Optional[BaseException] = None
    paths: Optional[ClusterPaths] = None
    session: Optional[GCloudSession] = None
    visited: List[WorkflowState] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.outcome != StepOutcome.FAILED

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1


class UpdateSettings(BaseModel):
    """Settings loaded from the optional YAML settings file."""
    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    terraform_binary: str = "terraform"
    gcloud_binary: str = "gcloud"
    operator_home: Optional[str] = None

    def home_dir(self) -> Path:
        """Return the operator home directory used to resolve cluster paths."""
        if self.operator_home:
            return Path(self.operator_home).expanduser()
        return Path.home()
