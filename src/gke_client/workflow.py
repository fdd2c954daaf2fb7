"""
Update workflow that re-applies a cluster's Terraform plan.

The workflow is strictly linear. Each step either proceeds, ends the run
cleanly (the operator declined, or a required artifact is missing) or fails
with an error that is handed back to the caller unmodified.
"""

import logging
from pathlib import Path
from typing import List, Optional, Protocol, Union

from .exceptions import GKEClientError
from .models import (
    ClusterIdentity,
    ClusterPaths,
    GCloudSession,
    StepOutcome,
    ToolResult,
    UpdateResult,
    WorkflowState,
)
from .utils.display import display_cluster_paths
from .utils.paths import check_exists, resolve_cluster_paths
from .utils.prompt import APPLY_PLAN_MESSAGE, EXPERIMENTAL_UPDATE_MESSAGE, ConfirmationGate

logger = logging.getLogger(__name__)


class Authenticator(Protocol):
    def login(self, service_account: Optional[str] = None, skip_login: bool = False) -> GCloudSession:
        ...


class PlanRunner(Protocol):
    def init(self, plan_dir: Path) -> ToolResult:
        ...

    def plan(self, state_file: Path, vars_file: Path, plan_dir: Path) -> ToolResult:
        ...

    def apply(self, state_file: Path, vars_file: Path, plan_dir: Path) -> ToolResult:
        ...


class _Stop(Exception):
    """Internal signal carrying the terminal result of an early exit."""

    def __init__(self, result: UpdateResult) -> None:
        super().__init__(result.reason)
        self.result = result


class UpdateClusterWorkflow:
    """Re-apply the Terraform plan stored under ``~/.jx/clusters/<name>/terraform``."""

    def __init__(
        self,
        identity: ClusterIdentity,
        authenticator: Authenticator,
        runner: PlanRunner,
        gate: ConfirmationGate,
        home_dir: Union[str, Path],
        skip_login: bool = False,
    ) -> None:
        self.identity = identity
        self.authenticator = authenticator
        self.runner = runner
        self.gate = gate
        self.home_dir = Path(home_dir)
        self.skip_login = skip_login

        self.state = WorkflowState.START
        self.visited: List[WorkflowState] = [WorkflowState.START]
        self.paths: Optional[ClusterPaths] = None
        self.session: Optional[GCloudSession] = None

    def run(self) -> UpdateResult:
        """
        Run the workflow.

        Returns:
            UpdateResult: APPLIED on success, ABORTED when the run ended cleanly

        Raises:
            GKEClientError: Login, filesystem or terraform failures, unmodified
        """
        result = self.execute()
        if result.error is not None:
            raise result.error
        return result

    def execute(self) -> UpdateResult:
        """Run the workflow, returning failures as a FAILED result instead of raising."""
        try:
            self._confirm_experimental()
            self._login()
            self._require_cluster_name()
            paths = self._resolve_paths()
            self._check_preconditions(paths)
            self._init(paths)
            self._plan(paths)
            self._confirm_apply()
            self._apply(paths)
        except _Stop as stop:
            return stop.result
        except GKEClientError as e:
            logger.debug("Workflow failed in state %s", self.state.value)
            self._advance(WorkflowState.FAILED)
            return self._result(StepOutcome.FAILED, reason=str(e), error=e)

        return self._result(StepOutcome.PROCEED)

    def _confirm_experimental(self) -> None:
        if not self.gate.confirm(EXPERIMENTAL_UPDATE_MESSAGE):
            self._abort(StepOutcome.ABORTED_BY_USER, "Update declined by operator")
        self._advance(WorkflowState.EXPERIMENTAL_OPT_IN)

    def _login(self) -> None:
        self.session = self.authenticator.login(self.identity.service_account, self.skip_login)
        self._advance(WorkflowState.LOGGED_IN)

    def _require_cluster_name(self) -> None:
        if not self.identity.name:
            logger.info("No cluster name provided")
            self._abort(StepOutcome.ABORTED_MISSING_PRECONDITION, "No cluster name provided")

    def _resolve_paths(self) -> ClusterPaths:
        self.paths = resolve_cluster_paths(self.home_dir, self.identity.name, self.identity.service_account)
        self._advance(WorkflowState.PATHS_RESOLVED)
        display_cluster_paths(self.paths)
        return self.paths

    def _check_preconditions(self, paths: ClusterPaths) -> None:
        if not check_exists(paths.key_path):
            logger.info("Unable to find service account key %s", paths.key_path)
            self._abort(
                StepOutcome.ABORTED_MISSING_PRECONDITION,
                f"Unable to find service account key {paths.key_path}",
            )

        if not check_exists(paths.plan_dir):
            logger.info("Unable to find terraform plan dir %s", paths.plan_dir)
            self._abort(
                StepOutcome.ABORTED_MISSING_PRECONDITION,
                f"Unable to find terraform plan dir {paths.plan_dir}",
            )

        self._advance(WorkflowState.PRECONDITIONS_CHECKED)

    def _init(self, paths: ClusterPaths) -> None:
        self.runner.init(paths.plan_dir)
        self._advance(WorkflowState.INITIALIZED)

    def _plan(self, paths: ClusterPaths) -> None:
        self.runner.plan(paths.state_file, paths.vars_file, paths.plan_dir)
        self._advance(WorkflowState.PLANNED)

    def _confirm_apply(self) -> None:
        if not self.gate.confirm(APPLY_PLAN_MESSAGE):
            self._abort(StepOutcome.ABORTED_BY_USER, "Plan not applied")
        self._advance(WorkflowState.APPLY_OPT_IN)

    def _apply(self, paths: ClusterPaths) -> None:
        logger.info("Applying plan...")
        self.runner.apply(paths.state_file, paths.vars_file, paths.plan_dir)
        self._advance(WorkflowState.APPLIED)

    def _advance(self, state: WorkflowState) -> None:
        logger.debug("Workflow state %s -> %s", self.state.value, state.value)
        self.state = state
        self.visited.append(state)

    def _abort(self, outcome: StepOutcome, reason: str) -> None:
        self._advance(WorkflowState.ABORTED)
        raise _Stop(self._result(outcome, reason=reason))

    def _result(
        self,
        outcome: StepOutcome,
        reason: Optional[str] = None,
        error: Optional[BaseException] = None,
    ) -> UpdateResult:
        return UpdateResult(
            state=self.state,
            outcome=outcome,
            reason=reason,
            error=error,
            paths=self.paths,
            session=self.session,
            visited=list(self.visited),
        )
