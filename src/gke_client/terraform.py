"""Terraform command runner used to re-apply cluster plans."""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Tuple, Union

from rich.console import Console

from .exceptions import ToolExecutionError
from .models import ToolResult

logger = logging.getLogger(__name__)
console = Console()

PathLike = Union[str, Path]


class TerraformRunner:
    """
    Run ``terraform init``, ``plan`` and ``apply`` against a plan directory.

    Every invocation blocks until terraform exits. Failures are raised as
    ToolExecutionError and never retried: a failed apply may already have
    changed real infrastructure.
    """

    def __init__(self, binary: str = "terraform", output_console: Optional[Console] = None) -> None:
        self.binary = binary
        self.console = output_console or console

    def init(self, plan_dir: PathLike) -> ToolResult:
        """Initialise the plan directory. Output is captured, not streamed."""
        return self._run(["init", str(plan_dir)], verbose=False)

    def plan(self, state_file: PathLike, vars_file: PathLike, plan_dir: PathLike) -> ToolResult:
        """Compute the plan and stream it to the operator."""
        args = [
            "plan",
            f"-state={state_file}",
            f"-var-file={vars_file}",
            str(plan_dir),
        ]
        return self._run(args, verbose=True)

    def apply(self, state_file: PathLike, vars_file: PathLike, plan_dir: PathLike) -> ToolResult:
        """Apply the plan without terraform's own approval prompt."""
        args = [
            "apply",
            "-auto-approve",
            f"-state={state_file}",
            f"-var-file={vars_file}",
            str(plan_dir),
        ]
        return self._run(args, verbose=True)

    def _run(self, args: List[str], verbose: bool) -> ToolResult:
        command = [self.binary, *args]
        logger.debug("Running: %s", " ".join(command))

        try:
            if verbose:
                returncode, output = self._run_streaming(command)
            else:
                completed = subprocess.run(
                    command,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.STDOUT,
                    text=True,
                )
                returncode, output = completed.returncode, completed.stdout or ""
        except OSError as e:
            raise ToolExecutionError(command, None, reason=f"unable to start {self.binary}: {e}") from e

        if returncode != 0:
            raise ToolExecutionError(command, returncode, output)

        return ToolResult(command=command, returncode=returncode, output=output)

    def _run_streaming(self, command: List[str]) -> Tuple[int, str]:
        lines: List[str] = []
        with subprocess.Popen(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            bufsize=1,
        ) as process:
            assert process.stdout is not None
            for line in process.stdout:
                lines.append(line)
                self.console.print(line, end="", markup=False, highlight=False, emoji=False, soft_wrap=True)
            returncode = process.wait()
        return returncode, "".join(lines)
