"""Exception hierarchy for the GKE cluster tooling."""

from typing import Optional, Sequence


class GKEClientError(RuntimeError):
    """Base class for fatal errors raised by the tooling."""


class ConfigError(GKEClientError):
    """Raised when the settings file cannot be loaded or validated."""


class RequirementsError(GKEClientError):
    """Raised when a required command line binary is not installed."""


class AuthenticationError(GKEClientError):
    """Raised when logging in to Google Cloud fails."""


class FilesystemError(GKEClientError):
    """Raised when the cluster directory layout cannot be created."""


class ToolExecutionError(GKEClientError):
    """Raised when an external tool exits non-zero or cannot be spawned."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: Optional[int],
        output: str = "",
        reason: Optional[str] = None,
    ) -> None:
        self.command = list(command)
        self.returncode = returncode
        self.output = output
        if reason is None:
            reason = f"exit code {returncode}"
        message = f"Command '{' '.join(self.command)}' failed: {reason}"
        if output.strip():
            message = f"{message}\n{output.rstrip()}"
        super().__init__(message)
