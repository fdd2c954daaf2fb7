"""Authentication module for Google Cloud via the gcloud CLI."""

import logging
import subprocess
from typing import List, Optional

from rich.console import Console
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .exceptions import AuthenticationError
from .models import GCloudSession
from .utils.display import display_command

logger = logging.getLogger(__name__)
console = Console()


class GCloudAuthenticator:
    """Handle gcloud login with a user account or a service account key."""

    def __init__(self, binary: str = "gcloud") -> None:
        self.binary = binary

    def login(self, service_account: Optional[str] = None, skip_login: bool = False) -> GCloudSession:
        """
        Log in to Google Cloud and return the resulting session.

        A service account key always triggers ``gcloud auth activate-service-account``,
        even when ``skip_login`` is set. Otherwise ``gcloud auth login`` runs unless
        ``skip_login`` is set.

        Raises:
            AuthenticationError: If a login command fails or gcloud is missing
        """
        if service_account:
            console.print(f"[blue]Activating service account from {service_account}...[/blue]")
            self._run_login(["auth", "activate-service-account", "--key-file", service_account])
        elif not skip_login:
            console.print("[yellow]This will open a web browser for authentication...[/yellow]")
            self._run_login(["auth", "login", "--brief"])
        else:
            logger.debug("Skipping gcloud login")

        session = GCloudSession(
            account=self.active_account(),
            service_account_key=service_account or None,
            skipped_login=skip_login and not service_account,
        )

        if session.account:
            console.print(f"[green]✓[/green] Authenticated as {session.account}")
        return session

    def active_account(self) -> Optional[str]:
        """Return the active gcloud account, or None if it cannot be determined."""
        try:
            return self._read_active_account()
        except subprocess.SubprocessError as e:
            logger.warning(f"Could not determine active gcloud account: {e}")
            return None

    @retry(
        retry=retry_if_exception_type(subprocess.SubprocessError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=5),
        reraise=True,
    )
    def _read_active_account(self) -> Optional[str]:
        try:
            result = subprocess.run(
                [self.binary, "config", "get-value", "account"],
                capture_output=True,
                text=True,
                timeout=30,
            )
        except OSError as e:
            logger.debug(f"Unable to run {self.binary}: {e}")
            return None

        if result.returncode != 0:
            raise subprocess.CalledProcessError(result.returncode, result.args, result.stdout, result.stderr)

        account = result.stdout.strip()
        return account or None

    def _run_login(self, args: List[str]) -> None:
        cmd = [self.binary, *args]
        display_command(" ".join(cmd))

        try:
            result = subprocess.run(cmd, text=True)
        except FileNotFoundError as e:
            raise AuthenticationError(
                f"{self.binary} CLI not found. Please install the Google Cloud SDK first"
            ) from e
        except OSError as e:
            raise AuthenticationError(f"Unable to run {self.binary}: {e}") from e

        if result.returncode != 0:
            raise AuthenticationError(
                f"Failed to log in to Google Cloud: '{' '.join(cmd)}' exited with code {result.returncode}"
            )
