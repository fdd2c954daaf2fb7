"""
Yes/no confirmation prompts that are skipped in batch mode.
"""

import logging
from typing import Callable, Optional

from rich.console import Console
from rich.prompt import Confirm

from ..models import RunMode

logger = logging.getLogger(__name__)
console = Console()

EXPERIMENTAL_UPDATE_MESSAGE = (
    "Updating a GKE cluster with terraform is an experimental feature in jx.  "
    "Would you like to continue?"
)
APPLY_PLAN_MESSAGE = "Would you like to apply this plan"


def ask_confirmation(message: str) -> bool:
    """Ask the operator a yes/no question on the console, defaulting to no."""
    try:
        return Confirm.ask(message, default=False, console=console)
    except EOFError:
        # stdin closed before an answer was given
        return False


class ConfirmationGate:
    """Gate expensive or destructive steps behind operator confirmation."""

    def __init__(self, mode: RunMode, ask: Optional[Callable[[str], bool]] = None) -> None:
        self.mode = mode
        self._ask = ask or ask_confirmation

    @property
    def interactive(self) -> bool:
        return self.mode == RunMode.INTERACTIVE

    def confirm(self, message: str) -> bool:
        if not self.interactive:
            logger.debug("Batch mode, auto-confirming: %s", message)
            return True

        answer = bool(self._ask(message))
        logger.debug("Operator answered %s to: %s", "yes" if answer else "no", message)
        return answer
