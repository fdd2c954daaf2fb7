"""Checks that the command line tools the workflow shells out to are installed."""

import logging
import shutil
from typing import Iterable, List

from .exceptions import RequirementsError

logger = logging.getLogger(__name__)


def find_missing_binaries(binaries: Iterable[str]) -> List[str]:
    """Return the binaries that cannot be resolved on PATH."""
    return [binary for binary in binaries if shutil.which(binary) is None]


def verify_requirements(*binaries: str) -> None:
    """
    Raise RequirementsError if any of ``binaries`` is not installed.

    Installing missing tools is left to the operator.
    """
    missing = find_missing_binaries(binaries)
    if missing:
        raise RequirementsError(
            f"Required command(s) not found on PATH: {', '.join(missing)}. "
            "Please install them and try again."
        )
    logger.debug("Found required binaries: %s", ", ".join(binaries))
