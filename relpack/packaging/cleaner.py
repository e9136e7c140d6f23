"""Cleaner — removes the staged tree once archiving is over."""

import logging
import shutil
from pathlib import Path

from relpack.packaging.steps import run_step
from relpack.packaging.types import StepResult

logger = logging.getLogger(__name__)


def remove_staged_tree(staged_dir: Path) -> StepResult:
    """Recursively delete staged_dir. Never raises.

    A staged tree that was never created (copy failed before mkdir)
    counts as cleaned.
    """
    staged_dir = Path(staged_dir)

    def _remove() -> None:
        if not staged_dir.exists() and not staged_dir.is_symlink():
            logger.debug("Nothing to clean at %s", staged_dir)
            return
        shutil.rmtree(staged_dir)

    return run_step("cleanup", str(staged_dir), _remove)
