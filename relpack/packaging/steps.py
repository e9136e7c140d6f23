"""Step runner shared by the stager, archivers and cleaner.

Each step is a callable executed with timing and error capture.
Raises no exceptions for filesystem or archive errors — always returns a
StepResult, so one failed step never prevents the next from running.
"""

import logging
import tarfile
import time
import zipfile
from typing import Callable

from relpack.packaging.types import StepResult

logger = logging.getLogger(__name__)

# Errors a step is expected to hit; anything else is a bug and propagates.
STEP_ERRORS = (OSError, tarfile.TarError, zipfile.BadZipFile, ValueError)


def run_step(name: str, target: str, action: Callable[[], None]) -> StepResult:
    """Run a single pipeline step and record its outcome."""
    logger.info("Running step '%s' (%s)", name, target)
    start = time.monotonic()

    try:
        action()
        step_result = StepResult(
            name=name,
            target=target,
            is_success=True,
            duration_seconds=time.monotonic() - start,
        )
    except STEP_ERRORS as exc:
        step_result = StepResult(
            name=name,
            target=target,
            is_success=False,
            duration_seconds=time.monotonic() - start,
            error=_describe_error(exc),
        )

    if step_result.is_success:
        logger.info(
            "Step '%s' OK (%s, %.1fs)",
            name, target, step_result.duration_seconds,
        )
    else:
        logger.error("Step '%s' FAILED (%s): %s", name, target, step_result.error)

    return step_result


def _describe_error(exc: BaseException) -> str:
    """Return a one-line description of a step error."""
    # shutil.copytree collects per-file failures into Error(list_of_tuples)
    if exc.args and isinstance(exc.args[0], list):
        failures = exc.args[0]
        first = failures[0] if failures else None
        detail = f": {first[0]}: {first[2]}" if first and len(first) == 3 else ""
        return f"{len(failures)} file(s) failed to copy{detail}"
    return str(exc) or exc.__class__.__name__
