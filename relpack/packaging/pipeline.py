"""Packaging pipeline.

Runs preconditions -> detect exclusions -> stage -> archive -> cleanup.
Preconditions raise PreconditionError before anything is written.
From staging on, every step runs best-effort: a failed copy or archive is
recorded and the remaining steps still run. Cleanup always runs exactly
once, after every requested format has been attempted.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

from relpack.packaging.archiver import archive_all
from relpack.packaging.cleaner import remove_staged_tree
from relpack.packaging.exclusions import detect_exclusions
from relpack.packaging.stager import check_preconditions, stage_tree, staged_name
from relpack.packaging.types import FormatTag, PackageResult, RunConfig

logger = logging.getLogger(__name__)


def package_project(
    project_path: str | Path,
    release_version: str,
    formats: Iterable[FormatTag],
    exclusions: Iterable[str] = (),
    workdir: Optional[Path] = None,
) -> PackageResult:
    """Package project_path as <project>-<release> archives in workdir.

    workdir defaults to the current directory; the staged tree and all
    artifacts are created there.

    Raises:
        PreconditionError: If the project is missing or the staged
            directory already exists.
    """
    project_dir = Path(project_path)
    workdir = Path.cwd() if workdir is None else Path(workdir)
    formats = tuple(formats)
    staged_dir = workdir / staged_name(project_dir, release_version)

    check_preconditions(project_dir, staged_dir)

    result = PackageResult(
        staged_dir=staged_dir,
        exclusions=detect_exclusions(project_dir, exclusions),
    )
    if not formats:
        logger.warning("No archive formats requested; nothing will be produced")

    logger.info("Packaging %s as %s", project_dir, staged_dir.name)
    try:
        result.steps.append(stage_tree(project_dir, staged_dir, result.exclusions))
        steps, artifacts = archive_all(staged_dir, formats)
        result.steps.extend(steps)
        result.artifacts.extend(artifacts)
    finally:
        result.steps.append(remove_staged_tree(staged_dir))

    if result.is_success:
        logger.info("Packaged %d artifact(s) for %s", len(result.artifacts), staged_dir.name)
    else:
        logger.error(
            "Packaging %s finished with %d failed step(s)",
            staged_dir.name, len(result.failed_steps),
        )
    return result


def package_from_config(config: RunConfig, workdir: Optional[Path] = None) -> PackageResult:
    """Run package_project with the values from a RunConfig."""
    return package_project(
        config.project_path,
        config.release_version,
        config.formats,
        exclusions=config.exclusions,
        workdir=workdir,
    )
