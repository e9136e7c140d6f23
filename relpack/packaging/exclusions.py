"""Exclusion detection — finds VCS checkouts inside the project tree.

Detection flow:
1. Walk the project tree once, recording which VCS marker names appear.
2. Map each detected family to the exclusions it implies.
3. Append those to the user's exclusions (user patterns first, no dedup).

Markers are matched anywhere in the tree, not just at the root, so a
vendored git submodule or an old svn working copy is caught as well.
"""

import logging
import os
from enum import StrEnum
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)


class VcsFamily(StrEnum):
    """Version-control systems recognised by their marker directory."""

    GIT = "git"
    SVN = "svn"


VCS_MARKERS: dict[VcsFamily, str] = {
    VcsFamily.GIT: ".git",
    VcsFamily.SVN: ".svn",
}

VCS_EXCLUSIONS: dict[VcsFamily, tuple[str, ...]] = {
    VcsFamily.GIT: (".git", ".gitignore"),
    VcsFamily.SVN: (".svn",),
}


def detect_vcs(project_dir: Path) -> list[VcsFamily]:
    """Return the VCS families whose marker appears anywhere under project_dir.

    Order follows VCS_MARKERS, not discovery order, so results are stable.
    A missing project_dir yields an empty list.
    """
    wanted = {marker: family for family, marker in VCS_MARKERS.items()}
    found: set[VcsFamily] = set()

    for _root, dirnames, filenames in os.walk(project_dir):
        # .git is a plain file in worktrees and submodules
        for name in (*dirnames, *filenames):
            family = wanted.get(name)
            if family is not None:
                found.add(family)
        if len(found) == len(wanted):
            break

    return [family for family in VCS_MARKERS if family in found]


def detect_exclusions(
    project_dir: Path,
    user_exclusions: Iterable[str] = (),
) -> tuple[str, ...]:
    """Combine user exclusions with those implied by detected VCS markers."""
    exclusions = list(user_exclusions)
    families = detect_vcs(Path(project_dir))

    for family in families:
        exclusions.extend(VCS_EXCLUSIONS[family])

    if families:
        logger.info(
            "Detected VCS checkout (%s) in %s",
            ", ".join(families), project_dir,
        )
    logger.debug("Effective exclusions: %s", exclusions)
    return tuple(exclusions)
