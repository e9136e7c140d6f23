"""Stager — builds the filtered snapshot every archive is made from.

The staged tree lives at <workdir>/<project>-<release>. It is a plain
recursive copy of the project, preserving permissions and timestamps,
with every entry matching an exclusion pattern left out at any depth.

Pattern semantics follow a name-filtering tree copy:
  - "build"      matches any entry named build
  - "*.pyc"      shell-style globs match against entry names
  - "docs/_out"  patterns containing "/" match the path relative to the
                 project root (a leading "/" is ignored)
  - "dist/"      a trailing "/" restricts the match to directories

After copying, editor state kept in extended attributes is scrubbed.
"""

import fnmatch
import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Callable, Iterable

from relpack.errors import PreconditionError
from relpack.packaging.steps import run_step
from relpack.packaging.types import StepResult

logger = logging.getLogger(__name__)

# TextMate remembers caret position per file in this attribute.
EDITOR_XATTRS = ("com.macromates.caret",)


def staged_name(project_dir: Path, release_version: str) -> str:
    """Return the staged tree / artifact stem: <project>-<release>.

    The project name is taken from the absolute path, so "." and ".."
    resolve to the directory they point at.
    """
    return f"{Path(os.path.abspath(project_dir)).name}-{release_version}"


def check_preconditions(project_dir: Path, staged_dir: Path) -> None:
    """Fail before any mutation if staging cannot start.

    Checked in order: the project must be an existing directory, and the
    staged directory must not exist yet. An existing staged directory is
    left exactly as found.
    """
    project_dir = Path(project_dir)
    staged_dir = Path(staged_dir)

    if not project_dir.is_dir():
        raise PreconditionError(
            project_dir, f"Project directory {project_dir} does not exist or is not a directory"
        )
    if staged_dir.exists() or staged_dir.is_symlink():
        raise PreconditionError(
            staged_dir, f"Staging directory {staged_dir} already exists; remove it first"
        )


def build_ignore(
    project_dir: Path,
    exclusions: Iterable[str],
) -> Callable[[str, list[str]], set[str]]:
    """Return a shutil.copytree ignore callable for the given patterns."""
    root = Path(project_dir)
    name_patterns: list[tuple[str, bool]] = []
    path_patterns: list[tuple[str, bool]] = []

    for raw in exclusions:
        dir_only = raw.endswith("/") and len(raw) > 1
        pattern = raw.rstrip("/") if dir_only else raw
        if "/" in pattern:
            path_patterns.append((pattern.lstrip("/"), dir_only))
        else:
            name_patterns.append((pattern, dir_only))

    def _ignore(directory: str, names: list[str]) -> set[str]:
        ignored: set[str] = set()
        relative_dir = Path(directory).relative_to(root)
        for name in names:
            relative = (relative_dir / name).as_posix()
            is_dir: bool | None = None
            for pattern, dir_only in name_patterns:
                if fnmatch.fnmatchcase(name, pattern):
                    if dir_only:
                        if is_dir is None:
                            is_dir = os.path.isdir(os.path.join(directory, name))
                        if not is_dir:
                            continue
                    ignored.add(name)
                    break
            else:
                for pattern, dir_only in path_patterns:
                    if fnmatch.fnmatchcase(relative, pattern):
                        if dir_only and not os.path.isdir(os.path.join(directory, name)):
                            continue
                        ignored.add(name)
                        break
        if ignored:
            logger.debug("Excluding from %s: %s", relative_dir.as_posix(), sorted(ignored))
        return ignored

    return _ignore


def _copy_file(src: str, dst: str) -> str:
    logger.debug("Staging %s", src)
    return shutil.copy2(src, dst)


def copy_tree(project_dir: Path, staged_dir: Path, exclusions: Iterable[str]) -> None:
    """Copy project_dir to staged_dir, skipping excluded entries.

    Raises shutil.Error after copying everything it could when individual
    entries fail.
    """
    shutil.copytree(
        project_dir,
        staged_dir,
        symlinks=True,
        ignore=build_ignore(project_dir, exclusions),
        copy_function=_copy_file,
    )


def scrub_editor_xattrs(staged_dir: Path, keys: Iterable[str] = EDITOR_XATTRS) -> None:
    """Remove editor extended attributes from every entry of staged_dir.

    Missing attributes and platforms without xattr support are not errors.
    """
    keys = tuple(keys)
    remove = _xattr_remover()
    if remove is None:
        logger.debug("No extended attribute support; skipping scrub")
        return

    for root, dirnames, filenames in os.walk(staged_dir):
        for name in (*dirnames, *filenames):
            path = os.path.join(root, name)
            for key in keys:
                remove(path, key)


def _xattr_remover() -> Callable[[str, str], None] | None:
    """Pick the way this platform removes an extended attribute."""
    if hasattr(os, "removexattr"):
        return _remove_xattr_native
    if shutil.which("xattr"):
        return _remove_xattr_command
    return None


def _remove_xattr_native(path: str, key: str) -> None:
    try:
        os.removexattr(path, key, follow_symlinks=False)
    except OSError:
        pass  # attribute absent or unsupported on this filesystem


def _remove_xattr_command(path: str, key: str) -> None:
    # macOS ships an xattr tool but no os.removexattr
    try:
        subprocess.run(
            ["xattr", "-d", key, path],
            capture_output=True,
            text=True,
            timeout=30,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired):
        pass


def stage_tree(
    project_dir: Path,
    staged_dir: Path,
    exclusions: Iterable[str],
) -> StepResult:
    """Create the staged tree and scrub editor attributes from it.

    Copy failures are recorded in the returned StepResult; the scrub still
    runs over whatever was copied.
    """
    project_dir = Path(project_dir)
    staged_dir = Path(staged_dir)
    exclusions = tuple(exclusions)

    result = run_step(
        "stage",
        str(staged_dir),
        lambda: copy_tree(project_dir, staged_dir, exclusions),
    )

    if staged_dir.is_dir():
        scrub_editor_xattrs(staged_dir)
    return result
