"""Archivers — one implementation per FormatTag.

Every archive is rooted at the staged directory's name, so unpacking
myapp-1.2.3.tar.gz yields a single myapp-1.2.3/ directory. Archives are
written next to the staged tree, overwriting any previous artifact of the
same name.

Callers go through archive_all(); the ARCHIVERS table is the only place a
format is bound to its implementation.
"""

import logging
import os
import stat
import tarfile
import time
import zipfile
from pathlib import Path
from typing import Iterable, Protocol, runtime_checkable

from relpack.packaging.steps import run_step
from relpack.packaging.types import FormatTag, StepResult, artifact_name

logger = logging.getLogger(__name__)


@runtime_checkable
class Archiver(Protocol):
    """Protocol for archive writers.

    Implementations raise on failure; archive_all() turns that into a
    failed StepResult.
    """

    def write(self, staged_dir: Path, output: Path) -> None:
        """Write an archive of staged_dir to output."""
        ...


class TarArchiver:
    """Compressed tarball via tarfile ("gz" or "bz2")."""

    def __init__(self, compression: str):
        self.compression = compression

    def write(self, staged_dir: Path, output: Path) -> None:
        with tarfile.open(output, f"w:{self.compression}") as archive:
            archive.add(staged_dir, arcname=staged_dir.name, filter=_log_member)


class ZipArchiver:
    """Deflated zip with explicit directory entries, like `zip -r`.

    Symlinks are stored as link entries (as `zip -y` does), matching what
    the staged copy and the tarballs hold.
    """

    def write(self, staged_dir: Path, output: Path) -> None:
        base = staged_dir.parent
        with zipfile.ZipFile(output, "w", zipfile.ZIP_DEFLATED) as archive:
            archive.write(staged_dir, staged_dir.name)
            for root, dirnames, filenames in os.walk(staged_dir):
                dirnames.sort()
                for name in dirnames + sorted(filenames):
                    path = Path(root) / name
                    arcname = path.relative_to(base).as_posix()
                    logger.debug("Archiving %s", arcname)
                    if path.is_symlink():
                        _write_symlink(archive, path, arcname)
                    else:
                        archive.write(path, arcname)


def _write_symlink(archive: zipfile.ZipFile, path: Path, arcname: str) -> None:
    st = os.lstat(path)
    info = zipfile.ZipInfo(arcname, date_time=time.localtime(st.st_mtime)[:6])
    info.create_system = 3  # unix, so external_attr carries the mode
    info.external_attr = (stat.S_IFLNK | stat.S_IMODE(st.st_mode)) << 16
    archive.writestr(info, os.readlink(path))


def _log_member(member: tarfile.TarInfo) -> tarfile.TarInfo:
    logger.debug("Archiving %s", member.name)
    return member


ARCHIVERS: dict[FormatTag, Archiver] = {
    FormatTag.TGZ: TarArchiver("gz"),
    FormatTag.TBZ: TarArchiver("bz2"),
    FormatTag.ZIP: ZipArchiver(),
}


def archive_one(staged_dir: Path, fmt: FormatTag) -> tuple[StepResult, Path]:
    """Emit one artifact for fmt and return its step result and path."""
    staged_dir = Path(staged_dir)
    output = staged_dir.parent / artifact_name(staged_dir.name, fmt)
    archiver = ARCHIVERS[fmt]

    result = run_step(
        f"archive:{fmt}",
        str(output),
        lambda: archiver.write(staged_dir, output),
    )
    if not result.is_success:
        _discard_partial(output)
    return result, output


def _discard_partial(output: Path) -> None:
    """Remove a half-written artifact so it cannot pass for a finished one."""
    try:
        output.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not remove partial artifact %s: %s", output, exc)


def archive_all(
    staged_dir: Path,
    formats: Iterable[FormatTag],
) -> tuple[list[StepResult], list[Path]]:
    """Run every requested format in order.

    A failed format does not stop the rest. Returns all step results and
    the paths of the artifacts that were written successfully.
    """
    steps: list[StepResult] = []
    artifacts: list[Path] = []

    for fmt in formats:
        result, output = archive_one(staged_dir, FormatTag(fmt))
        steps.append(result)
        if result.is_success and output not in artifacts:
            artifacts.append(output)

    return steps, artifacts
